#!/usr/bin/python3
# wave-view: Animated sine-wave indicator for cairo.
#
# Copyright (C) 2020  Brandon Lewis
#
# This program is free software: you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public License
# as published by the Free Software Foundation, either version 3 of
# the License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program.  If not, see
# <https://www.gnu.org/licenses/>.


"""
Interactive host for the wave indicator.

Shows the wave in a Gtk drawing area next to a pane of live parameter
controls. Amplitude events are read as JSON lines from stdin, e.g.:

  ./fake_amplitude.py | ./wave_sandbox.py --config wave.json
"""

import gi
gi.require_version("Gtk", "3.0")
gi.require_foreign("cairo")
from gi.repository import GLib
from gi.repository import Gtk

import argparse
import json
import logging
import os
import sys
import threading

import params.gtk as params
from waveview import WaveAnimator, define_params

try:
    from watchdog.observers import Observer
    from watchdog.events import FileSystemEventHandler
    HAVE_WATCHDOG=True
except ImportError:
    HAVE_WATCHDOG=False


logger = logging.getLogger(__name__)


class GLibTicker(object):

    """Runs tick callbacks from GLib timeouts on the main loop."""

    def add(self, interval, callback):
        return GLib.timeout_add(int(interval), callback)

    def remove(self, source):
        GLib.source_remove(source)


class ReaderThread(threading.Thread):

    """Parse JSON events from a stream, handing each to the main loop.

    Nothing here touches the animator: `deliver` runs on the Gtk thread
    via `GLib.idle_add`.
    """

    def __init__(self, stream, deliver):
        super().__init__(daemon=True)
        self.stream = stream
        self.deliver = deliver

    def run(self):
        for line in self.stream:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except ValueError as e:
                logger.warning("skipping malformed line %r: %s", line, e)
                continue
            if not isinstance(event, dict):
                logger.warning("skipping non-object line %r", line)
                continue
            GLib.idle_add(self.deliver, event)
        logger.debug("input closed")


if HAVE_WATCHDOG:
    class FileWatcher(FileSystemEventHandler):

        """Fire a callback when the specified file changes."""

        def __init__(self):
            super().__init__()
            self.callbacks = {}
            self.observer = Observer()

        def start(self):
            self.observer.start()

        def stop(self):
            self.observer.stop()

        def watchFile(self, path, callback):
            # unlike inotify, `watchdog` cannot watch a single file for
            # changes directly. instead we must watch the parent directory
            # for all events, and filter out the ones we don't care about.
            path = os.path.abspath(path)
            parent = os.path.split(path)[0]
            self.observer.schedule(self, parent, recursive=False)
            self.callbacks[path] = callback

        def on_modified(self, event):
            if event.src_path in self.callbacks:
                self.callbacks[event.src_path]()

        # editors that save by replacing the file only produce a create
        on_created = on_modified


class GUI(object):

    """Gtk window hosting a WaveAnimator."""

    def __init__(self, config=None):
        self.config = config
        self.param_group = define_params(params.ParameterGroup())
        if self.config is not None:
            self.param_group.load(self.config)

        self.da = Gtk.DrawingArea()
        self.da.set_size_request(320, 120)
        self.da.connect('draw', self.draw)
        self.da.connect('size-allocate', self.resize)
        self.da.connect('destroy', self.teardown)

        self.animator = WaveAnimator.from_params(
            self.param_group.getValues(),
            invalidate=self.da.queue_draw)
        self.param_group.connect(self.animator.configure)
        self.ticker = GLibTicker()
        self.reader = ReaderThread(sys.stdin, self.deliver)

        self.fw = None
        if self.config is not None and HAVE_WATCHDOG:
            self.fw = FileWatcher()
            self.fw.watchFile(self.config, self.onFileChanged)
        elif self.config is not None:
            logger.warning(
                "To enable auto-reload, please install `python3-watchdog`!")

        self.parameters = Gtk.ScrolledWindow()

        pane = Gtk.Paned(orientation=Gtk.Orientation.HORIZONTAL)
        pane.pack1(self.da, True, False)
        pane.pack2(self.parameters, False, True)
        pane.set_position(640)

        self.window = Gtk.Window()
        self.window.set_title("Wave Sandbox")
        self.window.connect("destroy", Gtk.main_quit)
        self.window.add(pane)
        self.window.resize(1024, 480)

        self.param_group.makeWidgets(self.parameters)
        self.window.show_all()

    def reload(self, *unused):
        logger.info("reloading: %s", self.config)
        try:
            self.param_group.load(self.config)
        except (OSError, ValueError) as e:
            logger.error("could not reload %s: %s", self.config, e)
            return False
        self.param_group.makeWidgets(self.parameters)
        self.animator.configure(self.param_group.getValues())
        return False

    def onFileChanged(self):
        GLib.idle_add(self.reload)

    def deliver(self, event):
        try:
            self.animator.update(event)
        except (TypeError, ValueError) as e:
            logger.warning("skipping bad event %r: %s", event, e)
        return False

    def run(self):
        if self.fw is not None:
            self.fw.start()
        self.reader.start()
        self.animator.start(self.ticker)
        Gtk.main()

    def teardown(self, *unused):
        self.animator.stop()
        if self.fw is not None:
            self.fw.stop()

    def resize(self, widget, alloc):
        self.animator.resize(alloc.width, alloc.height)

    def draw(self, widget, cr):
        alloc = widget.get_allocation()
        self.animator.draw(cr, alloc.width, alloc.height)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
            format='%(asctime)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S')

    parser = argparse.ArgumentParser(description="Animated wave indicator.")
    parser.add_argument(
        "-c", "--config",
        help="JSON file of parameter values, reloaded when it changes",
        metavar="FILE")
    args = parser.parse_args(sys.argv[1:])

    GUI(args.config).run()
