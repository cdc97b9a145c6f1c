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
Animated sine-wave indicator.

The wave is the sine formula

  y = A sin(2 pi f t + p)

sampled every 10 pixels across the surface, where A comes from a
sliding window of amplitude samples fed by the host, and p (the phase
shift) advances by `speed` on every animation tick.

`WaveAnimator` knows nothing about any particular toolkit. The host
supplies:
- an `invalidate` callback, called whenever a redraw is wanted;
- a ticker (see `ManualTicker`) to drive `on_tick` periodically;
- a cairo-like context and surface size when it wants a frame painted.
"""

from collections import deque, namedtuple
import logging
import math

from helpers import Helper, Point, parse_color


logger = logging.getLogger(__name__)


# Pixels between consecutive samples along the x-axis.
STEP = 10

DEFAULT_FREQUENCY = 180
DEFAULT_AMPLITUDE = 80
DEFAULT_SPEED = 0.5
DEFAULT_FRAME_INTERVAL = 16

BACKGROUND = "#BBDEFB"
WAVE_COLOR = "#64B5F6"
PEAK_COLOR = "#2196F3"

STYLES = ("stroke", "fill")

_UNSET = object()


def amplitude_for_level(level):
    """Map a wave height level to a pixel amplitude."""
    if level > 10:
        return 200
    return level * 20


def speed_for_level(level):
    """Map a wave speed level to a per-tick phase increment."""
    if level > 10:
        return 0.25
    return level / 8


Frame = namedtuple("Frame", ["wave", "peak"])


class SampleBuffer(object):

    """Newest-first list of amplitude samples.

    Samples go in at the front and fall off the back. Capacity is not
    stored here: the owner passes it to `truncate()` after each insert,
    because it depends on the current surface width.
    """

    def __init__(self, samples=()):
        self.samples = deque(samples)

    def __len__(self):
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __getitem__(self, index):
        return self.samples[index]

    def __repr__(self):
        return "SampleBuffer(%r)" % list(self.samples)

    def insert(self, value):
        self.samples.appendleft(value)

    def truncate(self, capacity):
        """Drop samples from the tail until at most `capacity` remain."""
        capacity = max(0, capacity)
        while len(self.samples) > capacity:
            self.samples.pop()

    def clear(self):
        self.samples.clear()


class WaveState(object):

    """The mutable motion parameters of the wave."""

    def __init__(self,
                 frequency=DEFAULT_FREQUENCY,
                 amplitude=DEFAULT_AMPLITUDE,
                 speed=DEFAULT_SPEED,
                 phase_shift=0.0):
        self.frequency = frequency
        self.amplitude = amplitude
        self.speed = speed
        self.phase_shift = phase_shift

    def __repr__(self):
        return "WaveState(frequency=%r, amplitude=%r, speed=%r, phase_shift=%r)" % (
            self.frequency, self.amplitude, self.speed, self.phase_shift)

    def advance(self):
        self.phase_shift += self.speed


class Palette(object):

    """Colors and line width used to paint a frame.

    Colors may be given as `#RRGGBB` / `#AARRGGBB` strings or as
    (r, g, b, a) tuples of floats.
    """

    def __init__(self,
                 background=BACKGROUND,
                 wave=WAVE_COLOR,
                 peak=PEAK_COLOR,
                 line_width=2.0):
        self.background = self.rgba(background)
        self.wave = self.rgba(wave)
        self.peak = self.rgba(peak)
        self.line_width = line_width

    @staticmethod
    def rgba(color):
        if isinstance(color, str):
            return parse_color(color)
        return tuple(color)


class TickHandle(object):

    """Cancels one periodic source registered on a ticker."""

    def __init__(self, ticker, source):
        self.ticker = ticker
        self.source = source
        self.active = True

    def cancel(self):
        if self.active:
            self.active = False
            self.ticker.remove(self.source)


class ManualTicker(object):

    """A ticker driven by hand instead of a main loop.

    Any object with the same `add()` / `remove()` pair can drive a
    `WaveAnimator`. Like a GLib timeout, a callback stays registered
    for as long as it returns True.
    """

    def __init__(self):
        self.sources = {}
        self.next_source = 1

    def add(self, interval, callback):
        source = self.next_source
        self.next_source += 1
        self.sources[source] = (interval, callback)
        return source

    def remove(self, source):
        self.sources.pop(source, None)

    def advance(self, ticks=1):
        for _ in range(ticks):
            for source, (interval, callback) in list(self.sources.items()):
                if source in self.sources and not callback():
                    self.remove(source)


class WaveAnimator(object):

    """Sine-wave indicator driven by a stream of amplitude samples.

    `wave_height` and `wave_speed` are the 0-10 levels a host would
    expose in its UI; levels above 10 clamp to 200 pixels and 0.25
    radians per tick respectively. When a level is not given the
    defaults (amplitude 80, speed 0.5) apply.
    """

    def __init__(self,
                 wave_height=None,
                 wave_speed=None,
                 frequency=DEFAULT_FREQUENCY,
                 palette=None,
                 draw_peak=False,
                 wave_style="stroke",
                 frame_interval=DEFAULT_FRAME_INTERVAL,
                 invalidate=None):
        self.state = WaveState(frequency=frequency)
        self.samples = SampleBuffer()
        self.palette = palette if palette is not None else Palette()
        self.draw_peak = draw_peak
        self.wave_style = wave_style
        self.frame_interval = frame_interval
        self.invalidate = invalidate if invalidate is not None else lambda: None
        self.width = 0
        self.height = 0
        self.ticker = None
        self.handle = None
        self.applied = {}

        if wave_height is not None:
            self.state.amplitude = amplitude_for_level(wave_height)
        if wave_speed is not None:
            self.state.speed = speed_for_level(wave_speed)

    @classmethod
    def from_params(cls, values, invalidate=None):
        """Create an animator from a `ParameterGroup.getValues()` dict."""
        animator = cls(invalidate=invalidate)
        animator.configure(values)
        return animator

    def configure(self, values):
        """Apply a dict of parameter values, as defined by `define_params`.

        Names missing from `values` keep their current setting, and so do
        names whose value is the same as last time: a host that re-sends
        every control on each edit must not undo `set_speed` or
        `set_amplitude` calls made in between.
        """
        values = {
            name: value for name, value in values.items()
            if self.applied.get(name, _UNSET) != value
        }
        if values.get("wave_style", STYLES[0]) not in STYLES:
            raise ValueError("Unknown wave style: %r" % values["wave_style"])
        self.applied.update(values)

        if "wave_height" in values:
            self.state.amplitude = amplitude_for_level(values["wave_height"])
        if "wave_speed" in values:
            self.state.speed = speed_for_level(values["wave_speed"])
        if "draw_peak" in values:
            self.draw_peak = values["draw_peak"]
        if "wave_style" in values:
            self.wave_style = values["wave_style"]

        self.palette = Palette(
            values.get("background", self.palette.background),
            values.get("wave_color", self.palette.wave),
            values.get("peak_color", self.palette.peak),
            values.get("line_width", self.palette.line_width))

        interval = values.get("frame_interval", self.frame_interval)
        if interval != self.frame_interval:
            self.frame_interval = interval
            if self.running:
                # re-arm at the new cadence
                ticker = self.ticker
                self.stop()
                self.start(ticker)

        self.invalidate()

    # Host controls

    def set_speed(self, speed):
        self.state.speed = speed / 8
        self.invalidate()

    def set_amplitude(self, amplitude):
        self.state.amplitude = amplitude * 20
        self.invalidate()

    def add_sample(self, amplitude=None):
        """Push a new amplitude onto the front of the sample window.

        With no argument, the default amplitude is pushed.
        """
        if amplitude is None:
            amplitude = self.state.amplitude
        self.samples.insert(amplitude)
        self.samples.truncate(self.capacity)
        self.invalidate()

    def update(self, event):
        """Apply a host event dict.

        Recognized keys: `amplitude` (add_sample), `speed` (set_speed)
        and `height` (set_amplitude). Other keys are ignored.
        """
        if "speed" in event:
            self.set_speed(float(event["speed"]))
        if "height" in event:
            self.set_amplitude(int(event["height"]))
        if "amplitude" in event:
            self.add_sample(int(event["amplitude"]))

    def resize(self, width, height):
        if (width, height) != (self.width, self.height):
            logger.debug("resize: %sx%s", width, height)
        self.width = width
        self.height = height

    @property
    def capacity(self):
        return max(0, int(self.width // STEP))

    # Animation

    @property
    def running(self):
        return self.handle is not None and self.handle.active

    def start(self, ticker):
        """Begin ticking on `ticker`. Returns the handle that stops it.

        Calling start() while already running returns the existing handle.
        """
        if self.running:
            return self.handle
        self.ticker = ticker
        self.handle = TickHandle(ticker, ticker.add(self.frame_interval, self.on_tick))
        logger.debug("ticker started: every %sms", self.frame_interval)
        return self.handle

    def stop(self):
        if self.running:
            self.handle.cancel()
            logger.debug("ticker stopped")
        self.handle = None

    def on_tick(self):
        self.state.advance()
        self.invalidate()
        return self.running

    # Rendering

    def render(self, width, height):
        """Return the wave as a tuple of Points. Empty when there are no samples."""
        return self._trace(width, height, height // 3)

    def render_peak(self, width, height):
        """Return the secondary wave, traced on a baseline at 2/3 height."""
        return self._trace(width, height, (height // 3) * 2)

    def frame(self, width, height):
        return Frame(self.render(width, height), self.render_peak(width, height))

    def _trace(self, width, height, baseline):
        if not len(self.samples):
            return ()

        quadrant = height // 3
        frequency = self.state.frequency
        shift = self.state.phase_shift

        points = [Point(0, height), Point(0, quadrant)]
        x = 0
        for amplitude in self.samples:
            if not x < width + STEP:
                break
            y = baseline + amplitude * math.sin((x + STEP) * math.pi / frequency + shift)
            points.append(Point(x, y))
            x += STEP
        points.append(Point(width, height))

        return tuple(points)

    def draw(self, cr, width, height):
        """Paint one frame onto the cairo context `cr`.

        The surface size is also recorded, so that the sample window
        follows the width of whatever we last drew on.
        """
        self.resize(width, height)
        helper = Helper(cr)
        helper.paint(self.palette.background)

        frame = self.frame(width, height)
        if not frame.wave:
            return

        with helper.save():
            cr.set_line_width(self.palette.line_width)
            if self.draw_peak:
                self._paint_path(helper, frame.peak, self.palette.peak)
            self._paint_path(helper, frame.wave, self.palette.wave)

    def _paint_path(self, helper, points, rgba):
        helper.polyline(points)
        helper.cr.set_source_rgba(*rgba)
        if self.wave_style == "fill":
            helper.cr.fill()
        else:
            helper.cr.stroke()


def define_params(params):
    """Define the wave parameters on a text or Gtk `ParameterGroup`."""

    env = params.getInitEnv()
    Numeric, Color, Toggle, Choice = (
        env["Numeric"], env["Color"], env["Toggle"], env["Choice"])

    params.define("wave_height", Numeric(0, 20, 1, 4))
    params.define("wave_speed", Numeric(0, 20, 1, 4))
    params.define("frame_interval", Numeric(1, 1000, 1, DEFAULT_FRAME_INTERVAL))
    params.define("line_width", Numeric(0.5, 20.0, 0.5, 2.0))
    params.define("background", Color(BACKGROUND))
    params.define("wave_color", Color(WAVE_COLOR))
    params.define("peak_color", Color(PEAK_COLOR))
    params.define("draw_peak", Toggle(False))
    params.define("wave_style", Choice(list(STYLES), "stroke"))
    return params
