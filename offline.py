#! /usr/bin/python3
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


"""Offline rendering of the wave indicator.

Feeds JSON events from stdin to a WaveAnimator and renders frames to a
file as determined by the given options.

Intended mainly for batch processing workflows (documentation, unit
tests, etc).

The following modes of operation are supported:
- oneshot    -- apply all of stdin, then render a single frame.
- sequence   -- render a frame per input line as a separate file in
                the given directory (png only).
- slideshow  -- render a frame per input line as a separate page in
                the given file (ps and pdf only).

Between frames, the animation is advanced by `--ticks` ticks.
"""

import argparse
import json
import logging
import os
import sys

import cairo

import params.text as params
from waveview import ManualTicker, WaveAnimator, define_params


logger = logging.getLogger(__name__)


def mm_to_in(mm):
    return mm / 25.4

def in_to_pt(inches):
    return inches * 72

def parse_unit(value):
    # - no unit: pixels / points.
    # - mm: convert to inch, then convert points
    # - in: convert to to points.
    # - pt: do not convert.
    if value.endswith("mm"):
        return in_to_pt(mm_to_in(float(value[:-2])))
    elif value.endswith("in"):
        return in_to_pt(float(value[:-2]))
    elif value.endswith("pt"):
        return float(value[:-2])
    else:
        return float(value)


class UserError(Exception):
    pass


def read_events(stream):
    """Yield one event dict per non-blank line of `stream`."""
    for number, line in enumerate(stream, 1):
        line = line.strip()
        if not line:
            continue
        try:
            event = json.loads(line)
        except ValueError as e:
            logger.warning("line %d: skipping malformed input: %s", number, e)
            continue
        if not isinstance(event, dict):
            logger.warning("line %d: skipping non-object input", number)
            continue
        yield event


class SurfaceWrapper:
    """Abstract the different output formats cairo supports.

    There are some wierd asymmetries in the cairo API. This family of
    classes attempts to smooth this over.

    In particular, there's no obvious way to create a "blank" PNG
    surface for painting. Rather, one creates an ImageSurface and writes
    it as a .png file.

    While we're here, we also abstract over the different supported
    modes of operation.
    """

    @classmethod
    def from_args(self, args):
        fmt = args.format
        if   fmt == "png": return PngSurfaceWrapper(args)
        elif fmt == "ps":  return PsSurfaceWrapper(args)
        elif fmt == "pdf": return PdfSurfaceWrapper(args)
        elif fmt == "svg": return SvgSurfaceWrapper(args)
        raise UserError("Unsupported format: %s" % fmt)

    def __init__(self, args):
        width, height = args.size
        self.width = int(width)
        self.height = int(height)
        if self.width <= 0 or self.height <= 0:
            raise UserError("Output size must be positive.")
        self.output = args.output
        self.ticks = args.ticks
        self.ticker = ManualTicker()

    def render(self, animator):
        try:
            self.cr.save()
            animator.draw(self.cr, self.width, self.height)
        finally:
            self.cr.restore()

    def advance(self):
        self.ticker.advance(self.ticks)

    def oneshot(self, animator, events):
        animator.start(self.ticker)
        try:
            for event in events:
                animator.update(event)
                self.advance()
            self.render(animator)
        finally:
            animator.stop()
            self.write()

    def sequence(self, animator, events):
        raise UserError("This format does not support image sequences.")

    def slideshow(self, animator, events):
        animator.start(self.ticker)
        try:
            for index, event in enumerate(events):
                if index:
                    self.next_page()
                animator.update(event)
                self.render(animator)
                self.advance()
        finally:
            animator.stop()
            self.write()

    def next_page(self):
        """Defined in supported subclasses"""
        raise UserError("This format does not support slideshows.")

    def write(self):
        """Defined by all subclasses."""
        raise NotImplementedError


class PngSurfaceWrapper(SurfaceWrapper):

    def __init__(self, args):
        super().__init__(args)
        self.surface = cairo.ImageSurface(
            cairo.Format.ARGB32, self.width, self.height)
        self.cr = cairo.Context(self.surface)

        if self.output is None:
            # The only reason for this is that `cairo_surface_write_to_png_stream`
            # is not exposed by pycairo.
            raise UserError("PNG does not support streaming to stdout.")

    def write(self):
        self.surface.write_to_png(self.output)

    def slideshow(self, animator, events):
        raise UserError("The PNG format does not support slideshows.")

    def sequence(self, animator, events):
        if os.path.exists(self.output) and not os.path.isdir(self.output):
            raise UserError("%s exists and is not a directory." % self.output)
        try:
            os.makedirs(self.output, exist_ok=True)
        except OSError as e:
            raise UserError("Could not create %s: %s" % (self.output, e))
        animator.start(self.ticker)
        try:
            for index, event in enumerate(events):
                animator.update(event)
                self.render(animator)
                path = os.path.join(self.output, "%d.png" % index)
                self.surface.write_to_png(path)
                logger.debug("wrote %s", path)
                self.advance()
        finally:
            animator.stop()


class VectorSurfaceWrapper(SurfaceWrapper):

    """Common behavior of the page-oriented formats."""

    surface_class = None

    def __init__(self, args):
        super().__init__(args)
        target = self.output if self.output is not None else sys.stdout.buffer
        self.surface = self.surface_class(
            target, self.width, self.height)
        self.cr = cairo.Context(self.surface)

    def next_page(self):
        self.cr.show_page()

    def write(self):
        self.surface.finish()


class PdfSurfaceWrapper(VectorSurfaceWrapper):
    surface_class = cairo.PDFSurface


class PsSurfaceWrapper(VectorSurfaceWrapper):
    surface_class = cairo.PSSurface


class SvgSurfaceWrapper(VectorSurfaceWrapper):
    surface_class = cairo.SVGSurface

    def slideshow(self, animator, events):
        raise UserError("The SVG format does not support slideshows.")


def make_parser():
    desc = "Render wave frames from a stream of JSON events."
    parser = argparse.ArgumentParser(description=desc)

    parser.add_argument(
        "-m", "--mode",
        help="Specifies output mode",
        metavar="MODE",
        choices=("oneshot", "sequence", "slideshow"),
        default="oneshot"
    )

    parser.add_argument(
        "-f", "--format",
        help="Output file format",
        metavar="FMT",
        choices=("png", "ps", "pdf", "svg"),
        required=True
    )

    parser.add_argument(
        "-o", "--output",
        help="The output file path (defaults to `stdout`)",
        metavar="FILE",
        type=str
    )

    parser.add_argument(
        "-s", "--size",
        help="The width and height of the output image",
        nargs=2,
        type=parse_unit,
        required=True
    )

    parser.add_argument(
        "-t", "--ticks",
        help="Animation ticks to advance between frames",
        metavar="N",
        default=1,
        type=int,
    )

    parser.add_argument(
        "-c", "--config",
        help="JSON file of parameter values",
        metavar="FILE",
    )

    return parser


def main(argv, stdin):
    args = make_parser().parse_args(argv)

    param_group = define_params(params.ParameterGroup())
    try:
        if args.config is not None:
            param_group.load(args.config)
        values = param_group.getValues()
    except (OSError, ValueError) as e:
        raise UserError("Bad configuration: %s" % e)

    animator = WaveAnimator.from_params(values)
    wrapper = SurfaceWrapper.from_args(args)
    # the sample window follows the output width from the first event on
    animator.resize(wrapper.width, wrapper.height)

    events = read_events(stdin)
    if   args.mode == "oneshot":   wrapper.oneshot(animator, events)
    elif args.mode == "sequence":  wrapper.sequence(animator, events)
    elif args.mode == "slideshow": wrapper.slideshow(animator, events)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
            format='%(asctime)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S')
    try:
        main(sys.argv[1:], sys.stdin)
    except UserError as e:
        print(e, file=sys.stderr)
        exit(-1)
