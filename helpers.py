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


"""Geometry and drawing helpers shared by the wave hosts.

Nothing in here imports cairo: `Helper` only calls methods on whatever
context object it is given, so the wave geometry can be exercised
without a display or a cairo build.
"""


def parse_color(text):
    """Parse `#RRGGBB` or `#AARRGGBB` into an (r, g, b, a) float tuple."""

    digits = text[1:] if text.startswith("#") else text

    if len(digits) == 6:
        a = 0xFF
        r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    elif len(digits) == 8:
        a, r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4, 6))
    else:
        raise ValueError("Could not parse as color: " + text)

    return (r / 0xFF, g / 0xFF, b / 0xFF, a / 0xFF)


class Helper(object):

    """Wraps a cairo context in a higher-level API.

    Wrapper methods which take Point objects instead of x/y pairs:
    - move_to
    - line_to
    - polyline

    Transform Context Managers (so you cannot forget `restore()`):
    - save
    """

    def __init__(self, cr):
        self.cr = cr

    def move_to(self, point):
        self.cr.move_to(*point)

    def line_to(self, point):
        self.cr.line_to(*point)

    def polyline(self, points):
        """Add an open path through `points`. Empty input adds nothing."""
        if not points:
            return
        self.move_to(points[0])
        for point in points[1:]:
            self.line_to(point)

    def paint(self, rgba):
        with self.save():
            self.cr.set_source_rgba(*rgba)
            self.cr.paint()

    def save(self):
        return Save(self.cr)


class Point(object):

    """Reasonably terse 2D Point class."""

    __slots__ = ("x", "y")

    def __init__(self, x, y): self.x = float(x) ; self.y = float(y)
    def __eq__(self, o):
        return isinstance(o, Point) and (self.x, self.y) == (o.x, o.y)
    def __repr__(self):       return "(%g,%g)" % (self.x, self.y)
    def __iter__(self):       yield  self.x ; yield self.y
    def __hash__(self):       return hash((self.x, self.y))


class Save(object):

    """A context manager which Keeps calls to save() and restore() balanced."""

    def __init__(self, cr):
        self.cr = cr

    def __enter__(self):
        self.cr.save()

    def __exit__(self, unused1, unused2, unused3):
        self.cr.restore()
