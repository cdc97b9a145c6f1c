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

"""Text-based parameter implementations.

Values are parsed from the environment (`WAVEVIEW_<NAME>`) or from a
JSON file of overrides.
"""

from collections import OrderedDict
import json
import logging
import os

from helpers import parse_color


logger = logging.getLogger(__name__)


class Parameter(object):

    """A uniform interface for creating parameters from the environment."""

    def require(self, value, allowed_types):
        """Raise an error if `value` is not one of `allowed_types`.

        `allowed_types` may be a tuple or a single type.
        """

        if not isinstance(value, allowed_types):
            raise TypeError("Expected one of %s, got %r." % (
                ", ".join(repr(t) for t in allowed_types),
                value
            ))

    def parse(self, text):
        raise NotImplementedError


class ChoiceParameter(Parameter):

    """A parameter representing a choice of alternatives."""

    def __init__(self, alternatives, default):
        self.require(alternatives, (tuple, list))

        if not default in alternatives:
            raise ValueError("Default must be one of the alternatives")

        self.alternatives = alternatives
        self.default = default

    def parse(self, text):
        if text not in self.alternatives:
            raise ValueError(
                "{} is not one of {}".format(text, self.alternatives))
        return text


class ColorParameter(Parameter):

    """An RGBA Color value, given as `#RRGGBB` or `#AARRGGBB`."""

    def __init__(self, default="#000000"):
        self.require(default, (str,))
        self.default = parse_color(default)

    def parse(self, text):
        if isinstance(text, (list, tuple)):
            return tuple(float(c) for c in text)
        return parse_color(text)


class NumericParameter(Parameter):

    """A scalar numeric value, with a finite range."""

    def __init__(self, lower, upper, step=1/128.0, default=0.5):
        allowed = (int, float)
        self.require(lower, allowed)
        self.require(upper, allowed)
        self.require(default, allowed)
        self.lower = lower
        self.upper = upper
        self.step = step
        self.default = default

    def parse(self, text):
        # environment strings and JSON numbers go through the same path
        value = float(text)
        if isinstance(self.default, int):
            if not value.is_integer():
                raise ValueError("{} is not a whole number".format(text))
            value = int(value)
        if self.lower <= value <= self.upper:
            return value
        else:
            raise ValueError(
                "{} not in range [{}, {}]".format(value, self.lower, self.upper)
            )


class ToggleParameter(Parameter):

    """A parameter representing a binary choice."""

    def __init__(self, default):
        self.require(default, bool)
        self.default = default

    def parse(self, text):
        if isinstance(text, bool):
            return text
        elif text == "true":
            return True
        elif text == "false":
            return False

        raise ValueError("Could not parse {} as bool".format(text))


class ParameterGroup(object):

    """Manages the parameters required by the wave.

    Values are looked up in this order: the overrides from the last
    `load()`, the environment, the parameter default.
    """

    prefix = "WAVEVIEW_"

    def __init__(self, environ=None):
        self.params = OrderedDict()
        self.environ = os.environ if environ is None else environ
        self.overrides = {}

    def define(self, name, param):
        """Define a new parameter."""

        if name in self.params:
            raise ValueError("Parameter %s already defined" % name)
        self.params[name] = param

    def load(self, path):
        """Read overrides from the JSON object stored at `path`."""

        with open(path, "r") as f:
            overrides = json.load(f)

        if not isinstance(overrides, dict):
            raise ValueError("%s: expected a JSON object" % path)

        unknown = set(overrides) - set(self.params)
        if unknown:
            logger.warning("%s: ignoring unknown parameters %s",
                           path, ", ".join(sorted(unknown)))

        self.overrides = {
            name: value for name, value in overrides.items()
            if name in self.params
        }
        logger.info("loaded %d parameter(s) from %s", len(self.overrides), path)

    def getValues(self):
        """Get the current value for each parameter, as dict."""
        return {
            name: self.getParamValue(name, param)
            for name, param in self.params.items()
        }

    def getParamValue(self, name, param):
        key = self.prefix + name.upper()
        try:
            if name in self.overrides:
                return param.parse(self.overrides[name])
            elif key in self.environ:
                return param.parse(self.environ[key])
        except (TypeError, ValueError) as e:
            raise ValueError("%s: %s" % (name, e))
        return param.default

    def getInitEnv(self):
        return {
            'params': self,
            'Choice': ChoiceParameter,
            'Color': ColorParameter,
            'Numeric': NumericParameter,
            'Toggle': ToggleParameter,
        }
