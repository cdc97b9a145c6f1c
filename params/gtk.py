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

"""Gtk parameter implementations.

Each parameter parses its starting value exactly like its text
counterpart (overrides, then environment, then default) and then
tracks a live widget.
"""

import gi
gi.require_version("Gtk", "3.0")
gi.require_version("Gdk", "3.0")
from gi.repository import Gtk
from gi.repository import Gdk

import params.text as text


class Parameter(object):

    """Mixin giving text parameters a live Gtk widget."""

    def makeWidget(self, value, changed):
        """Return a Gtk.Widget showing `value`.

        `changed` must be called with no arguments whenever the user
        edits the value.
        """
        raise NotImplementedError()

    def getValue(self):
        """Return the current widget value."""
        raise NotImplementedError()


class ChoiceParameter(text.ChoiceParameter, Parameter):

    def makeWidget(self, value, changed):
        self.widget = Gtk.ComboBoxText()
        for item in self.alternatives:
            self.widget.append_text(item)
        self.widget.set_active(self.alternatives.index(value))
        self.widget.connect("changed", lambda *unused: changed())
        return self.widget

    def getValue(self):
        return self.widget.get_active_text()


class ColorParameter(text.ColorParameter, Parameter):

    def makeWidget(self, value, changed):
        self.widget = Gtk.ColorButton.new_with_rgba(Gdk.RGBA(*value))
        self.widget.set_use_alpha(True)
        self.widget.connect("color-set", lambda *unused: changed())
        return self.widget

    def getValue(self):
        rgba = self.widget.get_rgba()
        return (rgba.red, rgba.green, rgba.blue, rgba.alpha)


class NumericParameter(text.NumericParameter, Parameter):

    def makeWidget(self, value, changed):
        self.adjustment = Gtk.Adjustment(
            value,
            self.lower,
            self.upper,
            self.step)
        self.adjustment.connect("value-changed", lambda *unused: changed())
        scale = Gtk.Scale.new(
            Gtk.Orientation.HORIZONTAL,
            self.adjustment)
        scale.set_draw_value(True)
        scale.set_digits(0 if isinstance(self.default, int) else 2)
        entry = Gtk.SpinButton.new(self.adjustment, self.step, 3)

        ret = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL)
        ret.pack_start(entry, False, False, 12)
        ret.pack_start(scale, True, True, 12)
        return ret

    def getValue(self):
        # spin buttons hand back floats; keep integer levels integral
        return type(self.default)(self.adjustment.get_value())


class ToggleParameter(text.ToggleParameter, Parameter):

    def makeWidget(self, value, changed):
        self.widget = Gtk.CheckButton()
        self.widget.set_active(value)
        self.widget.connect("toggled", lambda *unused: changed())
        return self.widget

    def getValue(self):
        return self.widget.get_active()


class ParameterGroup(text.ParameterGroup):

    """Parameters shown as a list of live controls.

    Until `makeWidgets()` has been called, values come from the text
    lookup. Afterwards they come from the widgets, and every edit is
    reported to the callbacks registered with `connect()`.
    """

    def __init__(self, environ=None):
        super().__init__(environ)
        self.callbacks = []
        self.listbox = None

    def connect(self, callback):
        """Call `callback(values)` whenever a control changes."""
        self.callbacks.append(callback)

    def changed(self):
        values = self.getValues()
        for callback in self.callbacks:
            callback(values)

    def makeWidgets(self, container):
        """Create a widget for each parameter, adding them into `container`.

        Existing children of `container` are destroyed first, so this
        doubles as the way to show freshly loaded values.
        """
        listbox = Gtk.ListBox()
        listbox.set_selection_mode(Gtk.SelectionMode.NONE)
        size_group = Gtk.SizeGroup(mode=Gtk.SizeGroupMode.HORIZONTAL)

        # read the starting values before any widget exists
        values = text.ParameterGroup.getValues(self)
        self.listbox = None

        for name, param in self.params.items():
            row = Gtk.ListBoxRow()
            box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6)
            label = Gtk.Label.new("<b><tt>%s</tt></b>" % name)
            widget = param.makeWidget(values[name], self.changed)

            box.set_border_width(5)
            row.add(box)

            label.set_use_markup(True)
            label.set_justify(Gtk.Justification.LEFT)
            box.pack_start(label, False, True, 12)

            size_group.add_widget(label)
            box.pack_end(widget, True, True, 12)
            listbox.add(row)

        for child in container.get_children():
            child.destroy()

        container.add(listbox)
        container.show_all()
        self.listbox = listbox

    def getValues(self):
        if self.listbox is None:
            return super().getValues()
        return {name: param.getValue() for name, param in self.params.items()}

    def getInitEnv(self):
        return {
            'params': self,
            'Choice': ChoiceParameter,
            'Color': ColorParameter,
            'Numeric': NumericParameter,
            'Toggle': ToggleParameter,
        }
