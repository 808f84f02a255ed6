#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

The keymap is a comma-separated list of 16 host key codes, one for each of the
keys 0-F in order.  Plugins translate host key events through this map and set
the matching key on the emulated keypad.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import NUM_KEYS


class InputsError(Exception):
    pass


class Inputs:
    def __init__(self, keymap, renderer, keypad):
        self.keymap_dict = {}
        self.renderer = renderer
        self.keypad = keypad
        keymap_split = keymap.split(",")

        if len(keymap_split) != NUM_KEYS:
            raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

        for key_num, key_defined in enumerate(keymap_split):
            try:
                key_defined_ord = int(key_defined)
            except ValueError:
                raise InputsError("Defined keys are not all integer values") from None

            if key_defined_ord in self.keymap_dict:
                raise InputsError("Duplicate keys defined")

            self.keymap_dict[key_defined_ord] = key_num

    def host_key_event(self, host_key, pressed):
        # Returns the emulated key number, or None if the host key isn't mapped
        hex_key = self.keymap_dict.get(host_key)

        if hex_key is not None:
            self.keypad.set_key(hex_key, pressed)

        return hex_key

    def process_messages(self):
        return False  # Don't exit the program

    def can_quit(self):
        # There is no window or keyboard to ask with
        return False

    def shutdown(self):
        pass
