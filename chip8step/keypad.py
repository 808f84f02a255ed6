#!/usr/bin/env python3

"""
Keypad Emulator

Holds the pressed/released state of the 16 hexadecimal keys (0-F).  Only the
host input plugins should change key state, and only through 'set_key', which
rejects anything that isn't a valid key number.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.key_down = [False] * NUM_KEYS

    def set_key(self, key, pressed):
        if not 0 <= key < NUM_KEYS:
            raise KeypadError("Invalid key 0x{:x}.  Keys must be in the range 0-F".format(key))

        self.key_down[key] = bool(pressed)

    def is_key_down(self, key):
        if not 0 <= key < NUM_KEYS:
            raise KeypadError("Invalid key 0x{:x}.  Keys must be in the range 0-F".format(key))

        return self.key_down[key]

    def get_first_pressed(self):
        # Lowest-numbered key wins if several are held
        for key, down in enumerate(self.key_down):
            if down:
                return key

        return None

    def clear(self):
        for key in range(NUM_KEYS):
            self.key_down[key] = False
