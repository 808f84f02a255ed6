#!/usr/bin/env python3

"""
Null Audio Plugin

Serves as a base class for other Audio plugins.  Can be used on its own if no
sound is required.

The CPU only ever sends two signals: the buzzer being switched on or off when
the sound timer is loaded, and the sound timer running out.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        # Buzzer should be disabled (not playing sounds) by default
        self.buzzer_enabled = False
        self.sounds_finished = 0

    def enable_buzzer(self, enabled):
        # The buzzer should play sounds when the sound timer is >0
        self.buzzer_enabled = enabled

    def sound_finished(self):
        # The sound timer has reached zero
        self.sounds_finished += 1
        self.enable_buzzer(False)

    def shutdown(self):
        pass
