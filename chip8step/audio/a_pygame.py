#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the buzzer within PyGame / SDL.

There is simply a buzzer with an 'on' or 'off' status, so a short 1-bit square
wave pattern is stretched to fit an 8-bit PyGame / SDL sample at the chosen
tone, and then looped for as long as the buzzer is on.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100.0
DEFAULT_VOLUME = 0.1
DEFAULT_TONE = 4000.0  # Bits per second of the pattern below
SQUARE_PATTERN = b"\x00\xFF" * 8  # 128 bits, alternating in blocks of 8


class Audio(AudioBase):
    def __init__(self, tone=DEFAULT_TONE):
        super().__init__()
        pygame.mixer.pre_init(int(PLAYBACK_FREQUENCY), size=8, channels=1, buffer=1, allowedchanges=0)
        pygame.mixer.init()
        self.sound = pygame.mixer.Sound(self._resample(SQUARE_PATTERN, PLAYBACK_FREQUENCY / tone))
        self.sound.set_volume(DEFAULT_VOLUME)

    @staticmethod
    def _resample(pattern, sample_multiplier):
        # Stretch the width and height of the 1-bit waveform to fit the host buffer.  Setting PyGame's playback rate
        # is very slow, so the resampling is done once up front instead.
        resampled_buffer_size = int(len(pattern) * 8 * sample_multiplier)
        resampled_buffer = memoryview(bytearray(resampled_buffer_size))

        for resampled_buffer_pos in range(resampled_buffer_size):
            buffer_byte_pos = resampled_buffer_pos / sample_multiplier
            byte = int(buffer_byte_pos / 8.0)
            bit = 7 - int(buffer_byte_pos % 8.0)
            resampled_buffer[resampled_buffer_pos] = ((pattern[byte] >> bit) & 1) * 0xFF

        return resampled_buffer

    def enable_buzzer(self, enabled):
        # Play or stop buffer playback.  If the sound is already playing, it won't be restarted.
        if enabled:
            if not self.buzzer_enabled:
                self.sound.play(-1)
        elif self.buzzer_enabled:
            self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()
