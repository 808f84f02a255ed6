#!/usr/bin/env python3

"""
Delay and Sound Timers

Both timers are single bytes which count down towards zero.  While the sound
timer is above zero, the buzzer sounds.

How often the timers count down depends on the chosen policy:
    * step     - One decrement every time an instruction completes.  Timer
                 speed therefore follows the CPU speed, and the host loop has
                 to pace the CPU to get the usual 60Hz countdown.
    * realtime - Decrement at 60Hz of elapsed host time, sampled whenever an
                 instruction completes.  If the CPU gets lagged, the timers
                 will jump.

The audio plugin is told when the buzzer should start, and when the sound
timer has run out.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import TIMER_POLICY_STEP, TIMER_POLICY_REALTIME, TIMER_POLICIES

TIMER_FREQ = 60.0  # 60Hz emulated system timer refresh


class TimerError(Exception):
    pass


class Timers:
    def __init__(self, audio, policy=TIMER_POLICY_STEP, clock=perf_counter):
        if policy not in TIMER_POLICIES:
            raise TimerError("Unknown timer policy '{}'.  Choose from: {}".format(policy, ", ".join(TIMER_POLICIES)))

        self.audio = audio
        self.policy = policy
        self.clock = clock
        self.reset()

    def reset(self):
        self.dt = 0  # Delay timer integer (byte)
        self.ds = 0  # Sound timer integer (byte)
        self.last_tick_time = self.clock()

    def set_delay(self, value):
        self.dt = value & 0xFF
        self.last_tick_time = self.clock()

    def set_sound(self, value):
        self.ds = value & 0xFF
        self.last_tick_time = self.clock()
        # Allow the program to start the buzzer, or immediately stop it before the sound timer hits zero
        self.audio.enable_buzzer(self.ds > 0)

    def tick(self):
        # Returns True if the sound timer has just run out
        if self.policy == TIMER_POLICY_REALTIME:
            this_time = self.clock()
            periods = int((this_time - self.last_tick_time) * TIMER_FREQ)

            if periods <= 0:
                return False

            # Only move on by whole periods, so fractions aren't lost between steps
            self.last_tick_time += periods / TIMER_FREQ
        else:
            periods = 1

        if self.dt > 0:
            self.dt = max(0, self.dt - periods)

        if self.ds > 0:
            self.ds = max(0, self.ds - periods)

            if self.ds == 0:
                # Sound timer just reached zero.  Stop the audio.
                self.audio.sound_finished()
                return True

        return False
