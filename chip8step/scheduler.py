#!/usr/bin/env python3

"""
Host Loop

Drives a CPU the way a real machine would be driven, one frame at a time:
    1. Poll host inputs, which updates the emulated keypad.
    2. Step the CPU a fixed number of times.
    3. If the framebuffer changed, present it to the renderer.
    4. Sleep until the next frame is due.

If a step fails fatally (stack overflow or underflow, or running off the end
of memory), the CPU is considered halted.  The window stays open and responsive
so the final screen can be seen, but no more instructions are run until the
CPU is reset.  Without a window (the null input plugin), nobody could ever ask
to quit, so run() returns as soon as the CPU halts.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from time import perf_counter, sleep
from .constants import DEFAULT_CYCLES_PER_FRAME, DEFAULT_FRAME_RATE

logger = logging.getLogger(__name__)


class SchedulerError(Exception):
    pass


class Scheduler:
    def __init__(self, cpu, inputs, renderer, cycles_per_frame=DEFAULT_CYCLES_PER_FRAME,
                 frame_rate=DEFAULT_FRAME_RATE, clock=perf_counter, sleeper=sleep):
        if cycles_per_frame is None:
            cycles_per_frame = DEFAULT_CYCLES_PER_FRAME

        if frame_rate is None:
            frame_rate = DEFAULT_FRAME_RATE

        if cycles_per_frame < 1:
            raise SchedulerError("At least one CPU cycle per frame is required")

        if frame_rate <= 0:
            raise SchedulerError("Frame rate must be above zero")

        self.cpu = cpu
        self.inputs = inputs
        self.renderer = renderer
        self.cycles_per_frame = cycles_per_frame
        self.frame_interval = 1.0 / frame_rate
        self.clock = clock
        self.sleeper = sleeper
        self.halted_result = None

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

        self.cpu.framebuffer.attach(renderer)

    def is_halted(self):
        return self.halted_result is not None

    def reset(self):
        # Start the loaded program again from scratch.  The caller must reload the ROM after this.
        self.cpu.reset()
        self.halted_result = None

    def run_frame(self):
        # Returns True if the user asked to quit
        if self.inputs.process_messages():
            return True

        if self.halted_result is None:
            for _ in range(self.cycles_per_frame):
                result = self.cpu.step()
                self.perf_counter_ops += 1

                if result.fatal:
                    self.halted_result = result
                    break

                if result.waiting:
                    # Nothing will change until the keypad does, so wait for the next poll
                    break

        if self.cpu.framebuffer.present(self.renderer):
            self.perf_counter_fps += 1

        return False

    def run(self, max_frames=None):
        frames = 0
        next_frame_time = self.clock()

        while max_frames is None or frames < max_frames:
            this_time = self.clock()

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                self.cpu.framebuffer.report_perf(self.renderer, self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            if self.run_frame():
                logger.info("Quit requested")
                break

            frames += 1

            if self.halted_result is not None and not self.inputs.can_quit():
                logger.info("CPU halted, and the host has no way to quit, so stopping")
                break

            # Pace to the target frame rate.  If we're running late, don't try to catch up.
            next_frame_time = max(next_frame_time + self.frame_interval, this_time)
            delay = next_frame_time - self.clock()

            if delay > 0:
                self.sleeper(delay)

        return self.halted_result
