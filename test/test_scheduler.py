#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8step.audio.a_null import Audio
from chip8step.constants import DEFAULT_KEYMAP
from chip8step.cpu import CPU
from chip8step.debugger import Debugger
from chip8step.framebuffer import Framebuffer
from chip8step.inputs.i_null import Inputs
from chip8step.keypad import Keypad
from chip8step.ram import RAM
from chip8step.renderers.r_null import Renderer
from chip8step.result import STEP_STACK_OVERFLOW
from chip8step.scheduler import Scheduler, SchedulerError
from chip8step.stack import Stack
from chip8step.timers import Timers


class ScriptedInputs(Inputs):
    # Presses a key on a given frame, and quits on another
    def __init__(self, keymap, renderer, keypad, press_on_frame=None, quit_on_frame=None):
        super().__init__(keymap, renderer, keypad)
        self.frame = 0
        self.press_on_frame = press_on_frame
        self.quit_on_frame = quit_on_frame

    def process_messages(self):
        self.frame += 1

        if self.frame == self.press_on_frame:
            self.host_key_event(ord("w"), True)  # Key 5 in the default keymap

        return self.frame == self.quit_on_frame


class WindowedInputs(Inputs):
    # Stands in for a plugin with a window that can be closed
    def can_quit(self):
        return True


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, delay):
        self.now += delay


class TestScheduler(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.keypad = Keypad()
        self.cpu = CPU(RAM(), Stack(16), Framebuffer(), self.keypad, Timers(Audio()), Debugger())
        self.clock = FakeClock()

    def _scheduler(self, inputs=None, cycles_per_frame=4):
        if inputs is None:
            inputs = Inputs(DEFAULT_KEYMAP, self.renderer, self.keypad)

        return Scheduler(
            self.cpu, inputs, self.renderer, cycles_per_frame=cycles_per_frame, frame_rate=60,
            clock=self.clock, sleeper=self.clock.sleep
        )

    def test_scheduler_bad_settings(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer, self.keypad)
        self.assertRaises(SchedulerError, Scheduler, self.cpu, inputs, self.renderer, cycles_per_frame=0)
        self.assertRaises(SchedulerError, Scheduler, self.cpu, inputs, self.renderer, frame_rate=0)

    def test_scheduler_attaches_renderer(self):
        self._scheduler()
        self.assertEqual((64, 32), (self.renderer.width, self.renderer.height))

    def test_scheduler_run_frame(self):
        self.cpu.load_program(b"\x70\x01" * 10)
        scheduler = self._scheduler()
        self.assertFalse(scheduler.run_frame())
        self.assertEqual(4, self.cpu.v[0])
        self.assertEqual(0x208, self.cpu.pc)
        self.assertEqual(1, self.renderer.frames_presented)  # Reset left a frame to show

    def test_scheduler_present_on_draw(self):
        # Draw the font glyph for 0 at the top left, then loop
        self.cpu.load_program(b"\xD0\x05\x12\x02")
        scheduler = self._scheduler()
        scheduler.run_frame()
        self.assertEqual(1, self.renderer.pixels[0])
        self.assertEqual(0, self.renderer.pixels[64 + 1])
        self.assertFalse(self.cpu.framebuffer.draw_flag)

        # Nothing new drawn, so nothing presented
        scheduler.run_frame()
        self.assertEqual(1, self.renderer.frames_presented)

    def test_scheduler_key_wait(self):
        self.cpu.load_program(b"\xF3\x0A\x12\x02")
        inputs = ScriptedInputs(DEFAULT_KEYMAP, self.renderer, self.keypad, press_on_frame=3)
        scheduler = self._scheduler(inputs)
        scheduler.run_frame()
        scheduler.run_frame()
        self.assertEqual(0x200, self.cpu.pc)
        self.assertEqual(2, scheduler.perf_counter_ops)  # Gave up waiting after one step per frame
        scheduler.run_frame()
        self.assertEqual(0x5, self.cpu.v[0x3])
        self.assertEqual(0x202, self.cpu.pc)

    def test_scheduler_halts_on_overflow(self):
        self.cpu.load_program(b"\x22\x00")

        with self.assertLogs("chip8step.cpu", level="ERROR"):
            scheduler = self._scheduler(cycles_per_frame=20)
            scheduler.run_frame()

        self.assertTrue(scheduler.is_halted())
        self.assertEqual(STEP_STACK_OVERFLOW, scheduler.halted_result.status)
        self.assertEqual(17, scheduler.perf_counter_ops)

        # No more instructions are run
        scheduler.run_frame()
        self.assertEqual(17, scheduler.perf_counter_ops)

        scheduler.reset()
        self.assertFalse(scheduler.is_halted())
        self.assertEqual(0, self.cpu.stack.get_pointer())

    def test_scheduler_run_paced(self):
        self.cpu.load_program(b"\x12\x00")
        scheduler = self._scheduler()
        self.assertIsNone(scheduler.run(max_frames=3))
        self.assertAlmostEqual(3 / 60.0, self.clock.now)

    def test_scheduler_run_quit(self):
        self.cpu.load_program(b"\x12\x00")
        inputs = ScriptedInputs(DEFAULT_KEYMAP, self.renderer, self.keypad, quit_on_frame=2)
        scheduler = self._scheduler(inputs)

        with self.assertLogs("chip8step.scheduler", level="INFO"):
            self.assertIsNone(scheduler.run())

        self.assertEqual(2, inputs.frame)

    def test_scheduler_run_returns_halt(self):
        self.cpu.load_program(b"\x00\xEE")
        scheduler = self._scheduler()

        with self.assertLogs("chip8step.cpu", level="ERROR"):
            result = scheduler.run(max_frames=2)

        self.assertTrue(result.fatal)

    def test_scheduler_run_stops_when_halted(self):
        # No window to close, so there's no point carrying on after a halt
        self.cpu.load_program(b"\x00\xEE")
        scheduler = self._scheduler()

        with self.assertLogs("chip8step.cpu", level="ERROR"), \
                self.assertLogs("chip8step.scheduler", level="INFO") as logs:
            result = scheduler.run()

        self.assertTrue(result.fatal)
        self.assertEqual(0.0, self.clock.now)
        self.assertIn("CPU halted", logs.output[0])

    def test_scheduler_run_halted_with_window(self):
        # The final screen stays up until the window is closed
        self.cpu.load_program(b"\x00\xEE")
        scheduler = self._scheduler(WindowedInputs(DEFAULT_KEYMAP, self.renderer, self.keypad))

        with self.assertLogs("chip8step.cpu", level="ERROR"):
            result = scheduler.run(max_frames=3)

        self.assertTrue(result.fatal)
        self.assertAlmostEqual(3 / 60.0, self.clock.now)
