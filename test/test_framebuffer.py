#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8step.framebuffer import Framebuffer
from chip8step.renderers.r_null import Renderer


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.framebuffer = Framebuffer(4, 5)

    def test_framebuffer_default_size(self):
        self.assertEqual((64, 32), Framebuffer().get_vid_size())

    def test_framebuffer_writes(self):
        fb = self.framebuffer
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("0100000000000000000000000000000000000000", fb.ram_bank.mem.hex())
        self.assertFalse(fb.xor_pixel(1, 1))
        self.assertEqual("0100000000010000000000000000000000000000", fb.ram_bank.mem.hex())
        self.assertTrue(fb.draw_flag)

    def test_framebuffer_collision(self):
        fb = self.framebuffer
        fb.xor_pixel(2, 3)
        self.assertTrue(fb.xor_pixel(2, 3))  # Set pixel switched off
        self.assertEqual(0, fb.get_pixel(2, 3))

    def test_framebuffer_wrapping(self):
        fb = self.framebuffer
        fb.xor_pixel(4, 5)  # Wraps to 0, 0
        self.assertEqual(1, fb.get_pixel(0, 0))
        fb.xor_pixel(7, 2)  # Wraps to 3, 2
        self.assertEqual(1, fb.get_pixel(3, 2))

    def test_framebuffer_clear(self):
        fb = self.framebuffer
        fb.xor_pixel(1, 1)
        fb.draw_flag = False
        fb.clear()
        self.assertEqual("0000000000000000000000000000000000000000", fb.ram_bank.mem.hex())
        self.assertTrue(fb.draw_flag)

    def test_framebuffer_present(self):
        fb = self.framebuffer
        fb.attach(self.renderer)
        self.assertEqual((4, 5), (self.renderer.width, self.renderer.height))
        fb.xor_pixel(3, 4)
        self.assertTrue(fb.present(self.renderer))
        self.assertFalse(fb.draw_flag)
        self.assertEqual(1, self.renderer.pixels[4 * 4 + 3])
        self.assertEqual(1, self.renderer.frames_presented)

        # Nothing changed, so nothing is sent
        self.assertFalse(fb.present(self.renderer))
        self.assertEqual(1, self.renderer.frames_presented)

    def test_framebuffer_report_perf(self):
        self.framebuffer.report_perf(self.renderer, 60, 600)
        self.assertIn("60 FPS, 600 OPS", self.renderer.title)
