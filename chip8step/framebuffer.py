#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here by the CPU, and only handed to the actual display (the
host rendering system) when the host loop presents a frame.  This keeps the
number of calls into PyGame low, as the CPU can toggle thousands of pixels
between two frames.

Unlike other computers, programs for this system cannot write directly into
video RAM.  Instead, sprites are drawn to the screen using an XOR method.  Each
pixel is stored as a single byte holding either 0 or 1.

Collisions (where any pixel was set, but was unset by an XOR) are reported back
to the caller.  Coordinates always wrap around the screen edges.

Whenever the contents change, the draw flag is raised.  It stays raised until
the frame has been presented to a renderer.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VID_WIDTH, VID_HEIGHT
from .ram import RAM


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.ram_bank = RAM()
        self.ram_bank.resize(self.vid_size)
        self.draw_flag = False

    def clear(self):
        self.ram_bank.clear()
        self.draw_flag = True

    def xor_pixel(self, x, y):
        # Returns True if a set pixel was switched off
        x %= self.vid_width
        y %= self.vid_height
        vram_loc = y * self.vid_width + x
        pixel = self.ram_bank.read(vram_loc)
        self.ram_bank.write(vram_loc, pixel ^ 1)
        self.draw_flag = True
        return pixel != 0

    def get_pixel(self, x, y):
        return self.ram_bank.read(y * self.vid_width + x)

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def attach(self, renderer):
        # Size the host display to match, and make sure the first present sends everything
        renderer.set_resolution(*self.get_vid_size())
        self.draw_flag = True

    def present(self, renderer):
        # Hand a changed frame to the renderer.  Returns True if anything was drawn.
        if not self.draw_flag:
            return False

        mem = self.ram_bank.mem
        vid_width = self.vid_width

        for y in range(self.vid_height):
            row_loc = y * vid_width

            for x in range(vid_width):
                renderer.set_pixel(x, y, mem[row_loc + x])

        renderer.refresh_display(True)
        self.draw_flag = False
        return True

    def report_perf(self, renderer, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        renderer.set_title(title)
