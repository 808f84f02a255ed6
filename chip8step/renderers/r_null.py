#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you only want to see
debug output.  It keeps a copy of the last presented frame, so the results of
running a program can still be checked without a window.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.title = ""
        self.frames_presented = 0
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)

    def set_pixel(self, x, y, colour):
        self.pixels[y * self.width + x] = colour

    def refresh_display(self, content_changed=False):
        if content_changed:
            self.frames_presented += 1

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass
