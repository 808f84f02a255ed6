#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws the framebuffer onto an SDL window surface via PyGame.  The surface is
allocated at the emulated screen size, and then the contents are stretched
(in the correct aspect ratio using 'Nearest Neighbour' translation) to fit the
window itself.  This means we don't have to draw the same pixel multiple times.

Set pixels are drawn in the foreground colour, and unset pixels in the
background colour.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import Renderer as RendererBase
from ..constants import APP_NAME

DEFAULT_WINDOW_WIDTH = 512
BACKGROUND_COLOUR = 0x222222
FOREGROUND_COLOUR = 0xDDDDDD


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = DEFAULT_WINDOW_WIDTH  # Default window width if not supplied, or set to default

        pygame.display.init()
        self.rgb_buffer = None
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [
            memoryview(bytearray([i >> 16, (i >> 8) & 0xFF, i & 0xFF])) for i in (BACKGROUND_COLOUR, FOREGROUND_COLOUR)
        ]

        super().__init__(scale, **kwargs)
        self.set_title(APP_NAME)

    def set_resolution(self, width, height):
        # Call superclass method so display size is known on the next refresh
        super().set_resolution(width, height)
        self.rgb_buffer = memoryview(bytearray(width * height * 3))  # 24-bit

        # Fill the offscreen RGB buffer with the default background colour
        for y in range(height):
            for x in range(width):
                self.set_pixel(x, y, 0)

    def set_pixel(self, x, y, colour):
        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_location = (y * self.width + x) * 3
        self.rgb_buffer[rgb_location:rgb_location + 3] = self.rgb_map[1 if colour else 0]

    def refresh_display(self, content_changed=False):
        if content_changed and self.rgb_buffer:
            # Blit the bytearray straight to the surface.  This results in a 20
            # percent speed increase over very frequent PixelArray updates
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()

        super().refresh_display(content_changed)

    def set_title(self, title):
        pygame.display.set_caption(title)
        super().set_title(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
