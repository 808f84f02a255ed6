#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "Chip8Step Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory layout
MEM_SIZE = 0x1000        # 4K addressable
FONT_LOC = 0x000         # Font glyphs live at the very bottom of RAM
PROGRAM_START = 0x200    # ROMs are loaded and started here
MAX_ROM_SIZE = MEM_SIZE - PROGRAM_START
STACK_SIZE = 16
NUM_REGISTERS = 0x10
NUM_KEYS = 0x10

# Display
VID_WIDTH = 64
VID_HEIGHT = 32

# Built-in 4x5 hexadecimal font, 5 bytes per glyph (0-F)
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))
FONT_GLYPH_SIZE = 5

# Default mappings for keys 0-F.  These are PyGame keyscan codes, which match lowercase ASCII on a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Timer cadence policies
TIMER_POLICY_STEP = "step"          # One decrement per executed instruction
TIMER_POLICY_REALTIME = "realtime"  # Decrement at 60Hz of elapsed host time
TIMER_POLICIES = [TIMER_POLICY_STEP, TIMER_POLICY_REALTIME]

# Host loop defaults
DEFAULT_CYCLES_PER_FRAME = 10
DEFAULT_FRAME_RATE = 60.0
