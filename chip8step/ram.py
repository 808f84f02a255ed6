#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes, and fast
zeroing of memory blocks.

Every access is bounds-checked.  An address outside of the allocated bank
raises a RAMError before anything is read or written, so a bad index can never
silently corrupt neighbouring data or wrap around to the start of memory.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class RAM:
    def __init__(self):
        self.resize(0)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(b"\x00" * mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_bounds(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_bounds(location, size)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_bounds(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)
        self.check_bounds(location, block_size)
        self.mem[location:location + block_size] = block

    def check_bounds(self, location, size=1):
        # A zero-sized block still needs a valid start
        if location < 0 or location + max(size, 1) - 1 > self.mem_top:
            raise RAMError("Memory access out of bounds at 0x{:04x} (size {})".format(location, size))

    def in_bounds(self, location, size=1):
        return location >= 0 and location + max(size, 1) - 1 <= self.mem_top

    def zero_block(self, offset, size):
        self.check_bounds(offset, size)

        for i in range(offset, offset + size):
            self.mem[i] = 0x00

    def clear(self):
        # We could reallocate the entire array instead
        self.zero_block(0, self.mem_size)
