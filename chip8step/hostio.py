#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries for later writing into RAM.  ROMs larger than the
space between the program start address and the top of memory are truncated,
with a warning.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from .constants import MAX_ROM_SIZE

logger = logging.getLogger(__name__)


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_rom(self, filename, max_size=MAX_ROM_SIZE):
        data = self.load_binary(filename)

        if len(data) > max_size:
            logger.warning(
                "ROM '%s' is %d bytes, only the first %d bytes will be loaded", filename, len(data), max_size
            )
            data = data[:max_size]

        return data
