#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The host
calls 'step' repeatedly, and each call runs exactly one fetch, decode, execute
and timer tick cycle before returning a StepResult.  Nothing in here loops or
waits on the host, so input polling and rendering carry on between steps.

Every instruction handler is responsible for moving the program counter on,
either by 2 (the instruction is done), by 4 (the next instruction is skipped),
or by setting it outright (jumps, calls and returns).  There is no automatic
increment after an instruction runs.

Register Vf is an ordinary register, but several instructions overwrite it with
a carry, borrow, shifted-out bit or collision flag.  Those writes always happen
after Vx is updated, so the flag wins if Vf is also the target.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from random import Random
from .constants import FONT_LOC, FONT_GLYPH_SIZE, MEM_SIZE, NUM_KEYS, NUM_REGISTERS, PROGRAM_START, \
    SYSTEM_FONT
from .ram import RAMError
from .result import StepResult, STEP_WAITING, STEP_STACK_OVERFLOW, STEP_STACK_UNDERFLOW, STEP_OUT_OF_BOUNDS
from .stack import StackOverflowError, StackUnderflowError

CPU_ENDIAN = "big"  # CHIP-8 is big-endian

logger = logging.getLogger(__name__)


class CPUError(Exception):
    pass


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, timers, debugger, seed=None):
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.timers = timers
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.random = Random(seed)

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Alias for bitmask 0xFFFF
            0x1: self._1nnn,
            0x2: self._2nnn,
            0x3: self._3xkk,
            0x4: self._4xkk,
            0x5: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x6: self._6xkk,
            0x7: self._7xkk,
            0x8: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x9: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0xA: self._Annn,
            0xB: self._Bnnn,
            0xC: self._Cxkk,
            0xD: self._Dxyn,
            0xE: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            0xF: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            # Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match)
            0x00E0: self._00E0,
            0x00EE: self._00EE,
            # Instructions beginning with nibble 0x5/0x8/0x9, bitmask 0xF00F
            0x5000: self._5xy0,
            0x8000: self._8xy0,
            0x8001: self._8xy1,
            0x8002: self._8xy2,
            0x8003: self._8xy3,
            0x8004: self._8xy4,
            0x8005: self._8xy5,
            0x8006: self._8xy6,
            0x8007: self._8xy7,
            0x800E: self._8xyE,
            0x9000: self._9xy0,
            # Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
            0xE09E: self._Ex9E,
            0xE0A1: self._ExA1,
            0xF007: self._Fx07,
            0xF00A: self._Fx0A,
            0xF015: self._Fx15,
            0xF018: self._Fx18,
            0xF01E: self._Fx1E,
            0xF029: self._Fx29,
            0xF033: self._Fx33,
            0xF055: self._Fx55,
            0xF065: self._Fx65
        }

        self.reset()

    def reset(self):
        # Bring the whole machine back to power-on state, with the font in place and the PC at the program start
        if self.ram.mem_size != MEM_SIZE:
            self.ram.resize(MEM_SIZE)
        else:
            self.ram.clear()

        self.ram.write_block(FONT_LOC, SYSTEM_FONT)

        # Bytearrays are mutable, so this should be fast when a register is updated
        self.v = memoryview(bytearray(NUM_REGISTERS))
        self.i = 0  # Index register
        self.pc = PROGRAM_START
        self.debug_pc = PROGRAM_START
        self.opcode = 0
        self.awaiting_keypress = False
        self.result = None

        self.stack.clear()
        self.timers.reset()
        self.keypad.clear()
        self.framebuffer.clear()

    def load_program(self, data, location=PROGRAM_START):
        max_size = MEM_SIZE - location

        if len(data) > max_size:
            raise CPUError(
                "Program is {} bytes, but only {} bytes fit in memory at 0x{:03x}".format(len(data), max_size, location)
            )

        self.ram.write_block(location, data)

    def step(self):
        result = StepResult(self.pc)
        self.result = result
        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = 0

        try:
            self.opcode = self.fetch()
        except RAMError as err:
            return self._halt(STEP_OUT_OF_BOUNDS, err, "(fetch failed)")

        result.opcode = self.opcode

        try:
            self.decode_exec()
        except StackOverflowError as err:
            return self._halt(STEP_STACK_OVERFLOW, err)
        except StackUnderflowError as err:
            return self._halt(STEP_STACK_UNDERFLOW, err)

        if result.status == STEP_WAITING:
            # Still waiting on a keypress, so time stands still
            return result

        result.sound_finished = self.timers.tick()
        return result

    def _halt(self, status, error, instruction="???"):
        logger.error(
            "Emulation halted at address 0x%03x: %s.\n%s",
            self.debug_pc, error, self.debugger.debug(self, instruction, verbose=True)
        )
        return self.result.fail(status, error)

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)

    def _call_masked_instruction(self, masked_opcode):
        instruction = self.instructions.get(masked_opcode)

        if instruction is None:
            self._opcode_unsupported()
            return

        instruction()

    def decode_exec(self):
        self._call_masked_instruction((0xF000 & self.opcode) >> 12)

    def inc_pc(self):
        self.pc += 2

    def _skip_if(self, condition):
        self.pc += 4 if condition else 2

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions, so avoid
    # excessive code duplication (ever so slight slowdown).  Don't reference these more than necessary as they are
    # recalculated each time.
    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def _diagnostic(self, message):
        logger.warning(message)
        self.result.add_diagnostic(message)

    def _opcode_unsupported(self):
        # Unknown instructions are passed over rather than stopping the program
        self._diagnostic(
            "Opcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction, skipped".format(
                self.opcode, self.debug_pc
            )
        )
        self.inc_pc()

    def _transfer_skipped(self, instruction, size):
        self._diagnostic(
            "{} of {} byte(s) at I=0x{:04x} (address 0x{:03x}) runs past the end of memory, skipped".format(
                instruction, size, self.i, self.debug_pc
            )
        )

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _0nnn(self):
        opcode = self.opcode

        if opcode < 0x10:
            # Let's use opcodes 0x0 - 0xF internally for indexing, since they're not real instructions
            self._opcode_unsupported()
            return

        self._call_masked_instruction(opcode)

    def _5nnn_8nnn_9nnn(self):
        self._call_masked_instruction(self.opcode & 0xF00F)

    def _Ennn_Fnnn(self):
        self._call_masked_instruction(self.opcode & 0xF0FF)

    def _00E0(self):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()
        self.inc_pc()

    def _00EE(self):  # RET
        if self.live_debug:
            self.debug("RET")

        self.pc = self.stack.pop()

    def _1nnn(self):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(self.addr))

        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(self.addr))

        # Push first, as a full stack must leave the PC alone
        self.stack.push(self.pc + 2)
        self.pc = self.addr

    def _3xkk(self):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self._skip_if(self.v[self.vx] == self.byte)

    def _4xkk(self):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self._skip_if(self.v[self.vx] != self.byte)

    def _5xy0(self):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._skip_if(self.v[self.vx] == self.v[self.vy])

    def _6xkk(self):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.v[self.vx] = self.byte
        self.inc_pc()

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # No carry flag for this one
        byte += self.v[vx]
        self.v[vx] = byte & 0xFF
        self.inc_pc()

    def _8xy0(self):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] = self.v[self.vy]
        self.inc_pc()

    def _8xy1(self):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] |= self.v[self.vy]
        self.inc_pc()

    def _8xy2(self):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] &= self.v[self.vy]
        self.inc_pc()

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] ^= self.v[self.vy]
        self.inc_pc()

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(vx, vy))

        val = self.v[vx] + self.v[vy]
        self.v[vx] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying
        self.inc_pc()

    def _post_8xy5_8xy7(self, val):  # Post-SUB/SUBN
        self.v[self.vx] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes Vf is specified in the
        # parameters.
        self.v[0xF] = int(val >= 0)
        self.inc_pc()

    def _8xy5(self):  # SUB Vx, Vy
        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.v[self.vx] - self.v[self.vy])

    def _8xy6(self):  # SHR Vx
        if self.live_debug:
            self.debug("SHR V{:01x}".format(self.vx))

        val = self.v[self.vx]
        self.v[self.vx] = val >> 1
        self.v[0xF] = val & 1  # The whole byte gets set just for the flag
        self.inc_pc()

    def _8xy7(self):  # SUBN Vx, Vy
        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.v[self.vy] - self.v[self.vx])

    def _8xyE(self):  # SHL Vx
        if self.live_debug:
            self.debug("SHL V{:01x}".format(self.vx))

        val = self.v[self.vx]
        self.v[self.vx] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7
        self.inc_pc()

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._skip_if(self.v[self.vx] != self.v[self.vy])

    def _Annn(self):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(self.addr))

        self.i = self.addr
        self.inc_pc()

    def _Bnnn(self):  # JP V0, addr
        if self.live_debug:
            self.debug("JP V0, 0x{:03x}".format(self.addr))

        # Can land past the end of memory, in which case the next fetch fails
        self.pc = self.v[0] + self.addr

    def _Cxkk(self):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = self.random.randint(0, 0xFF) & self.byte
        self.inc_pc()

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble

        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        # Read both coordinates up front, as Vf may be one of them
        vx_pos = self.v[self.vx]
        vy_pos = self.v[self.vy]
        collided = False
        rows_skipped = 0
        i = self.i

        for y in range(height):
            if not self.ram.in_bounds(i + y):
                rows_skipped += 1
                continue

            spr_data = self.ram.read(i + y)

            for x in range(8):
                if spr_data & (0x80 >> x):
                    # Don't stop drawing on a collision.  Set the flag, and never unset it for this sprite.
                    if self.framebuffer.xor_pixel(vx_pos + x, vy_pos + y):
                        collided = True

        if rows_skipped:
            self._transfer_skipped("Sprite read", rows_skipped)

        self.v[0xF] = int(collided)
        self.framebuffer.draw_flag = True
        self.inc_pc()

    def _key_down(self, key):
        # Registers can hold values beyond the 16 keys.  Those keys can never be pressed.
        if key >= NUM_KEYS:
            self._diagnostic(
                "Key 0x{:02x} requested at address 0x{:03x} does not exist, treated as released".format(
                    key, self.debug_pc
                )
            )
            return False

        return self.keypad.is_key_down(key)

    def _Ex9E(self):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(self.vx))

        self._skip_if(self._key_down(self.v[self.vx]))

    def _ExA1(self):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(self.vx))

        self._skip_if(not self._key_down(self.v[self.vx]))

    def _Fx07(self):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(self.vx))

        self.v[self.vx] = self.timers.dt
        self.inc_pc()

    def _Fx0A(self):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(self.vx))

        # This opcode waits for a keypress, but since the host still needs to poll inputs and update the display,
        # we'll return control and leave the program counter where it is.  The next step runs this again.
        key = self.keypad.get_first_pressed()

        if key is None:
            self.awaiting_keypress = True
            self.result.status = STEP_WAITING
            return

        self.v[self.vx] = key
        self.awaiting_keypress = False
        self.inc_pc()

    def _Fx15(self):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(self.vx))

        self.timers.set_delay(self.v[self.vx])
        self.inc_pc()

    def _Fx18(self):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(self.vx))

        self.timers.set_sound(self.v[self.vx])
        self.inc_pc()

    def _Fx1E(self):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(self.vx))

        # I may now point past the end of memory.  Anything using it checks before touching RAM.
        self.i = (self.i + self.v[self.vx]) & 0xFFFF
        self.inc_pc()

    def _Fx29(self):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(self.vx))

        self.i = FONT_LOC + FONT_GLYPH_SIZE * self.v[self.vx]
        self.inc_pc()

    def _Fx33(self):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(self.vx))

        val = self.v[self.vx]
        i = self.i

        # All three digits or nothing
        if self.ram.in_bounds(i, 3):
            self.ram.write_block(i, bytes((
                val // 100,        # Most-significant digit
                (val // 10) % 10,  # Middle digit
                val % 10           # Least-significant digit
            )))
        else:
            self._transfer_skipped("BCD store", 3)

        self.inc_pc()

    def _Fx55(self):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(self.vx))

        # Ensure with +1s that the final register is copied
        size = self.vx + 1

        if self.ram.in_bounds(self.i, size):
            self.ram.write_block(self.i, self.v[:size])
        else:
            self._transfer_skipped("Register store", size)

        self.inc_pc()

    def _Fx65(self):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(self.vx))

        size = self.vx + 1

        if self.ram.in_bounds(self.i, size):
            self.v[:size] = self.ram.read_block(self.i, size)
        else:
            self._transfer_skipped("Register load", size)

        self.inc_pc()
