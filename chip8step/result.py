#!/usr/bin/env python3

"""
Step Results

Each call to CPU.step() returns one of these, so the host decides how to show
problems rather than the CPU writing to the console.

Statuses:
    * ok              - The instruction completed and timers were ticked.
    * waiting         - Fx0A found no key pressed.  The same instruction runs
                        again on the next step.
    * stack_overflow  - A call was made with all stack levels in use.
    * stack_underflow - A return was made with an empty stack.
    * out_of_bounds   - The program counter ran off the end of memory.

The last three are fatal: the instruction had no effect, and the CPU should be
treated as halted until it is reset.  Non-fatal problems (unknown opcodes,
skipped memory transfers) leave the status as 'ok', but add a diagnostic.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

STEP_OK = "ok"
STEP_WAITING = "waiting"
STEP_STACK_OVERFLOW = "stack_overflow"
STEP_STACK_UNDERFLOW = "stack_underflow"
STEP_OUT_OF_BOUNDS = "out_of_bounds"

FATAL_STATUSES = (STEP_STACK_OVERFLOW, STEP_STACK_UNDERFLOW, STEP_OUT_OF_BOUNDS)


class StepResult:
    def __init__(self, pc):
        self.pc = pc  # Address the instruction was fetched from
        self.opcode = None
        self.status = STEP_OK
        self.error = None
        self.diagnostics = []
        self.sound_finished = False

    def add_diagnostic(self, message):
        self.diagnostics.append(message)

    def fail(self, status, error):
        self.status = status
        self.error = error
        self.diagnostics.append(str(error))
        return self

    @property
    def ok(self):
        return self.status == STEP_OK

    @property
    def waiting(self):
        return self.status == STEP_WAITING

    @property
    def fatal(self):
        return self.status in FATAL_STATUSES

    def __repr__(self):
        return "StepResult(pc=0x{:03x}, opcode={}, status={})".format(
            self.pc, "None" if self.opcode is None else "0x{:04x}".format(self.opcode), self.status
        )
