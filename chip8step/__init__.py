#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from .constants import APP_INTRO, APP_COPYRIGHT, DEFAULT_KEYMAP, STACK_SIZE, TIMER_POLICY_STEP
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader
from .keypad import Keypad
from .ram import RAM
from .scheduler import Scheduler
from .stack import Stack
from .timers import Timers

logger = logging.getLogger(__name__)


class StartupError(Exception):
    pass


def main(args):
    logger.info("".join((APP_INTRO, APP_COPYRIGHT)))

    opt_renderer = args["renderer"]
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then fall back to no display.

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if not auto_select_renderer:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )

            logger.warning("PyGame does not appear to be installed, running without a display")
            opt_renderer = "null"
        else:
            opt_renderer = "pygame"

    if opt_renderer == "pygame":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_pygame import Inputs
        from .renderers.r_pygame import Renderer

        if args["mute"]:
            from .audio.a_null import Audio
        else:
            from .audio.a_pygame import Audio
    else:
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    loader = Loader()
    rom = loader.load_rom(args["filename"])  # Can raise FileNotFoundError before anything is set up

    renderer = Renderer(scale=args["scale"])
    keypad = Keypad()
    keymap = args["keymap"]
    inputs = Inputs(DEFAULT_KEYMAP if keymap is None else keymap, renderer, keypad)
    audio = Audio()
    timer_policy = args["timer_policy"]
    timers = Timers(audio, policy=TIMER_POLICY_STEP if timer_policy is None else timer_policy)

    # Set up debugger and live output if necessary
    debugger = Debugger()
    debugger.set_live(args["debug"])

    # Create a new CPU, plug it into the rest of the system, and load the ROM at the default address
    cpu = CPU(RAM(), Stack(STACK_SIZE), Framebuffer(), keypad, timers, debugger, seed=args["seed"])
    cpu.load_program(rom)

    scheduler = Scheduler(
        cpu, inputs, renderer, cycles_per_frame=args["cycles_per_frame"], frame_rate=args["frame_rate"]
    )

    try:
        halted_result = scheduler.run(max_frames=args["max_frames"])
    finally:
        # The CPU has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        audio.shutdown()
        inputs.shutdown()
        renderer.shutdown()

    return halted_result
