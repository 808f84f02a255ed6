#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

import logging
import sys
from argparse import ArgumentParser
from chip8step import main
from chip8step.constants import (
    DEFAULT_KEYMAP, DEFAULT_CYCLES_PER_FRAME, DEFAULT_FRAME_RATE, TIMER_POLICIES, TIMER_POLICY_STEP
)


def parse_args(argv=None):
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--cycles_per_frame", type=int, default=DEFAULT_CYCLES_PER_FRAME,
        help="set the number of CPU instructions run per displayed frame (default {})".format(
            DEFAULT_CYCLES_PER_FRAME
        )
    )
    parser.add_argument(
        "-f", "--frame_rate", type=float, default=DEFAULT_FRAME_RATE,
        help="set the target display refresh rate in frames/second (default {:g})".format(DEFAULT_FRAME_RATE)
    )
    parser.add_argument(
        "-t", "--timer_policy", choices=TIMER_POLICIES, default=TIMER_POLICY_STEP,
        help=" ".join((
            "count the delay and sound timers down once per instruction (step, default),",
            "or at 60Hz of real time (realtime)"
        ))
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "null"],
        help="set the rendering, input, and audio systems (pygame by default if available, otherwise null)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 512)"
    )
    parser.add_argument(
        "-m", "--mute", type=int, choices=[0, 1], default=0,
        help="mute the emulated audio.  0 = unmuted (default), 1 = muted"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes for keys 0-F.  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--seed", type=int,
        help="seed the random number generator, for repeatable runs"
    )
    parser.add_argument(
        "--max_frames", type=int,
        help="quit after this many frames (runs until the window is closed by default)"
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output of every instruction.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


def cli(argv=None):
    args = vars(parse_args(argv))
    logging.basicConfig(
        level=logging.DEBUG if args["debug"] else logging.INFO, format="[%(levelname)s]:  %(message)s",
        stream=sys.stdout
    )
    # It is possible to start the emulator from a GUI by calling main with a dictionary
    halted_result = main(args)
    sys.exit(1 if halted_result is not None else 0)


if __name__ == "__main__":
    cli()
