"""Command line entry point: ``chip8 <scale> <delay> <rom>``."""

import argparse
import logging
import sys

from .config import EmulatorConfig
from .errors import Chip8Error
from .machine import Machine

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 emulator")
    parser.add_argument("scale", type=int, help="Pixel scale factor for the 64x32 display")
    parser.add_argument("delay", type=float,
                        help="Delay between CPU cycles in milliseconds (0 for the default %d Hz)"
                        % EmulatorConfig.cpu_hz)
    parser.add_argument("rom", help="Path to the ROM image")
    parser.add_argument("--cpu-hz", type=int, default=None,
                        help="Instructions per second (overrides delay)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the RND instruction")
    parser.add_argument("--font-at-zero", action="store_true",
                        help="Load the font table at 0x000 instead of 0x050")
    parser.add_argument("--increment-index", action="store_true",
                        help="Fx55/Fx65 advance I past the last register")
    parser.add_argument("--index-overflow", action="store_true",
                        help="Fx1E sets VF when I runs past 0xFFF")
    parser.add_argument("--clip-sprites", action="store_true",
                        help="Clip sprites at the screen edge instead of wrapping")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose debug logging (every instruction)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = EmulatorConfig.from_args(args)
    except ValueError as e:
        logger.error("Bad arguments: %s", e)
        return 2

    machine = Machine(config.quirks, seed=config.seed)
    try:
        machine.load_rom_file(args.rom)
    except (OSError, Chip8Error) as e:
        logger.error("Could not load %s: %s", args.rom, e)
        return 2

    # pyglet needs a display; only pull it in once there is something to show
    from . import app
    app.run(machine, config, args.rom)
    return 0


if __name__ == "__main__":
    sys.exit(main())
