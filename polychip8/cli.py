"""Headless command-line runner for CHIP-8 ROMs."""

import argparse
import sys
from typing import List, Optional

from polychip8.constants import INSTRUCTIONS_PER_FRAME, TIMER_FREQUENCY
from polychip8.errors import Chip8Error
from polychip8.logging import ConsoleLogger, build_progress_bar, format_registers
from polychip8.machine import Chip8
from polychip8.rendering import render_text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="polychip8", description="Run a CHIP-8 ROM headless.")
    parser.add_argument("rom", help="Path to the ROM file")
    parser.add_argument("--frames", type=int, default=TIMER_FREQUENCY,
                        help="Number of 60 Hz frames to run (default: %(default)s)")
    parser.add_argument("--ipf", type=int, default=INSTRUCTIONS_PER_FRAME,
                        help="Instructions executed per frame (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the RND instruction")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--trace", action="store_true", help="Log every executed instruction")
    parser.add_argument("--disassemble", action="store_true",
                        help="Print the disassembly of the loaded ROM and exit")
    parser.add_argument("--show-screen", action="store_true", help="Print the framebuffer after the run")
    parser.add_argument("--registers", action="store_true", help="Print the register file after the run")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = ConsoleLogger("PolyChip8", log_level="DEBUG" if args.trace else args.log_level)
    machine = Chip8(seed=args.seed, logger=logger, trace=args.trace)

    try:
        machine.load_rom_file(args.rom)
    except OSError as e:
        logger.error(f"Cannot read ROM: {e}")
        return 1
    except Chip8Error:
        return 1

    if args.disassemble:
        for line in machine.disassemble(program_only=True):
            print(line)
        return 0

    progress = build_progress_bar(args.frames) if args.progress else None
    try:
        for _ in range(args.frames):
            machine.run_frame(args.ipf)
            if progress is not None:
                progress.update(1)
    except Chip8Error:
        return 1
    finally:
        if progress is not None:
            progress.close()

    logger.info(f"Ran {args.frames} frames, PC=$0x{machine.pc:04X}, status={machine.status.name}")

    if args.show_screen:
        print(render_text(machine.state.display))
    if args.registers:
        for line in format_registers(machine.state):
            print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
