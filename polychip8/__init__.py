"""CHIP-8 virtual machine package."""

from polychip8.state import EmulatorState, EngineStatus, create_state, reset_state
from polychip8.emulator import execute, fetch, clock, tick_timers, set_keypress, load_rom, load_rom_file
from polychip8.decode import DecodedInstruction, decode
from polychip8.dispatch import Op, get_op
from polychip8.disassembler import disassemble
from polychip8.errors import (
    Chip8Error, CapacityExceeded, StackOverflow, StackUnderflow, InvalidArgument, AddressOutOfRange
)
from polychip8.constants import *
from polychip8.machine import Chip8
from polychip8.rendering import chip8_display_to_rgb, create_color_scheme, framebuffer_rows

__all__ = [
    "Chip8",
    "EmulatorState",
    "EngineStatus",
    "create_state",
    "reset_state",
    "fetch",
    "execute",
    "clock",
    "tick_timers",
    "set_keypress",
    "load_rom",
    "load_rom_file",
    "DecodedInstruction",
    "decode",
    "Op",
    "get_op",
    "disassemble",
    "Chip8Error",
    "CapacityExceeded",
    "StackOverflow",
    "StackUnderflow",
    "InvalidArgument",
    "AddressOutOfRange",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "framebuffer_rows",
]
