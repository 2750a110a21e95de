"""CHIP-8 disassembler.

Walks program memory two bytes at a time and resolves each word through the
same dispatch table the execution engine uses. Nothing in the machine state
is modified.
"""

from typing import List, Optional

import numpy as np

from polychip8.constants import PROGRAM_START, MEMORY_SIZE
from polychip8.dispatch import get_op
from polychip8.state import EmulatorState


def format_line(address: int, instruction: int) -> str:
    """Format one listing line: address, operation name, raw opcode."""
    op = get_op(instruction)
    return f"$0x{address:04X}    {op.mnemonic:<18s}  (0x{instruction:04X})"


def disassemble(
    state: EmulatorState,
    start: int = PROGRAM_START,
    end: Optional[int] = None,
) -> List[str]:
    """Disassemble aligned words from ``start`` up to ``end`` (default: end of memory)."""
    if end is None:
        end = MEMORY_SIZE
    end = min(end, MEMORY_SIZE)

    memory = np.asarray(state.memory, dtype=np.uint16)
    return [
        format_line(address, int((memory[address] << 8) | memory[address + 1]))
        for address in range(start, end - 1, 2)
    ]
