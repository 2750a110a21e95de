"""Operand extraction for 16-bit CHIP-8 words.

A word ``0xKXYN`` splits into the family nibble ``K``, the register indices
``X`` and ``Y`` and the immediates ``N``, ``NN`` (low byte) and ``NNN``
(12-bit address). Handlers read whichever fields their form uses.
"""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of one instruction word, all plain ints."""
    raw: int
    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(instruction: int) -> DecodedInstruction:
    """Split a word into its operand fields; bits above 16 are dropped."""
    word = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=word,
        opcode=word >> 12,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        nn=word & 0xFF,
        nnn=word & 0xFFF,
    )
