"""CHIP-8 opcode dispatch table.

``get_op`` maps a raw instruction word to one of the :class:`Op` kinds using
nested range tests on the top nibble, then on the low nibble or low byte for
the ``0``, ``8``, ``E`` and ``F`` families. It has no side effects and is
shared by the execution engine and the disassembler.
"""

import enum


class Op(enum.Enum):
    """Operation kinds of the CHIP-8 instruction set."""

    NOP = "NOP"
    CLS = "CLS"
    RET = "RET"
    JP = "JP addr"
    CALL = "CALL addr"
    SE_VX_BYTE = "SE Vx, byte"
    SNE_VX_BYTE = "SNE Vx, byte"
    SE_VX_VY = "SE Vx, Vy"
    LD_VX_BYTE = "LD Vx, byte"
    ADD_VX_BYTE = "ADD Vx, byte"
    LD_VX_VY = "LD Vx, Vy"
    OR = "OR Vx, Vy"
    AND = "AND Vx, Vy"
    XOR = "XOR Vx, Vy"
    ADD_VX_VY = "ADD Vx, Vy"
    SUB = "SUB Vx, Vy"
    SHR = "SHR Vx"
    SUBN = "SUBN Vx, Vy"
    SHL = "SHL Vx"
    SNE_VX_VY = "SNE Vx, Vy"
    LD_I = "LD I, addr"
    JP_V0 = "JP V0, addr"
    RND = "RND Vx, byte"
    DRW = "DRW Vx, Vy, nibble"
    SKP = "SKP Vx"
    SKNP = "SKNP Vx"
    LD_VX_DT = "LD Vx, DT"
    LD_VX_K = "LD Vx, K"
    LD_DT_VX = "LD DT, Vx"
    LD_ST_VX = "LD ST, Vx"
    ADD_I_VX = "ADD I, Vx"
    LD_F_VX = "LD F, Vx"
    LD_B_VX = "LD B, Vx"
    LD_MEM_VX = "LD [I], Vx"
    LD_VX_MEM = "LD Vx, [I]"

    @property
    def mnemonic(self) -> str:
        return self.value


_ALU_OPS = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}

_SIMPLE_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_BYTE,
    0x4: Op.SNE_VX_BYTE,
    0x5: Op.SE_VX_VY,
    0x6: Op.LD_VX_BYTE,
    0x7: Op.ADD_VX_BYTE,
    0x9: Op.SNE_VX_VY,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}


def get_op(instruction: int) -> Op:
    """Resolve a 16-bit instruction word to its operation kind.

    Words matching no entry, such as the ``0NNN`` machine-code call, resolve
    to :attr:`Op.NOP`.
    """
    instruction = int(instruction) & 0xFFFF
    family = (instruction & 0xF000) >> 12

    if family == 0x0:
        if instruction == 0x00E0:
            return Op.CLS
        if instruction == 0x00EE:
            return Op.RET
        return Op.NOP

    if family == 0x8:
        return _ALU_OPS.get(instruction & 0x000F, Op.NOP)

    if family == 0xE:
        return _KEY_OPS.get(instruction & 0x00FF, Op.NOP)

    if family == 0xF:
        return _MISC_OPS.get(instruction & 0x00FF, Op.NOP)

    return _SIMPLE_OPS[family]
