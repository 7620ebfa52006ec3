"""CHIP-8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
from chex import dataclass


class Op(IntEnum):
    """Every CHIP-8 operation, in pattern-matching priority order."""
    CLS = 0
    RET = 1
    SYS = 2
    JP = 3
    CALL = 4
    SE_BYTE = 5
    SNE_BYTE = 6
    SE_REG = 7
    LD_BYTE = 8
    ADD_BYTE = 9
    LD_REG = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD_REG = 14
    SUB = 15
    SHR = 16
    SUBN = 17
    SHL = 18
    SNE_REG = 19
    LD_I = 20
    JP_V0 = 21
    RND = 22
    DRW = 23
    SKP = 24
    SKNP = 25
    LD_VX_DT = 26
    LD_VX_K = 27
    LD_DT_VX = 28
    LD_ST_VX = 29
    ADD_I_VX = 30
    LD_F_VX = 31
    LD_B_VX = 32
    LD_MEM_VX = 33
    LD_VX_MEM = 34
    INVALID = 35


# (mask, value) per Op; INVALID matches everything and must stay last.
PATTERNS = {
    Op.CLS: (0xFFFF, 0x00E0),
    Op.RET: (0xFFFF, 0x00EE),
    Op.SYS: (0xF000, 0x0000),
    Op.JP: (0xF000, 0x1000),
    Op.CALL: (0xF000, 0x2000),
    Op.SE_BYTE: (0xF000, 0x3000),
    Op.SNE_BYTE: (0xF000, 0x4000),
    Op.SE_REG: (0xF00F, 0x5000),
    Op.LD_BYTE: (0xF000, 0x6000),
    Op.ADD_BYTE: (0xF000, 0x7000),
    Op.LD_REG: (0xF00F, 0x8000),
    Op.OR: (0xF00F, 0x8001),
    Op.AND: (0xF00F, 0x8002),
    Op.XOR: (0xF00F, 0x8003),
    Op.ADD_REG: (0xF00F, 0x8004),
    Op.SUB: (0xF00F, 0x8005),
    Op.SHR: (0xF00F, 0x8006),
    Op.SUBN: (0xF00F, 0x8007),
    Op.SHL: (0xF00F, 0x800E),
    Op.SNE_REG: (0xF00F, 0x9000),
    Op.LD_I: (0xF000, 0xA000),
    Op.JP_V0: (0xF000, 0xB000),
    Op.RND: (0xF000, 0xC000),
    Op.DRW: (0xF000, 0xD000),
    Op.SKP: (0xF0FF, 0xE09E),
    Op.SKNP: (0xF0FF, 0xE0A1),
    Op.LD_VX_DT: (0xF0FF, 0xF007),
    Op.LD_VX_K: (0xF0FF, 0xF00A),
    Op.LD_DT_VX: (0xF0FF, 0xF015),
    Op.LD_ST_VX: (0xF0FF, 0xF018),
    Op.ADD_I_VX: (0xF0FF, 0xF01E),
    Op.LD_F_VX: (0xF0FF, 0xF029),
    Op.LD_B_VX: (0xF0FF, 0xF033),
    Op.LD_MEM_VX: (0xF0FF, 0xF055),
    Op.LD_VX_MEM: (0xF0FF, 0xF065),
    Op.INVALID: (0x0000, 0x0000),
}

_MASKS = jnp.array([PATTERNS[op][0] for op in Op], dtype=jnp.int32)
_VALUES = jnp.array([PATTERNS[op][1] for op in Op], dtype=jnp.int32)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: int      # Op index
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def classify(instruction: int) -> jnp.ndarray:
    """Return the Op index of a 16-bit instruction (first matching pattern)."""
    matches = (jnp.asarray(instruction, dtype=jnp.int32) & _MASKS) == _VALUES
    return jnp.argmax(matches)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        op=classify(instruction),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
