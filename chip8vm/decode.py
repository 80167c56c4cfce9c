"""CHIP-8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
from chex import dataclass


class OpcodeFamily(IntEnum):
    """Handler selected for an instruction word.

    The values double as branch indices for ``jax.lax.switch``.
    """
    CLEAR_SCREEN = 0          # 00E0
    RETURN = 1                # 00EE
    MACHINE_CALL = 2          # 0NNN
    JUMP = 3                  # 1NNN
    CALL = 4                  # 2NNN
    SKIP_EQUAL = 5            # 3XNN
    SKIP_NOT_EQUAL = 6        # 4XNN
    SET = 7                   # 6XNN
    ADD = 8                   # 7XNN
    COPY_REGISTER = 9         # 8XY0
    SET_INDEX = 10            # ANNN
    JUMP_WITH_OFFSET = 11     # BNNN
    RANDOM = 12               # CXNN
    DISPLAY = 13              # DXYN
    SKIP_IF_KEY = 14          # EX9E
    SKIP_IF_NOT_KEY = 15      # EXA1
    INVALID = 16


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    family: int  # OpcodeFamily tag
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def classify(instruction: int) -> jnp.ndarray:
    """Map a 16-bit instruction word to its :class:`OpcodeFamily` tag."""
    word = jnp.astype(instruction, jnp.int32)
    opcode = (word & 0xF000) >> 12
    n = word & 0x000F
    nn = word & 0x00FF

    return jnp.select(
        [
            word == 0x00E0,
            word == 0x00EE,
            opcode == 0x0,
            opcode == 0x1,
            opcode == 0x2,
            opcode == 0x3,
            opcode == 0x4,
            opcode == 0x6,
            opcode == 0x7,
            (opcode == 0x8) & (n == 0x0),
            opcode == 0xA,
            opcode == 0xB,
            opcode == 0xC,
            opcode == 0xD,
            (opcode == 0xE) & (nn == 0x9E),
            (opcode == 0xE) & (nn == 0xA1),
        ],
        [
            int(OpcodeFamily.CLEAR_SCREEN),
            int(OpcodeFamily.RETURN),
            int(OpcodeFamily.MACHINE_CALL),
            int(OpcodeFamily.JUMP),
            int(OpcodeFamily.CALL),
            int(OpcodeFamily.SKIP_EQUAL),
            int(OpcodeFamily.SKIP_NOT_EQUAL),
            int(OpcodeFamily.SET),
            int(OpcodeFamily.ADD),
            int(OpcodeFamily.COPY_REGISTER),
            int(OpcodeFamily.SET_INDEX),
            int(OpcodeFamily.JUMP_WITH_OFFSET),
            int(OpcodeFamily.RANDOM),
            int(OpcodeFamily.DISPLAY),
            int(OpcodeFamily.SKIP_IF_KEY),
            int(OpcodeFamily.SKIP_IF_NOT_KEY),
        ],
        default=int(OpcodeFamily.INVALID),
    )


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        family=classify(instruction),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
