"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import (
    ADDRESS_MASK, FLAG_REGISTER, SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH
)

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Sprite rows and columns wrap around the screen edges. Every set sprite bit
    flips its pixel, so the screen changes whenever the sprite has any set
    bit; VF mirrors that flag.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < instruction.n)

    sprite_bytes = state.memory[(jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK]
    bit_shift = SPRITE_WIDTH - 1 - jnp.minimum(col_offset, SPRITE_WIDTH - 1)
    sprite = (((sprite_bytes >> bit_shift) & 1) == 1) & in_sprite

    changed = jnp.any(sprite)
    return state.replace(
        display=state.display ^ sprite,
        screen_changed=changed,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(changed, jnp.uint8))
    )
