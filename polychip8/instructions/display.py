"""CHIP-8 display operations."""

import jax.numpy as jnp
from polychip8.state import EmulatorState
from polychip8.decode import DecodedInstruction
from polychip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, MEMORY_SIZE, FLAG_REGISTER
from polychip8.errors import AddressOutOfRange

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')

MAX_SPRITE_HEIGHT = 16


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, wrapping at screen edges."""
    address = int(state.I)
    if address + instruction.n > MEMORY_SIZE:
        raise AddressOutOfRange(address, instruction.n)

    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    # Offsets of every screen pixel relative to the sprite origin, modulo the screen size
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < instruction.n)

    rows = jnp.zeros(MAX_SPRITE_HEIGHT, dtype=jnp.uint8)
    rows = rows.at[:instruction.n].set(state.memory[address:address + instruction.n])
    sprite_bytes = rows[jnp.minimum(row_offset, MAX_SPRITE_HEIGHT - 1)]
    sprite = (((sprite_bytes >> (7 - jnp.minimum(col_offset, 7))) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
