"""CHIP-8 emulator state structures."""

import enum

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from polychip8.constants import (
    PROGRAM_START, FONT_START, FONT_END, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)


class EngineStatus(enum.IntEnum):
    """Execution engine state machine."""
    RUNNING = 0
    AWAITING_KEY = 1


@dataclass
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    instruction: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    status: EngineStatus = field(pytree_node=False, default=EngineStatus.RUNNING)
    rom_size: int = field(pytree_node=False, default=0)


def create_state(rng: jax.Array = None) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_END].set(jnp.array(FONT_DATA, dtype=jnp.uint8)))


def reset_state(state: EmulatorState, clear_memory: bool = False) -> EmulatorState:
    """Restore power-on registers, stack, timers, display and status.

    Program memory is kept so the loaded ROM can be re-run. With
    ``clear_memory`` everything except the font table is zeroed, exactly as in
    a freshly created state.
    """
    fresh = create_state(state.rng)
    if clear_memory:
        return fresh
    return fresh.replace(memory=state.memory, rom_size=state.rom_size)
