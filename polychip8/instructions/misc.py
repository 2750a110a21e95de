"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from polychip8.state import EmulatorState, EngineStatus
from polychip8.decode import DecodedInstruction
from polychip8.constants import FONT_START, FONT_GLYPH_SIZE, MEMORY_SIZE, WORD_MASK
from polychip8.errors import AddressOutOfRange


def _check_range(state: EmulatorState, length: int) -> int:
    address = int(state.I)
    if address + length > MEMORY_SIZE:
        raise AddressOutOfRange(address, length)
    return address


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register. VF is not affected."""
    new_i = (jnp.astype(state.I, jnp.int32) + state.V[instruction.x]) & WORD_MASK
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With no key down the engine moves to ``AWAITING_KEY`` and VX is left
    alone; the same instruction is re-dispatched on every following clock
    until a key is seen, at which point the lowest pressed key is written to
    VX and the engine returns to ``RUNNING``.
    """
    if not bool(jnp.any(state.keypad)):
        return state.replace(status=EngineStatus.AWAITING_KEY)

    pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
    return state.replace(
        V=state.V.at[instruction.x].set(pressed_key),
        status=EngineStatus.RUNNING
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = jnp.astype(state.V[instruction.x] & 0xF, jnp.uint16)
    font_address = FONT_START + digit * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    address = _check_range(state, 3)
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[address:address + 3].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is unchanged."""
    count = instruction.x + 1
    address = _check_range(state, count)
    new_memory = state.memory.at[address:address + count].set(state.V[:count])
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is unchanged."""
    count = instruction.x + 1
    address = _check_range(state, count)
    new_V = state.V.at[:count].set(state.memory[address:address + count])
    return state.replace(V=new_V)
