"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from polychip8.state import EmulatorState
from polychip8.decode import DecodedInstruction
from polychip8.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation (also 0NNN, call native routine)."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack, int(state.pc))
    return state.replace(stack=stack, pc=address)
