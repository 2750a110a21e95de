"""CHIP-8 stack operations."""

import jax.numpy as jnp
from polychip8.constants import ADDRESS_MASK, MAX_STACK_DEPTH
from polychip8.errors import StackOverflow, StackUnderflow
from polychip8.state import StackState


def push(stack: StackState, address: jnp.ndarray, pc: int) -> StackState:
    """Push address onto stack; ``pc`` is reported if the stack is full."""
    if int(stack.pointer) >= MAX_STACK_DEPTH:
        raise StackOverflow(pc, int(stack.pointer))
    masked_address = jnp.asarray(address, dtype=jnp.uint16) & ADDRESS_MASK
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState, pc: int) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack; ``pc`` is reported if the stack is empty."""
    if int(stack.pointer) == 0:
        raise StackUnderflow(pc)
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
