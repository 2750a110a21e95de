"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax
import jax.numpy as jnp
from polychip8 import create_state, Chip8


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state(jax.random.PRNGKey(0))


@pytest.fixture
def machine():
    """Provide a fresh stateful machine."""
    return Chip8(seed=0, log_level="CRITICAL")


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def rom(*words):
    """Assemble instruction words into ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)
