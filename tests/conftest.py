"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chip8vm import Chip8, create_state


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def engine():
    """Provide a seeded, quiet engine."""
    return Chip8({"seed": 1234, "log_level": "CRITICAL"})


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Assemble 16-bit instruction words into a big-endian program image."""
    image = bytearray()
    for word in words:
        image += word.to_bytes(2, "big")
    return bytes(image)


def set_register(state, index, value):
    """Helper to set a single V register."""
    return state.replace(V=state.V.at[index].set(value))
