"""CHIP-8 emulator state structures."""

from dataclasses import field
from typing import Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode

from chip8vm.constants import (
    MEMORY_SIZE, PROGRAM_START, PROGRAM_CAPACITY, FONT_START, FONT_DATA,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, NUM_KEYS, NUM_REGISTERS
)
from chip8vm.errors import Err, ImageTooLarge, Ok, Result


@dataclass(frozen=True)
class StackState:
    """Call stack for subroutine return addresses.

    Slot 0 holds the sentinel pushed by reset, so a fresh stack has
    ``pointer == 1``.
    """
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE + 1, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.ones((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    screen_changed: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0)) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def reset(state: EmulatorState) -> EmulatorState:
    """Reinitialise every part of the machine except the RNG key."""
    return create_state(state.rng)


def as_program_image(image: Union[bytes, Sequence[int], np.ndarray]) -> np.ndarray:
    """Convert a program image to a flat ``uint8`` array, one element per byte.

    Bytes-like objects are taken as raw bytes. Anything else is read element
    by element and every value must be an integer in 0..255.
    """
    if isinstance(image, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(image), dtype=np.uint8)

    values = np.asarray(image)
    if values.size == 0:
        return np.zeros(0, dtype=np.uint8)
    if values.ndim != 1:
        raise ValueError(f"Program image must be one-dimensional, got shape {values.shape}")
    if not (np.issubdtype(values.dtype, np.integer) or values.dtype == np.bool_):
        raise ValueError(f"Program image must hold integers, got dtype {values.dtype}")
    if values.min() < 0 or values.max() > 0xFF:
        raise ValueError("Program image values must be in 0..255")
    return values.astype(np.uint8)


def load(state: EmulatorState, image: Union[bytes, Sequence[int], np.ndarray]) -> Result:
    """Reset the machine and copy a program image to ``PROGRAM_START``.

    Returns ``Err(ImageTooLarge)`` without touching ``state`` when the image
    does not fit in program memory, otherwise ``Ok`` carrying the new state.
    Raises ``ValueError`` for images that are not byte values.
    """
    image = as_program_image(image)
    if image.size > PROGRAM_CAPACITY:
        return Err(ImageTooLarge(int(image.size), PROGRAM_CAPACITY))

    state = reset(state)
    if image.size == 0:
        return Ok(state)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + image.size].set(jnp.asarray(image))
    return Ok(state.replace(memory=new_memory))
