"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK, STACK_SIZE
from chip8vm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack.

    Capacity is a deliberate limit of ``STACK_SIZE`` return addresses above
    the reset sentinel. A push on a full stack overwrites the top slot, so the
    return address it held is lost.
    """
    pointer = jnp.minimum(stack.pointer, STACK_SIZE)
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack.

    Popping the reset sentinel yields address 0. Popping an empty stack
    yields 0 as well and leaves the pointer at 0.
    """
    new_pointer = jnp.maximum(stack.pointer - 1, 0)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
