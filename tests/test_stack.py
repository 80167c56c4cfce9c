"""Tests for the fixed-capacity call stack."""

import jax.numpy as jnp
from chip8vm import STACK_SIZE
from chip8vm.stack import pop, push


def return_address(depth):
    return jnp.astype(0x200 + 2 * depth, jnp.uint16)


def test_stack_holds_full_capacity(fresh_state):
    stack = fresh_state.stack
    for depth in range(STACK_SIZE):
        stack = push(stack, return_address(depth))

    for depth in reversed(range(STACK_SIZE)):
        stack, address = pop(stack)
        assert address == return_address(depth)

    # Sentinel is still underneath
    stack, address = pop(stack)
    assert address == 0
    assert stack.pointer == 0


def test_push_past_capacity_overwrites_top(fresh_state):
    """One call too many replaces the newest return address."""
    stack = fresh_state.stack
    for depth in range(STACK_SIZE + 1):
        stack = push(stack, return_address(depth))

    assert stack.pointer == STACK_SIZE + 1

    stack, address = pop(stack)
    assert address == return_address(STACK_SIZE)
    # The address pushed at depth STACK_SIZE - 1 was overwritten
    stack, address = pop(stack)
    assert address == return_address(STACK_SIZE - 2)

    for depth in reversed(range(STACK_SIZE - 2)):
        stack, address = pop(stack)
        assert address == return_address(depth)
    stack, address = pop(stack)
    assert address == 0
