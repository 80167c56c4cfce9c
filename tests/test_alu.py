"""Tests for ALU operations (8xxx)."""

import pytest
from chip8vm import OpcodeFamily, classify, execute
from conftest import set_register


def test_alu_set_basic(fresh_state):
    """8XY0 - Set VX = VY."""
    state = set_register(fresh_state, 1, 0x42)
    state = set_register(state, 2, 0x99)

    state = execute(state, 0x8120)  # V1 = V2

    assert state.V[1] == 0x99
    assert state.V[2] == 0x99
    assert state.V[15] == 0


def test_alu_set_into_flag_register(fresh_state):
    """8FY0 - VF can be a copy target."""
    state = set_register(fresh_state, 4, 0x01)
    state = execute(state, 0x8F40)
    assert state.V[15] == 0x01


@pytest.mark.parametrize("low_nibble", [0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE, 0xF])
def test_other_alu_forms_are_invalid(low_nibble):
    """8XYN with N != 0 has no handler."""
    assert int(classify(0x8120 | low_nibble)) == OpcodeFamily.INVALID
