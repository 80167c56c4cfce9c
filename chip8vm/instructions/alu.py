"""CHIP-8 ALU operations (8xxx).

Only the register copy form is supported; every other 8XYN decodes as
invalid.
"""

from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction


def execute_copy_register(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY0 - Set: VX = VY."""
    return state.replace(V=state.V.at[instruction.x].set(state.V[instruction.y]))
