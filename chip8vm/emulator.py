"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from flax.struct import PyTreeNode

from chip8vm.state import EmulatorState
from chip8vm.decode import OpcodeFamily, classify, decode
from chip8vm.constants import MEMORY_SIZE
from chip8vm.instructions.system import (
    no_op, execute_clear_screen, execute_return, execute_machine_call
)
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import execute_copy_register
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.logging import TickProgressBar

HANDLERS = {
    OpcodeFamily.CLEAR_SCREEN: execute_clear_screen,
    OpcodeFamily.RETURN: execute_return,
    OpcodeFamily.MACHINE_CALL: execute_machine_call,
    OpcodeFamily.JUMP: execute_jump,
    OpcodeFamily.CALL: execute_call,
    OpcodeFamily.SKIP_EQUAL: execute_skip_if_equal_immediate,
    OpcodeFamily.SKIP_NOT_EQUAL: execute_skip_if_not_equal_immediate,
    OpcodeFamily.SET: execute_set,
    OpcodeFamily.ADD: execute_add,
    OpcodeFamily.COPY_REGISTER: execute_copy_register,
    OpcodeFamily.SET_INDEX: execute_set_index,
    OpcodeFamily.JUMP_WITH_OFFSET: execute_jump_with_offset,
    OpcodeFamily.RANDOM: execute_random,
    OpcodeFamily.DISPLAY: execute_display,
    OpcodeFamily.SKIP_IF_KEY: execute_skip_if_key,
    OpcodeFamily.SKIP_IF_NOT_KEY: execute_skip_if_not_key,
    OpcodeFamily.INVALID: no_op,
}

# Raises KeyError at import if a family has no handler
_BRANCHES = [HANDLERS[family] for family in OpcodeFamily]


class StepInfo(PyTreeNode):
    """What a single tick did, for the host."""
    instruction: jnp.ndarray
    invalid: jnp.ndarray
    screen_changed: jnp.ndarray
    beep: jnp.ndarray


class RunInfo(PyTreeNode):
    """Summary of a multi-tick run.

    Attributes:
        ticks: Number of ticks that completed
        halted: Whether the run stopped on an invalid opcode
        instruction: The faulting instruction word when halted, else 0
        beeps: Number of sound timer edges seen
        screen_changes: Number of ticks that changed the framebuffer
    """
    ticks: jnp.ndarray
    halted: jnp.ndarray
    instruction: jnp.ndarray
    beeps: jnp.ndarray
    screen_changes: jnp.ndarray


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The program counter is expected to already point past ``instruction``,
    as :func:`fetch` leaves it.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.family, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    address = jnp.astype(state.pc, jnp.int32)
    instruction = _pack_u16(
        state.memory[address % MEMORY_SIZE], state.memory[(address + 1) % MEMORY_SIZE]
    )
    return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16)), instruction


def tick_timers(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Count both timers down by one and report the sound timer edge."""
    beep = state.sound_timer == 1
    delay_timer = jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer)
    sound_timer = jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer)
    return state.replace(
        delay_timer=jnp.astype(delay_timer, jnp.uint8),
        sound_timer=jnp.astype(sound_timer, jnp.uint8),
    ), beep


def step(state: EmulatorState) -> tuple[EmulatorState, StepInfo]:
    """Run one fetch-decode-execute cycle followed by the timer tick.

    An invalid instruction leaves the state exactly as it was before the
    tick and is reported through ``StepInfo.invalid``.
    """
    cleared = state.replace(screen_changed=jnp.zeros((), dtype=jnp.bool_))
    fetched, instruction = fetch(cleared)
    executed = execute(fetched, instruction)
    executed, beep = tick_timers(executed)

    invalid = classify(instruction) == int(OpcodeFamily.INVALID)
    new_state = jax.tree.map(lambda old, new: jnp.where(invalid, old, new), state, executed)

    return new_state, StepInfo(
        instruction=instruction,
        invalid=invalid,
        screen_changed=new_state.screen_changed & ~invalid,
        beep=beep & ~invalid,
    )


def _empty_run_info() -> RunInfo:
    return RunInfo(
        ticks=jnp.zeros((), dtype=jnp.int32),
        halted=jnp.zeros((), dtype=jnp.bool_),
        instruction=jnp.zeros((), dtype=jnp.uint16),
        beeps=jnp.zeros((), dtype=jnp.int32),
        screen_changes=jnp.zeros((), dtype=jnp.int32),
    )


def run_instruction(carry, _):
    state, info = carry

    def advance(operand):
        state, info = operand
        state, step_info = step(state)
        completed = jnp.astype(~step_info.invalid, jnp.int32)
        return state, info.replace(
            ticks=info.ticks + completed,
            halted=step_info.invalid,
            instruction=jnp.where(step_info.invalid, step_info.instruction, info.instruction),
            beeps=info.beeps + jnp.astype(step_info.beep, jnp.int32),
            screen_changes=info.screen_changes + jnp.astype(step_info.screen_changed, jnp.int32),
        )

    carry = jax.lax.cond(info.halted, lambda operand: operand, advance, (state, info))
    return carry, None


@partial(jax.jit, static_argnums=(1, 2))
def run_ticks(state: EmulatorState, n: int, progress: bool = False) -> tuple[EmulatorState, RunInfo]:
    """Run ``n`` ticks, stopping at the first invalid opcode.

    Ticks after a fault leave the state untouched, so the returned state is
    the one right before the faulting instruction.
    """
    body = run_instruction
    if progress and n > 0:
        body = TickProgressBar(n).wrap(run_instruction)
    (state, info), _ = jax.lax.scan(body, (state, _empty_run_info()), jnp.arange(n))
    return state, info
