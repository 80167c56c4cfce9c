"""CHIP-8 virtual machine package."""

from chip8vm.errors import Chip8Error, ImageTooLarge, InvalidOpcode, Ok, Err, Result
from chip8vm.state import EmulatorState, StackState, create_state, reset, load
from chip8vm.decode import DecodedInstruction, OpcodeFamily, classify, decode
from chip8vm.emulator import StepInfo, RunInfo, execute, fetch, step, run_ticks
from chip8vm.config import EngineConfig, make_config
from chip8vm.engine import Chip8, TickOutcome
from chip8vm.constants import *

__all__ = [
    "Chip8",
    "TickOutcome",
    "EngineConfig",
    "make_config",
    "EmulatorState",
    "StackState",
    "create_state",
    "reset",
    "load",
    "fetch",
    "execute",
    "step",
    "run_ticks",
    "StepInfo",
    "RunInfo",
    "DecodedInstruction",
    "OpcodeFamily",
    "classify",
    "decode",
    "Chip8Error",
    "ImageTooLarge",
    "InvalidOpcode",
    "Ok",
    "Err",
    "Result",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "FONT_START",
    "FONT_DATA",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
]
