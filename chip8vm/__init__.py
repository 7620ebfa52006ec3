"""CHIP-8 virtual machine package."""

from chip8vm.state import MachineState, StackState, create_state, timer_divisor
from chip8vm.emulator import (
    execute, fetch, step, cycle, tick, run_cycles, load_rom, toggle_pause, clear_display_changed,
)
from chip8vm.decode import DecodedInstruction, Op, decode, classify
from chip8vm.keypad import read_input
from chip8vm.clock import update_timers
from chip8vm.errors import (
    FaultKind, MachineFault, StackOverflow, StackUnderflow, MemoryOverflow, InvalidInstruction,
)
from chip8vm.machine import Machine
from chip8vm.constants import *

__all__ = [
    "MachineState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "cycle",
    "tick",
    "run_cycles",
    "load_rom",
    "toggle_pause",
    "clear_display_changed",
    "read_input",
    "update_timers",
    "timer_divisor",
    "DecodedInstruction",
    "Op",
    "decode",
    "classify",
    "FaultKind",
    "MachineFault",
    "StackOverflow",
    "StackUnderflow",
    "MemoryOverflow",
    "InvalidInstruction",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MEMORY_SIZE",
    "STACK_SIZE",
]
