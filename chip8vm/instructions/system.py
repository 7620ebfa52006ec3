"""CHIP-8 system instructions (0x0xxx) and the invalid-opcode handler."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.errors import FaultKind
from chip8vm.stack import pop, is_empty
from chip8vm.instructions.faults import raise_fault


def no_op(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """0NNN - SYS addr, ignored by modern interpreters."""
    return state


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), display_changed=jnp.array(True))


def execute_return(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00EE - Return from subroutine."""
    underflow = is_empty(state.stack)
    stack, address = pop(state.stack)
    state = state.replace(stack=stack, pc=address)
    return raise_fault(state, underflow, FaultKind.STACK_UNDERFLOW)


def execute_invalid(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """Any opcode that matches no pattern."""
    return raise_fault(state, True, FaultKind.INVALID_INSTRUCTION)
