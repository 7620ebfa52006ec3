"""CHIP-8 fault kinds and the exceptions raised for them."""

from enum import IntEnum
from typing import Optional


class FaultKind(IntEnum):
    """Fault code stored in ``MachineState.fault``."""
    NONE = 0
    STACK_OVERFLOW = 1
    STACK_UNDERFLOW = 2
    MEMORY_OVERFLOW = 3
    INVALID_INSTRUCTION = 4


class MachineFault(Exception):
    """Unrecoverable error raised by a single machine cycle.

    Attributes:
        pc: Address of the instruction that faulted
        opcode: Instruction word at ``pc``, or None if it could not be fetched
    """

    kind = FaultKind.NONE
    description = "machine fault"

    def __init__(self, pc: int, opcode: Optional[int] = None):
        self.pc = pc
        self.opcode = opcode
        if opcode is None:
            message = f"{self.description} at PC=0x{pc:04X}"
        else:
            message = f"{self.description} at PC=0x{pc:04X} (opcode 0x{opcode:04X})"
        super().__init__(message)


class StackOverflow(MachineFault):
    """CALL with all 16 stack slots in use."""
    kind = FaultKind.STACK_OVERFLOW
    description = "stack overflow"


class StackUnderflow(MachineFault):
    """RET with an empty stack."""
    kind = FaultKind.STACK_UNDERFLOW
    description = "stack underflow"


class MemoryOverflow(MachineFault):
    """Fetch or I-relative access past the last memory address."""
    kind = FaultKind.MEMORY_OVERFLOW
    description = "memory overflow"


class InvalidInstruction(MachineFault):
    """Opcode that matches no known instruction pattern."""
    kind = FaultKind.INVALID_INSTRUCTION
    description = "invalid instruction"


FAULT_EXCEPTIONS = {
    exception.kind: exception
    for exception in (StackOverflow, StackUnderflow, MemoryOverflow, InvalidInstruction)
}


def fault_from_code(code: int, pc: int, opcode: Optional[int] = None) -> MachineFault:
    """Build the exception matching a fault code."""
    return FAULT_EXCEPTIONS[FaultKind(code)](pc, opcode)
