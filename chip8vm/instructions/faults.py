"""Fault recording shared by instruction handlers."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.errors import FaultKind


def raise_fault(state: MachineState, condition, kind: FaultKind) -> MachineState:
    """Record ``kind`` when ``condition`` holds, keeping any earlier fault."""
    triggered = condition & (state.fault == int(FaultKind.NONE))
    return state.replace(fault=jnp.where(triggered, jnp.uint8(int(kind)), state.fault))
