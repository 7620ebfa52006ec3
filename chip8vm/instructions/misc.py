"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import GLYPH_SIZE, MEMORY_SIZE, NUM_REGISTERS
from chip8vm.errors import FaultKind
from chip8vm.instructions.faults import raise_fault


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX0A - Wait for key press (blocking).

    Latches the target register; the next pad input with a pressed key
    resolves the wait (see ``chip8vm.keypad.read_input``).
    """
    return state.replace(
        waiting_for_key=jnp.array(True),
        key_register=jnp.astype(instruction.x, jnp.uint8),
    )


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX1E - Add VX to I register. VF is untouched."""
    return state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16))


def execute_font_character(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = state.font_start + jnp.astype(state.V[instruction.x], jnp.uint16) * GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    start = jnp.astype(state.I, jnp.int32)
    indices = jnp.arange(3) + start
    state = state.replace(memory=state.memory.at[indices].set(digits, mode="drop"))
    return raise_fault(state, start + 3 > MEMORY_SIZE, FaultKind.MEMORY_OVERFLOW)


def execute_store_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I."""
    start = jnp.astype(state.I, jnp.int32)
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = start + jnp.arange(NUM_REGISTERS)
    current_memory_values = state.memory[jnp.clip(base_indices, 0, MEMORY_SIZE - 1)]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    state = state.replace(memory=state.memory.at[base_indices].set(new_memory_values, mode="drop"))
    return raise_fault(state, start + instruction.x + 1 > MEMORY_SIZE, FaultKind.MEMORY_OVERFLOW)


def execute_load_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I."""
    start = jnp.astype(state.I, jnp.int32)
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = start + jnp.arange(NUM_REGISTERS)
    memory_values = state.memory[jnp.clip(base_indices, 0, MEMORY_SIZE - 1)]
    state = state.replace(V=jnp.where(register_mask, memory_values, state.V))
    return raise_fault(state, start + instruction.x + 1 > MEMORY_SIZE, FaultKind.MEMORY_OVERFLOW)
