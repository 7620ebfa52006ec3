"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import Op, decode
from chip8vm.constants import PROGRAM_START, MAX_ROM_SIZE, MEMORY_SIZE
from chip8vm.errors import FaultKind
from chip8vm.clock import update_timers
from chip8vm.keypad import read_input
from chip8vm.instructions.faults import raise_fault
from chip8vm.instructions.system import no_op, execute_clear_screen, execute_return, execute_invalid
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key_pressed, execute_skip_if_key_not_pressed,
)
from chip8vm.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left,
)
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
)

HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.SYS: no_op,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key_pressed,
    Op.SKNP: execute_skip_if_key_not_pressed,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
    Op.INVALID: execute_invalid,
}

# lax.switch branches, indexed by Op value
_BRANCHES = [HANDLERS[op] for op in Op]


@jax.jit
def execute(state: MachineState, instruction: int) -> MachineState:
    """Execute single CHIP-8 instruction.

    PC is not advanced here; ``fetch`` does that. A faulting instruction
    returns its partial result with ``fault`` set; ``step`` discards it.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.op, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: MachineState) -> tuple[MachineState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC by 2."""
    pc = jnp.astype(state.pc, jnp.int32)
    high = state.memory[jnp.clip(pc, 0, MEMORY_SIZE - 1)]
    low = state.memory[jnp.clip(pc + 1, 0, MEMORY_SIZE - 1)]
    state = raise_fault(state.replace(pc=state.pc + 2), pc + 1 >= MEMORY_SIZE, FaultKind.MEMORY_OVERFLOW)
    return state, _pack_u16(high, low)


def step(state: MachineState) -> MachineState:
    """Fetch, execute and count one instruction.

    If anything faults, the whole cycle is rolled back and only the fault
    code is kept.
    """
    fetched, instruction = fetch(state)
    executed = update_timers(execute(fetched, instruction))
    return jax.lax.cond(
        executed.fault == int(FaultKind.NONE),
        lambda s: executed,
        lambda s: s.replace(fault=executed.fault),
        state
    )


@jax.jit
def cycle(state: MachineState) -> MachineState:
    """Run one machine cycle; idle while paused or waiting for a key."""
    state = state.replace(fault=jnp.uint8(int(FaultKind.NONE)))
    return jax.lax.cond(
        state.paused | state.waiting_for_key,
        lambda s: s,
        step,
        state
    )


@jax.jit
def tick(state: MachineState, keypad: jnp.ndarray) -> MachineState:
    """Read host pad state, then run one cycle."""
    return cycle(read_input(state, keypad))


def _run_cycle(state, _):
    state = cycle(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_cycles(state: MachineState, n: int) -> MachineState:
    """Run ``n`` cycles in a single compiled scan.

    A fault stops progress: the faulting cycle rolls back, so every later
    cycle faults the same way and the returned state carries the fault.
    """
    state, _ = jax.lax.scan(_run_cycle, state, length=n)
    return state


def load_rom(state: MachineState, rom: bytes) -> MachineState:
    """Copy a ROM image into memory at 0x200 and point PC at it."""
    if len(rom) > MAX_ROM_SIZE:
        raise ValueError(f"ROM is {len(rom)} bytes, at most {MAX_ROM_SIZE} fit in memory")
    rom_array = jnp.array(list(rom), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom)].set(rom_array)
    return state.replace(memory=new_memory, pc=jnp.array(PROGRAM_START, dtype=jnp.uint16))


def toggle_pause(state: MachineState) -> MachineState:
    """Flip the pause latch checked by every ``cycle``."""
    return state.replace(paused=~state.paused)


def clear_display_changed(state: MachineState) -> MachineState:
    """Acknowledge the current frame; CLS/DRW set the flag again."""
    return state.replace(display_changed=jnp.array(False))
