"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER, MEMORY_SIZE
from chip8vm.errors import FaultKind
from chip8vm.instructions.faults import raise_fault

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Every sprite pixel wraps around both screen edges. VF is set when a
    drawn pixel erases one that was already lit.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT
    height = jnp.astype(instruction.n, jnp.int32)

    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < height)

    sprite_start = jnp.astype(state.I, jnp.int32)
    sprite_bytes = jnp.astype(state.memory[jnp.clip(sprite_start + row_offset, 0, MEMORY_SIZE - 1)], jnp.int32)
    bit_shift = jnp.clip(SPRITE_WIDTH - 1 - col_offset, 0, SPRITE_WIDTH - 1)
    sprite = (((sprite_bytes >> bit_shift) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    state = state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        display_changed=jnp.array(True),
    )
    return raise_fault(state, sprite_start + height > MEMORY_SIZE, FaultKind.MEMORY_OVERFLOW)
