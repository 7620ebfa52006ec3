"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FLAG_REGISTER


def _byte(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    return _byte(result), _flag(result > 0xFF)


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 iff VX > VY."""
    result = jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)
    return _byte(result), _flag(vx > vy)


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return _byte(vx >> 1), _flag(vx & 0x01)


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 iff VY > VX."""
    result = jnp.astype(vy, jnp.int32) - jnp.astype(vx, jnp.int32)
    return _byte(result), _flag(vy > vx)


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return _byte(jnp.astype(vx, jnp.int32) << 1), _flag((vx >> 7) & 0x01)


def make_alu_instruction(operation):
    """Factory for 8XYN instructions.

    Operations returning a flag write it to VF after the result, so VF holds
    the flag even when X is F.
    """
    def alu_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        result, flag = operation(vx, vy)
        new_V = state.V.at[instruction.x].set(result)
        if flag is not None:
            new_V = new_V.at[FLAG_REGISTER].set(flag)
        return state.replace(V=new_V)
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_shift_right = make_alu_instruction(alu_shift_right)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
execute_alu_shift_left = make_alu_instruction(alu_shift_left)
