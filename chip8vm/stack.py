"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import STACK_SIZE
from chip8vm.state import StackState


def is_full(stack: StackState) -> jnp.ndarray:
    """True when another push would overflow."""
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    """True when a pop would underflow."""
    return stack.pointer <= 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack.

    Callers check ``is_full`` first; a push on a full stack is dropped.
    """
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16), mode="drop")
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack.

    Callers check ``is_empty`` first; the result of popping an empty stack is undefined.
    """
    new_pointer = stack.pointer - 1
    popped_address = stack.data[jnp.maximum(new_pointer, 0)]
    new_data = stack.data.at[new_pointer].set(0, mode="drop")
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
