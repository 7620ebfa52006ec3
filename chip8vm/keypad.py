"""CHIP-8 keypad input and FX0A key-wait resolution."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.constants import NUM_KEYS


def read_input(state: MachineState, keypad) -> MachineState:
    """Mirror host pad state and resolve a pending key wait.

    When the machine is waiting for a key and any key is pressed, the lowest
    pressed key index is written to the latched register and the wait ends.
    """
    keypad = jnp.asarray(keypad, dtype=jnp.bool_).reshape(NUM_KEYS)
    pressed = jnp.any(keypad)
    resolved = state.waiting_for_key & pressed
    key = jnp.astype(jnp.argmax(keypad), jnp.uint8)
    new_V = jnp.where(resolved, state.V.at[state.key_register].set(key), state.V)
    return state.replace(
        keypad=keypad,
        V=new_V,
        waiting_for_key=state.waiting_for_key & ~pressed,
    )

