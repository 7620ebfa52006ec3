"""CHIP-8 delay/sound timer divider.

The CPU runs at a host-selected rate while both timers decay at a fixed
60 Hz. A counter of executed cycles bridges the two: every
``cycles_per_timer_tick`` cycles both timers drop by one, floored at zero.
"""

import jax.numpy as jnp
from chip8vm.state import MachineState


def _decrement(timer: jnp.ndarray, expired: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(expired & (timer > 0), timer - 1, timer).astype(jnp.uint8)


def update_timers(state: MachineState) -> MachineState:
    """Count one executed cycle and decay the timers when a 60 Hz tick elapses."""
    counter = state.timer_counter + 1
    expired = counter >= state.cycles_per_timer_tick
    return state.replace(
        delay_timer=_decrement(state.delay_timer, expired),
        sound_timer=_decrement(state.sound_timer, expired),
        timer_counter=jnp.where(expired, 0, counter).astype(jnp.int32),
    )


def sound_active(state: MachineState) -> jnp.ndarray:
    """Audio should play while the sound timer is non-zero."""
    return state.sound_timer > 0

