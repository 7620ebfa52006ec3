"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, DEFAULT_CYCLE_FREQUENCY, TIMER_FREQUENCY,
)
from chip8vm.errors import FaultKind


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


def _scalar(value, dtype):
    return field(default_factory=lambda: jnp.array(value, dtype=dtype))


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _scalar(0, jnp.int32)


class MachineState(PyTreeNode):
    """Main CHIP-8 machine state.

    The display is indexed ``[x, y]``. ``font_start`` and
    ``cycles_per_timer_tick`` are static configuration, not traced.
    """
    rng: jax.Array
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = _scalar(PROGRAM_START, jnp.uint16)
    display: jnp.ndarray = _zeros((SCREEN_WIDTH, SCREEN_HEIGHT), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    timer_counter: jnp.ndarray = _zeros((), jnp.int32)
    waiting_for_key: jnp.ndarray = _scalar(False, jnp.bool_)
    key_register: jnp.ndarray = _zeros((), jnp.uint8)
    paused: jnp.ndarray = _scalar(False, jnp.bool_)
    display_changed: jnp.ndarray = _scalar(False, jnp.bool_)
    fault: jnp.ndarray = _scalar(int(FaultKind.NONE), jnp.uint8)
    font_start: int = field(pytree_node=False, default=FONT_START)
    cycles_per_timer_tick: int = field(
        pytree_node=False, default=round(DEFAULT_CYCLE_FREQUENCY / TIMER_FREQUENCY)
    )


def timer_divisor(cycle_frequency: float, timer_frequency: float = TIMER_FREQUENCY) -> int:
    """Number of executed cycles per 60 Hz timer tick at the given CPU rate."""
    if cycle_frequency <= 0:
        raise ValueError(f"cycle_frequency must be positive, got {cycle_frequency}")
    if timer_frequency <= 0:
        raise ValueError(f"timer_frequency must be positive, got {timer_frequency}")
    return max(1, round(cycle_frequency / timer_frequency))


def create_state(
    rng: jax.Array = jax.random.PRNGKey(0),
    font_start: int = FONT_START,
    cycle_frequency: float = DEFAULT_CYCLE_FREQUENCY,
    timer_frequency: float = TIMER_FREQUENCY,
) -> MachineState:
    """Create initial machine state with font data loaded.

    Args:
        rng: JAX random key consumed by RND
        font_start: Base address of the built-in hex font
        cycle_frequency: CPU instruction rate in Hz
        timer_frequency: Delay/sound timer decay rate in Hz

    Returns:
        Fresh MachineState with zeroed memory, cleared display and PC at 0x200
    """
    if not 0 <= font_start <= PROGRAM_START - len(FONT_DATA):
        raise ValueError(
            f"font_start must lie in 0x000-0x{PROGRAM_START - len(FONT_DATA):03X}, got 0x{font_start:X}"
        )
    state = MachineState(
        rng,
        font_start=font_start,
        cycles_per_timer_tick=timer_divisor(cycle_frequency, timer_frequency),
    )
    return state.replace(memory=state.memory.at[font_start:font_start + len(FONT_DATA)].set(FONT_DATA))
