"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, load_rom, Machine
from chip8vm.logging import ConsoleLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def machine():
    """Provide a machine with a silent logger."""
    return Machine(logger=ConsoleLogger(log_level="CRITICAL", use_colors=False))


def assemble(*words):
    """Encode 16-bit instruction words as a big-endian ROM image."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def program_state(*words, **kwargs):
    """Fresh state with the given instructions loaded at 0x200."""
    return load_rom(create_state(**kwargs), assemble(*words))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


NO_KEYS = jnp.zeros(16, dtype=jnp.bool_)


def keys_down(*keys):
    """Pad state with the given keys held."""
    pad = NO_KEYS
    for key in keys:
        pad = pad.at[key].set(True)
    return pad
