"""Tests for memory and register operations."""

import pytest
from chip8vm import execute


class TestBasicMemory:
    """Test basic memory operations."""

    def test_set_basic(self, fresh_state):
        """6XNN - Set VX = NN."""
        state = execute(fresh_state, 0x6A42)
        assert state.V[0xA] == 0x42

    def test_set_index(self, fresh_state):
        """ANNN - Set I = NNN."""
        state = execute(fresh_state, 0xA123)
        assert state.I == 0x123


class TestAddImmediate:
    """Test 7XNN."""

    @pytest.mark.parametrize("a, b", [(0x00, 0x00), (0x10, 0x20), (0xFF, 0x01), (0x80, 0x80), (0xFE, 0xFF)])
    def test_add_wraps_without_flag(self, fresh_state, a, b):
        """VX = (VX + NN) mod 256 and VF keeps its value."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(a).at[15].set(0x5A))

        state = execute(state, 0x7300 | b)

        assert state.V[3] == (a + b) % 256
        assert state.V[15] == 0x5A

    def test_add_to_flag_register(self, fresh_state):
        """7FNN treats VF like any other register."""
        state = execute(fresh_state, 0x7FFF)
        state = execute(state, 0x7F02)
        assert state.V[15] == 0x01


class TestRandom:
    """Test CXNN."""

    def test_random_respects_mask(self, fresh_state):
        state = fresh_state
        for _ in range(10):
            state = execute(state, 0xC00F)
            assert state.V[0] <= 0x0F

    def test_random_zero_mask(self, fresh_state):
        state = execute(fresh_state, 0xC000)
        assert state.V[0] == 0

    def test_random_advances_key(self, fresh_state):
        state = execute(fresh_state, 0xC0FF)
        assert not (state.rng == fresh_state.rng).all()
