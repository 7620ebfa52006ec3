"""Tests for the host-facing Machine."""

import numpy as np
import pytest
from chip8vm import (
    Machine, MachineFault, StackOverflow, StackUnderflow, MemoryOverflow, InvalidInstruction,
    PROGRAM_START,
)
from conftest import assemble

NO_KEYS = [False] * 16


def test_defaults(machine):
    assert machine.pc == PROGRAM_START
    assert machine.cycles_per_timer_tick == 12
    assert machine.framebuffer.shape == (32, 64)
    assert not machine.framebuffer.any()
    assert not machine.paused
    assert not machine.sound_active


def test_cycle_frequency_sets_divisor():
    assert Machine(cycle_frequency=600).cycles_per_timer_tick == 10


def test_bad_configuration():
    with pytest.raises(ValueError):
        Machine(cycle_frequency=0)
    with pytest.raises(ValueError):
        Machine(font_start=0x1F0)


def test_tick_runs_program(machine):
    machine.load_rom(assemble(0x6A42, 0x8AA4))
    machine.tick(NO_KEYS)
    machine.tick(NO_KEYS)
    assert machine.registers[0xA] == 0x84
    assert machine.pc == 0x204


def test_tick_rejects_wrong_pad_size(machine):
    with pytest.raises(ValueError):
        machine.tick([False] * 15)


def test_framebuffer_is_row_major(machine):
    # V0 = 0, V1 = 0, I = glyph "0", draw 5 rows at (0, 0)
    machine.load_rom(assemble(0x6000, 0x6100, 0xF029, 0xD015))
    machine.run(4)

    frame = machine.framebuffer
    assert frame[0, :4].all()
    assert not frame[0, 4]
    assert frame[1, 0] and not frame[1, 1] and frame[1, 3]
    assert frame.sum() == 14


def test_consume_display_changed(machine):
    machine.load_rom(assemble(0x00E0, 0x6000))
    machine.tick(NO_KEYS)
    assert machine.display_changed
    assert machine.consume_display_changed()
    assert not machine.consume_display_changed()

    machine.tick(NO_KEYS)
    assert not machine.display_changed


def test_sound_timer(machine):
    machine.load_rom(assemble(0x600A, 0xF018))
    machine.run(2)
    assert machine.sound_timer == 10
    assert machine.sound_active


def test_delay_timer_decays_at_configured_rate():
    machine = Machine(cycle_frequency=120)
    # V0 = 4, DT = V0, then spin on JP 0x204
    machine.load_rom(assemble(0x6004, 0xF015, 0x1204))
    machine.run(2)
    assert machine.delay_timer == 3
    machine.run(2)
    assert machine.delay_timer == 2
    machine.run(20)
    assert machine.delay_timer == 0


def test_key_wait(machine):
    machine.load_rom(assemble(0xF50A, 0x6101))
    machine.tick(NO_KEYS)
    assert machine.waiting_for_key

    machine.tick(NO_KEYS)
    assert machine.pc == 0x202

    pad = list(NO_KEYS)
    pad[0xC] = True
    machine.tick(pad)
    assert not machine.waiting_for_key
    assert machine.registers[5] == 0xC
    assert machine.registers[1] == 1


def test_interrupt_toggles_pause(machine):
    machine.load_rom(assemble(0x6A01))
    machine.interrupt()
    assert machine.paused
    machine.tick(NO_KEYS)
    assert machine.pc == PROGRAM_START

    machine.interrupt()
    machine.tick(NO_KEYS)
    assert machine.registers[0xA] == 1


class TestFaults:
    """Faults surface as exceptions carrying PC and opcode."""

    def test_stack_underflow(self, machine):
        machine.load_rom(assemble(0x00EE))
        with pytest.raises(StackUnderflow) as info:
            machine.tick(NO_KEYS)
        assert info.value.pc == PROGRAM_START
        assert info.value.opcode == 0x00EE
        assert machine.pc == PROGRAM_START

    def test_stack_overflow(self, machine):
        machine.load_rom(assemble(0x2200))
        for _ in range(16):
            machine.tick(NO_KEYS)
        with pytest.raises(StackOverflow):
            machine.tick(NO_KEYS)

    def test_invalid_instruction(self, machine):
        machine.load_rom(assemble(0x5121))
        with pytest.raises(InvalidInstruction) as info:
            machine.tick(NO_KEYS)
        assert info.value.opcode == 0x5121
        assert "0x5121" in str(info.value)

    def test_memory_overflow(self, machine):
        machine.load_rom(assemble(0x1FFF))
        machine.tick(NO_KEYS)
        with pytest.raises(MemoryOverflow) as info:
            machine.tick(NO_KEYS)
        assert info.value.pc == 0xFFF
        assert info.value.opcode is None

    def test_run_surfaces_fault(self, machine):
        machine.load_rom(assemble(0x6000, 0x00EE))
        with pytest.raises(MachineFault):
            machine.run(5)

    def test_reset_after_fault(self, machine):
        machine.load_rom(assemble(0x6A07, 0x00EE))
        machine.tick(NO_KEYS)
        with pytest.raises(StackUnderflow):
            machine.tick(NO_KEYS)

        machine.reset()
        assert machine.pc == PROGRAM_START
        assert machine.registers[0xA] == 0
        machine.tick(NO_KEYS)
        assert machine.registers[0xA] == 7


def test_load_rom_too_large(machine):
    with pytest.raises(ValueError):
        machine.load_rom(bytes(3585))


def test_machines_are_independent():
    first, second = Machine(), Machine()
    first.load_rom(assemble(0x6A01))
    second.load_rom(assemble(0x6A02))
    first.tick(NO_KEYS)
    second.tick(NO_KEYS)
    assert first.registers[0xA] == 1
    assert second.registers[0xA] == 2
    assert isinstance(first.registers, np.ndarray)
