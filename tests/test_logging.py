"""Tests for console logging."""

import pytest
from chip8vm import Machine, StackUnderflow, create_state, load_rom, toggle_pause
from chip8vm.logging import ConsoleLogger, describe_state
from conftest import assemble


def plain_logger(level):
    return ConsoleLogger("Test", log_level=level, use_colors=False, show_timestamps=False)


def test_level_filtering(capsys):
    logger = plain_logger("INFO")
    logger.debug("hidden")
    logger.info("shown")
    logger.error("also shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "[    INFO][Test] shown" in out
    assert "[   ERROR][Test] also shown" in out


def test_unknown_level():
    with pytest.raises(ValueError):
        ConsoleLogger(log_level="VERBOSE")


def test_describe_state():
    text = describe_state(create_state())
    assert "PC: 0x0200" in text
    assert "SP: 0" in text
    assert "V:  00 00" in text


def test_describe_state_while_waiting():
    state = create_state().replace(waiting_for_key=True)
    assert "Waiting for key" in describe_state(state)


def test_machine_traces_instructions(capsys):
    machine = Machine(logger=plain_logger("DEBUG"))
    machine.load_rom(assemble(0x00E0))
    machine.tick([False] * 16)

    out = capsys.readouterr().out
    assert "Loaded ROM (2 bytes)" in out
    assert "PC:0x0200 -> 0x00E0 CLS" in out


def test_machine_logs_faults(capsys):
    machine = Machine(logger=plain_logger("ERROR"))
    machine.load_rom(assemble(0x00EE))
    with pytest.raises(StackUnderflow):
        machine.tick([False] * 16)

    out = capsys.readouterr().out
    assert "stack underflow at PC=0x0200 (opcode 0x00EE)" in out
    assert "Loaded ROM" not in out


def test_trace_is_silent_above_debug(capsys):
    plain_logger("INFO").trace(create_state())
    assert capsys.readouterr().out == ""


def test_trace_reports_wait_and_skips_paused(capsys):
    logger = plain_logger("DEBUG")
    waiting = create_state().replace(waiting_for_key=True)

    logger.trace(waiting)
    logger.trace(toggle_pause(waiting))

    out = capsys.readouterr().out
    assert out.count("Waiting for keypress") == 1
    assert "PC:" not in out


def test_trace_dumps_state_after_instruction_line(capsys):
    plain_logger("DEBUG").trace(load_rom(create_state(), assemble(0x6A42)))

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "[   DEBUG][Test] PC:0x0200 -> 0x6A42 LD_BYTE"
    assert lines[1] == "[   DEBUG][Test] PC: 0x0200  I: 0x0000  SP: 0  DT: 0  ST: 0  TC: 0"
    assert "M:  6A 42 00 00 00 00" in lines
