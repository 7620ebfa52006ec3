"""Console logging for the CHIP-8 machine.

``ConsoleLogger`` prints levelled, optionally coloured and time-stamped
lines. Its ``trace`` method renders a machine state before each executed
instruction and does no work unless DEBUG output is enabled.
"""

import time
import sys

import numpy as np

from chip8vm.state import MachineState
from chip8vm.constants import MEMORY_SIZE
from chip8vm.decode import Op, classify

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger for machine events and instruction traces."""

    def __init__(
        self,
        name: str = "Chip8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def is_enabled_for(self, level: str) -> bool:
        """Check if messages at ``level`` pass the configured threshold."""
        return LEVELS.index(level.upper()) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{_COLORS[level]}{level_str}{_RESET}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self.is_enabled_for(level):
            print(self._format_message(level.upper(), message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def trace(self, state: MachineState):
        """Log the instruction about to run and the state it runs on.

        Paused machines log nothing; a pending FX0A logs a single line.
        """
        if not self.is_enabled_for("DEBUG") or bool(state.paused):
            return
        if bool(state.waiting_for_key):
            self.debug("Waiting for keypress")
            return
        pc = int(state.pc)
        if pc + 1 >= MEMORY_SIZE:
            self.debug(f"PC:0x{pc:04X} -> past end of memory")
            return
        opcode = (int(state.memory[pc]) << 8) | int(state.memory[pc + 1])
        self.debug(f"PC:0x{pc:04X} -> 0x{opcode:04X} {Op(int(classify(opcode))).name}")
        self.debug(describe_state(state))


def _hex_bytes(values) -> str:
    return " ".join(f"{int(v):02X}" for v in values)


def describe_state(state: MachineState) -> str:
    """Render registers, stack, timers and the bytes at PC on a few lines.

    Args:
        state: Machine state to describe (pulled to host memory)

    Returns:
        Multi-line human readable summary
    """
    memory = np.asarray(state.memory)
    pc = int(state.pc)
    pointer = int(state.stack.pointer)
    keys = np.flatnonzero(np.asarray(state.keypad))
    lines = [
        f"PC: 0x{pc:04X}  I: 0x{int(state.I):04X}  SP: {pointer}  "
        f"DT: {int(state.delay_timer)}  ST: {int(state.sound_timer)}  TC: {int(state.timer_counter)}",
        f"V:  {_hex_bytes(np.asarray(state.V))}",
        f"S:  {' '.join(f'{int(a):03X}' for a in np.asarray(state.stack.data)[:pointer]) or '-'}",
        f"M:  {_hex_bytes(memory[pc:pc + 6])}",
        f"K:  {' '.join(f'{k:X}' for k in keys) or '-'}",
    ]
    if bool(state.waiting_for_key):
        lines.append(f"Waiting for key -> V{int(state.key_register):X}")
    return "\n".join(lines)
