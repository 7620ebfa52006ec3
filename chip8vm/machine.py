"""Host-facing CHIP-8 machine.

``Machine`` owns a ``MachineState`` and drives the jitted functional core
one cycle at a time. It turns fault codes into exceptions and reports what
it does through a ``ConsoleLogger``.
"""

from typing import Optional, Sequence

import jax
import numpy as np

from chip8vm.constants import DEFAULT_CYCLE_FREQUENCY, TIMER_FREQUENCY, FONT_START, MEMORY_SIZE, NUM_KEYS
from chip8vm.state import MachineState, create_state
from chip8vm.errors import FaultKind, fault_from_code
from chip8vm.emulator import cycle, run_cycles, load_rom, toggle_pause, clear_display_changed
from chip8vm.clock import sound_active
from chip8vm.keypad import read_input
from chip8vm.logging import ConsoleLogger


class Machine:
    """Stateful CHIP-8 machine for a host loop.

    The host calls ``tick`` once per iteration with the current pad state,
    then reads ``framebuffer``, ``display_changed`` and ``sound_timer``.
    Faults raise a ``MachineFault`` subclass and leave the machine at the
    faulting instruction; the host may ``reset`` or stop.
    """

    def __init__(
        self,
        cycle_frequency: float = DEFAULT_CYCLE_FREQUENCY,
        timer_frequency: float = TIMER_FREQUENCY,
        font_start: int = FONT_START,
        seed: int = 0,
        logger: Optional[ConsoleLogger] = None,
    ):
        """Initialize the machine.

        Args:
            cycle_frequency: CPU rate in Hz the host loop drives ``tick`` at (typically 700)
            timer_frequency: Delay/sound timer decay rate in Hz (60 for CHIP-8)
            font_start: Memory address of the built-in hex font, below 0x200
            seed: Seed for the RND instruction's random stream
            logger: Logger for machine events; defaults to WARNING level console output
        """
        self.cycle_frequency = cycle_frequency
        self.timer_frequency = timer_frequency
        self.font_start = font_start
        self.seed = seed
        self.logger = logger or ConsoleLogger("Chip8", log_level="WARNING")
        self.rom: Optional[bytes] = None
        self.state: MachineState = self._fresh_state()

    def _fresh_state(self) -> MachineState:
        return create_state(
            jax.random.PRNGKey(self.seed),
            font_start=self.font_start,
            cycle_frequency=self.cycle_frequency,
            timer_frequency=self.timer_frequency,
        )

    @property
    def cycles_per_timer_tick(self) -> int:
        """Executed cycles between two timer decrements."""
        return self.state.cycles_per_timer_tick

    def load_rom(self, rom: bytes):
        """Reinitialize memory and copy a ROM image to 0x200.

        Args:
            rom: Raw CHIP-8 program, at most 3584 bytes
        """
        rom = bytes(rom)
        self.state = load_rom(self._fresh_state(), rom)
        self.rom = rom
        self.logger.info(f"Loaded ROM ({len(rom)} bytes)")

    def reset(self):
        """Rebuild the machine and reload the last ROM, if any."""
        self.state = self._fresh_state()
        if self.rom is not None:
            self.state = load_rom(self.state, self.rom)
        self.logger.info("Machine reset")

    def interrupt(self):
        """Toggle the pause latch."""
        self.state = toggle_pause(self.state)
        self.logger.info("Paused" if self.paused else "Resumed")

    def tick(self, keypad: Sequence[bool]):
        """Mirror host pad state, then run one cycle.

        Args:
            keypad: 16 booleans, index = CHIP-8 key 0x0-0xF
        """
        keys = np.asarray(keypad, dtype=np.bool_)
        if keys.shape != (NUM_KEYS,):
            raise ValueError(f"keypad must hold {NUM_KEYS} keys, got shape {keys.shape}")
        self.state = read_input(self.state, keys)
        self.cycle()

    def cycle(self):
        """Run one fetch-decode-execute step (idle while paused or waiting)."""
        self.logger.trace(self.state)
        self.state = cycle(self.state)
        self._raise_on_fault()

    def run(self, cycles: int):
        """Run several cycles in one compiled call, with the current pad state."""
        self.state = run_cycles(self.state, cycles)
        self._raise_on_fault()

    def _opcode_at(self, pc: int) -> Optional[int]:
        if pc + 1 >= MEMORY_SIZE:
            return None
        memory = self.state.memory
        return (int(memory[pc]) << 8) | int(memory[pc + 1])

    def _raise_on_fault(self):
        code = int(self.state.fault)
        if code == FaultKind.NONE:
            return
        pc = self.pc
        error = fault_from_code(code, pc, self._opcode_at(pc))
        self.logger.error(str(error))
        raise error

    @property
    def paused(self) -> bool:
        return bool(self.state.paused)

    @property
    def waiting_for_key(self) -> bool:
        return bool(self.state.waiting_for_key)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def registers(self) -> np.ndarray:
        """V0-VF as a host array."""
        return np.asarray(self.state.V)

    @property
    def framebuffer(self) -> np.ndarray:
        """Row-major (32, 64) boolean view of the display; True = lit."""
        return np.asarray(self.state.display).T

    @property
    def display_changed(self) -> bool:
        return bool(self.state.display_changed)

    def consume_display_changed(self) -> bool:
        """Return the display-changed flag and clear it for the next frame."""
        changed = self.display_changed
        if changed:
            self.state = clear_display_changed(self.state)
        return changed

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def sound_active(self) -> bool:
        """Audio should play while the sound timer is non-zero."""
        return bool(sound_active(self.state))
