"""Stateful CHIP-8 machine.

:class:`Chip8` holds the current :class:`EmulatorState` and swaps it for the
result of each pure operation. A failing operation raises before the swap,
so the machine is left exactly as it was.
"""

from typing import List, Optional

import jax
import numpy as np

from polychip8.constants import PROGRAM_START, INSTRUCTIONS_PER_FRAME
from polychip8.decode import DecodedInstruction, decode
from polychip8.disassembler import disassemble
from polychip8.emulator import clock, execute, fetch, load_rom, load_rom_file, set_keypress, tick_timers
from polychip8.errors import Chip8Error
from polychip8.logging import ConsoleLogger, ExecutionTracer
from polychip8.rendering import framebuffer_rows
from polychip8.state import EmulatorState, EngineStatus, create_state, reset_state


class Chip8:
    """CHIP-8 virtual machine driven by explicit ``clock`` and ``tick_timers`` calls."""

    def __init__(
        self,
        seed: int = 0,
        logger: Optional[ConsoleLogger] = None,
        log_level: str = "WARNING",
        trace: bool = False,
    ):
        """
        Args:
            seed: Seed for the PRNG key used by ``RND``
            logger: Logger for machine events; a console logger is created if omitted
            log_level: Level of the default logger
            trace: Log every executed instruction at DEBUG level
        """
        self.logger = logger or ConsoleLogger("PolyChip8", log_level=log_level)
        self.tracer = ExecutionTracer(self.logger) if trace else None
        self.state = create_state(jax.random.PRNGKey(seed))

    def _apply(self, operation, *args) -> EmulatorState:
        try:
            return operation(self.state, *args)
        except Chip8Error as e:
            self.logger.error(str(e))
            raise

    # Loading and reset

    def load_rom(self, rom_data: bytes):
        """Copy ``rom_data`` to 0x200. Registers are not reset."""
        self.state = self._apply(load_rom, rom_data)
        self.logger.debug(f"Loaded ROM ({self.state.rom_size} bytes)")

    def load_rom_file(self, filename: str):
        self.state = self._apply(load_rom_file, filename)
        self.logger.info(f"Loaded {filename} ({self.state.rom_size} bytes)")

    def reset(self, clear_memory: bool = False):
        """Return to the power-on state, keeping program memory unless ``clear_memory``."""
        self.state = reset_state(self.state, clear_memory)
        self.logger.debug("Machine reset" + (" (memory cleared)" if clear_memory else ""))

    # Execution

    def fetch(self) -> DecodedInstruction:
        """Fetch and decode the next instruction without executing it."""
        self.state, instruction = self._apply(fetch)
        return decode(instruction)

    def execute(self, instruction: Optional[int] = None):
        """Execute ``instruction``, or the most recently fetched one."""
        if instruction is None:
            instruction = int(self.state.instruction)
        was_waiting = self.state.status == EngineStatus.AWAITING_KEY
        address = int(self.state.pc) - 2
        self.state = self._apply(execute, instruction)
        self._report(address, instruction, was_waiting)

    def clock(self):
        """Run one fetch/decode/dispatch/execute cycle."""
        was_waiting = self.state.status == EngineStatus.AWAITING_KEY
        address = int(self.state.pc) if not was_waiting else int(self.state.pc) - 2
        instruction = int(self.state.instruction)
        self.state = self._apply(clock)
        if not was_waiting:
            instruction = int(self.state.instruction)
        self._report(address, instruction, was_waiting)

    def _report(self, address: int, instruction: int, was_waiting: bool):
        if self.tracer is not None and not was_waiting:
            self.tracer.on_execute(address, instruction)
        waiting = self.state.status == EngineStatus.AWAITING_KEY
        if waiting and not was_waiting:
            self.logger.debug(f"Awaiting key press at $0x{address:04X}")
        elif was_waiting and not waiting:
            self.logger.debug(f"Key press received, resuming at $0x{int(self.state.pc):04X}")

    def tick_timers(self):
        """Decrement both timers once; call at 60 Hz."""
        self.state = tick_timers(self.state)

    def run_frame(self, instructions_per_frame: int = INSTRUCTIONS_PER_FRAME):
        """One 60 Hz frame: a timer tick followed by ``instructions_per_frame`` clocks."""
        self.tick_timers()
        for _ in range(instructions_per_frame):
            self.clock()

    # Input

    def set_keypress(self, key: int, pressed: bool):
        self.state = self._apply(set_keypress, key, pressed)

    # Diagnostics

    def disassemble(self, program_only: bool = False) -> List[str]:
        """Disassembly listing from 0x200 to the end of memory, or of the loaded ROM only."""
        end = PROGRAM_START + self.state.rom_size if program_only else None
        return disassemble(self.state, end=end)

    # Read accessors

    @property
    def memory(self) -> np.ndarray:
        return np.asarray(self.state.memory)

    @property
    def registers(self) -> np.ndarray:
        return np.asarray(self.state.V)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def sp(self) -> int:
        return int(self.state.stack.pointer)

    @property
    def stack(self) -> np.ndarray:
        return np.asarray(self.state.stack.data)

    @property
    def I(self) -> int:
        return int(self.state.I)

    @property
    def decoded(self) -> DecodedInstruction:
        return decode(int(self.state.instruction))

    @property
    def framebuffer(self) -> np.ndarray:
        """Row-major (32, 64) boolean pixel grid."""
        return framebuffer_rows(self.state.display)

    @property
    def keypad(self) -> np.ndarray:
        return np.asarray(self.state.keypad)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def status(self) -> EngineStatus:
        return self.state.status

    @property
    def rom_size(self) -> int:
        return self.state.rom_size
