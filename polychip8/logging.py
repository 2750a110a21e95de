"""Console logging utilities for the CHIP-8 machine.

Provides a small level-filtered console logger, a register dump used by debug
views, an execution tracer that logs every executed instruction, and a tqdm
progress bar for long headless runs.
"""

import time
import sys
from typing import Optional

from tqdm import tqdm

from polychip8.constants import NUM_REGISTERS
from polychip8.decode import decode
from polychip8.disassembler import format_line
from polychip8.state import EmulatorState


class ConsoleLogger:
    """Console logger with level filtering and optional colours."""

    def __init__(
        self,
        name: str = "PolyChip8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream or sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def format_registers(state: EmulatorState) -> list[str]:
    """Render the register file as text lines for debug views."""
    decoded = decode(int(state.instruction))
    lines = [
        f"PC: $0x{int(state.pc):04X}  SP: $0x{int(state.stack.pointer):02X}  I: $0x{int(state.I):04X}",
        f"X: $0x{decoded.x:02X}  Y: $0x{decoded.y:02X}  N: $0x{decoded.n:02X}  "
        f"NN: $0x{decoded.nn:02X}  NNN: $0x{decoded.nnn:04X}",
    ]
    for row in range(0, NUM_REGISTERS, 8):
        lines.append("  ".join(f"V{i:X}: ${int(state.V[i]):02X}" for i in range(row, row + 8)))
    lines.append(
        f"DT: {int(state.delay_timer)}  ST: {int(state.sound_timer)}  Status: {state.status.name}"
    )
    return lines


class ExecutionTracer:
    """Logs each instruction as it is executed."""

    def __init__(self, logger: Optional[ConsoleLogger] = None, level: str = "DEBUG"):
        self.logger = logger or ConsoleLogger("Trace", log_level=level)
        self.level = level
        self.count = 0

    def on_execute(self, address: int, instruction: int):
        self.count += 1
        self.logger.log(self.level, format_line(address, instruction))


def build_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting emulated frames."""
    if desc is None:
        desc = f"Running ({n:,} frames)"
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    return tqdm(total=n, desc=desc, unit="frame", **kwargs)
