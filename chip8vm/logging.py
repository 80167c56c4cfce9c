"""Console output for the interpreter.

``ConsoleLogger`` prints the engine's opcode trace and fault reports.
``TickProgressBar`` drives a tqdm bar from inside the scanned tick loop of
:func:`chip8vm.emulator.run_ticks` through ``io_callback``.
"""

import sys
import time

import jax
from jax.experimental import io_callback

from tqdm import tqdm

LOG_LEVELS = {
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4,
}

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "ERROR": "\033[31m",
}
_RESET_COLOR = "\033[0m"


class ConsoleLogger:
    """Prints ``[elapsed][LEVEL][name] message`` lines at or above a threshold."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.threshold = LOG_LEVELS[self.log_level]
        self.use_colors = use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _emit(self, level: str, message: str):
        if LOG_LEVELS[level] < self.threshold:
            return

        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{_LEVEL_COLORS[level]}{tag}{_RESET_COLOR}"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}{tag}[{self.name}] {message}", flush=True)

    def debug(self, message: str):
        self._emit("DEBUG", message)

    def info(self, message: str):
        self._emit("INFO", message)

    def error(self, message: str):
        self._emit("ERROR", message)


class TickProgressBar:
    """tqdm bar for a run of ``total`` scanned ticks.

    The bar is refreshed every ``refresh_every`` iterations and on the last
    one, showing completed ticks and whether the run has halted on an
    invalid opcode. Scan iterations after a halt still advance the bar.
    """

    def __init__(self, total: int, refresh_every: int = None):
        self.total = total
        self.refresh_every = refresh_every or max(1, min(total // 20, 50))
        self._bar = None

    def _report(self, iteration, ticks, halted):
        if self._bar is None:
            self._bar = tqdm(total=self.total, desc="Running", unit="tick")
        self._bar.n = int(iteration) + 1
        self._bar.set_postfix(ticks=int(ticks), halted=bool(halted))
        if int(iteration) == self.total - 1:
            self._bar.close()
            self._bar = None

    def wrap(self, body):
        """Wrap a ``(carry, iteration)`` scan body whose carry is ``(state, RunInfo)``."""
        def body_with_progress(carry, iteration):
            carry, output = body(carry, iteration)
            _, info = carry
            due = (iteration % self.refresh_every == 0) | (iteration == self.total - 1)
            jax.lax.cond(
                due,
                lambda _: io_callback(
                    self._report, None, iteration, info.ticks, info.halted, ordered=True
                ),
                lambda _: None,
                operand=None,
            )
            return carry, output

        return body_with_progress
