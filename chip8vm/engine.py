"""Host-facing CHIP-8 interpreter engine.

:class:`Chip8` owns one :class:`~chip8vm.state.EmulatorState` and exposes the
operations a host needs: load a program image, advance one instruction, and
read the framebuffer together with the "did it change" flag. Errors are
returned as :class:`~chip8vm.errors.Err` values rather than raised::

    engine = Chip8()
    engine.load(rom_bytes).unwrap()
    while True:
        match engine.tick():
            case Ok(TickOutcome(screen_changed=True)):
                render(engine.get_screen())
            case Err(error):
                report(error)
                break

One engine drives one program; hosts running several programs create one
engine each.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np
from omegaconf import DictConfig

from chip8vm import state as machine
from chip8vm.config import make_config
from chip8vm.constants import NUM_KEYS
from chip8vm.emulator import run_ticks, step
from chip8vm.errors import Err, InvalidOpcode, Ok, Result
from chip8vm.logging import ConsoleLogger

_step = jax.jit(step)


@dataclass(frozen=True)
class TickOutcome:
    """Host-observable result of a successful tick."""
    beep: bool
    screen_changed: bool


def _entropy_seed() -> int:
    return int(np.random.SeedSequence().generate_state(1)[0]) & 0x7FFFFFFF


class Chip8:
    """CHIP-8 interpreter owning its machine state."""

    def __init__(self, config: Union[None, Mapping[str, Any], DictConfig] = None):
        self.config = make_config(config)
        self.logger = ConsoleLogger(
            name="chip8vm",
            log_level="DEBUG" if self.config.trace else self.config.log_level,
            use_colors=self.config.use_colors,
            show_timestamps=self.config.show_timestamps,
        )
        seed = self.config.seed if self.config.seed is not None else _entropy_seed()
        self.state = machine.create_state(jax.random.PRNGKey(seed))
        self._fault: Optional[InvalidOpcode] = None

    @property
    def halted(self) -> bool:
        """True after an invalid opcode until the next reset or load."""
        return self._fault is not None

    def reset(self):
        """Reinitialise the machine, keeping the random-number generator."""
        self.state = machine.reset(self.state)
        self._fault = None

    def load(self, image: Union[bytes, Sequence[int], np.ndarray]) -> Result:
        """Reset the machine and load ``image`` at the program start address.

        Returns ``Ok(size)`` with the number of bytes loaded, or
        ``Err(ImageTooLarge)`` with the machine left untouched.
        Raises ``ValueError`` for images that are not byte values.
        """
        image = machine.as_program_image(image)
        result = machine.load(self.state, image)
        if not result.is_ok:
            self.logger.error(str(result.error))
            return result

        self.state = result.value
        self._fault = None
        size = int(image.size)
        self.logger.info(f"Loaded {size} bytes")
        return Ok(size)

    def tick(self) -> Result:
        """Execute one instruction and count the timers down.

        Returns ``Ok(TickOutcome)`` or ``Err(InvalidOpcode)``. Once an invalid
        opcode has been hit every later tick returns the same error.
        """
        if self._fault is not None:
            return Err(self._fault)

        self.state, info = _step(self.state)
        word = int(info.instruction)

        if bool(info.invalid):
            self._fault = InvalidOpcode(word)
            self.logger.error(str(self._fault))
            return Err(self._fault)

        outcome = TickOutcome(beep=bool(info.beep), screen_changed=bool(info.screen_changed))
        if self.config.trace:
            self.logger.debug(f"Opcode: 0x{word:04X}")
            if outcome.beep:
                self.logger.debug("Beep!")
        return Ok(outcome)

    def run(self, n: int, progress: bool = False) -> Result:
        """Execute up to ``n`` ticks in one compiled loop.

        Returns ``Ok(RunInfo)``, or ``Err(InvalidOpcode)`` when the run stopped
        on a fault; the state is then the one right before the faulting tick.
        """
        if self._fault is not None:
            return Err(self._fault)

        self.state, info = run_ticks(self.state, n, progress)
        info = jax.device_get(info)
        if bool(info.halted):
            self._fault = InvalidOpcode(int(info.instruction))
            self.logger.error(f"{self._fault} after {int(info.ticks)} ticks")
            return Err(self._fault)
        return Ok(info)

    def get_screen(self) -> np.ndarray:
        """Snapshot of the framebuffer as a ``(height, width)`` boolean array."""
        return np.array(self.state.display, dtype=np.bool_).T

    def is_screen_changed(self) -> bool:
        """Whether the most recent tick flipped any pixel."""
        return bool(self.state.screen_changed)

    @property
    def keys(self) -> np.ndarray:
        """Current keypad snapshot, indexed by logical key 0x0-0xF."""
        return np.array(self.state.keypad, dtype=np.bool_)

    @keys.setter
    def keys(self, pressed: Sequence[bool]):
        pressed = np.asarray(pressed, dtype=np.bool_)
        if pressed.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got shape {pressed.shape}")
        self.state = self.state.replace(keypad=jnp.asarray(pressed))
