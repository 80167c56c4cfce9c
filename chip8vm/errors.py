"""Error kinds and the result type returned at the engine boundary."""

from dataclasses import dataclass
from typing import Any, Union


class Chip8Error(Exception):
    """Base class for interpreter errors."""


class ImageTooLarge(Chip8Error):
    """Program image does not fit in the memory reserved for programs."""

    def __init__(self, image_size: int, capacity: int):
        self.image_size = image_size
        self.capacity = capacity
        super().__init__(
            f"ROM is larger than program memory ({image_size} bytes > {capacity} bytes)"
        )

    def __eq__(self, other):
        return (
            isinstance(other, ImageTooLarge)
            and (self.image_size, self.capacity) == (other.image_size, other.capacity)
        )

    def __hash__(self):
        return hash((ImageTooLarge, self.image_size, self.capacity))


class InvalidOpcode(Chip8Error):
    """Fetched instruction word has no handler."""

    def __init__(self, word: int):
        self.word = word
        super().__init__(f"Invalid opcode 0x{word:04X}")

    def __eq__(self, other):
        return isinstance(other, InvalidOpcode) and self.word == other.word

    def __hash__(self):
        return hash((InvalidOpcode, self.word))


@dataclass(frozen=True)
class Ok:
    """Successful result."""
    value: Any = None

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed result carrying a :class:`Chip8Error`."""
    error: Chip8Error

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Ok, Err]
