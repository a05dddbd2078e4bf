"""Argument contracts shared by the lazy sequence functions.

Every public entry point checks its arguments here before it builds a
generator, so malformed calls fail at call time instead of on first pull.
"""

import inspect
import logging
from collections.abc import Iterable, Sized
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class InvalidArgument(Exception):
    """Raised when an argument does not have the capability its parameter requires."""

    def __init__(self, message: str, position: Optional[int] = None, function: Optional[str] = None):
        super().__init__(message)
        self.position = position
        self.function = function


@dataclass(frozen=True)
class Capability:
    """Named check an argument has to pass."""
    name: str
    description: str
    check: Callable[[Any], bool]

    def __call__(self, value: Any) -> bool:
        return bool(self.check(value))


def _is_integer(value: Any) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


traversable = Capability(
    name="traversable",
    description="iterable",
    check=lambda value: isinstance(value, Iterable),
)

sized = Capability(
    name="sized",
    description="an iterable with a known length",
    check=lambda value: isinstance(value, Iterable) and isinstance(value, Sized),
)

integer = Capability(
    name="integer",
    description="an integer",
    check=_is_integer,
)

positive_integer = Capability(
    name="positive_integer",
    description="a positive integer",
    check=lambda value: _is_integer(value) and value > 0,
)

non_negative_integer = Capability(
    name="non_negative_integer",
    description="a non-negative integer",
    check=lambda value: _is_integer(value) and value >= 0,
)

callable_ = Capability(
    name="callable",
    description="callable",
    check=callable,
)


def _caller_name() -> str:
    frame = inspect.currentframe()
    try:
        # _caller_name <- expects/expects_optional <- checked function
        return frame.f_back.f_back.f_code.co_name
    finally:
        del frame


def expects(capability: Capability, value: Any, position: int = 1, *, function: Optional[str] = None) -> None:
    """Raise InvalidArgument unless ``value`` has ``capability``.

    ``position`` is the 1-based index of the parameter in the checked
    function's signature. The function name defaults to the caller's.
    """
    if capability(value):
        return

    if function is None:
        function = _caller_name()
    message = (
        f"Argument {position} passed to {function}() must be "
        f"{capability.description}, {type(value).__name__} given"
    )
    logger.debug(f"Rejected argument: {message}")
    raise InvalidArgument(message, position=position, function=function)


def expects_optional(capability: Capability, value: Any, position: int = 1, *, function: Optional[str] = None) -> None:
    """Same as expects() but lets ``None`` through."""
    if value is None:
        return
    expects(capability, value, position, function=function or _caller_name())
