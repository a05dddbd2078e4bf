"""Dict with computed default values for missing keys."""

from dataclasses import dataclass
from typing import Any, Callable, Union

from args import InvalidArgument, callable_, expects


@dataclass(frozen=True)
class FixedValue:
    """Default that is the same object for every missing key."""
    value: Any

    def resolve(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Factory:
    """Default produced by calling ``function()`` once per missing key."""
    function: Callable[[], Any]

    def __post_init__(self):
        expects(callable_, self.function, 1, function="Factory")

    def resolve(self) -> Any:
        return self.function()


Default = Union[FixedValue, Factory]


class DefaultMap(dict):
    """
    Reading a missing key stores the resolved default under that key and
    returns it. Membership tests and get() don't create entries.
    """

    def __init__(self, default: Default, *args, **kwargs):
        if not isinstance(default, (FixedValue, Factory)):
            raise InvalidArgument(
                f"Argument 1 passed to DefaultMap() must be FixedValue or Factory, "
                f"{type(default).__name__} given",
                position=1,
                function="DefaultMap",
            )
        super().__init__(*args, **kwargs)
        self.default = default

    def __missing__(self, key):
        value = self.default.resolve()
        self[key] = value
        return value

    def copy(self):
        return DefaultMap(self.default, self)

    def __repr__(self):
        return f"{type(self).__name__}({self.default!r}, {dict.__repr__(self)})"


_UNSET = object()


def defaultmap(*, value=_UNSET, factory=_UNSET) -> DefaultMap:
    """Build a DefaultMap from exactly one of ``value=`` or ``factory=``."""
    if (value is _UNSET) == (factory is _UNSET):
        raise InvalidArgument("defaultmap() takes exactly one of value= or factory=", function="defaultmap")
    if factory is not _UNSET:
        return DefaultMap(Factory(factory))
    return DefaultMap(FixedValue(value))
