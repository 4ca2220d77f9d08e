"""Shell environment: an ordered set of variables with shell-style semantics."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def valid_identifier(key: str | None) -> bool:
    """Return True if *key* is a valid shell variable name."""
    if not key:
        return False
    first, rest = key[0], key[1:]
    if not (_is_ascii_alpha(first) or first == "_"):
        return False
    return all(_is_ascii_alnum(char) or char == "_" for char in rest)


class Environment:
    """Ordered environment variables.

    Entries loaded from the process environment keep their order; variables
    created later are placed in front, and updates keep a variable's place.
    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._order: list[str] = []

    @classmethod
    def from_envp(cls, entries: Iterable[str]) -> Environment:
        """Build an environment from ``KEY=VALUE`` strings.

        Entries without ``=`` are ignored. When a key repeats, the first
        occurrence wins.
        """
        env = cls()
        for entry in entries:
            key, sep, value = entry.partition("=")
            if not sep or key in env._values:
                continue
            env._values[key] = value
            env._order.append(key)
        return env

    def get(self, key: str) -> str | None:
        """Return the value of *key*, or None if it is not set."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Set *key* to *value*, adding it at the front if it is new."""
        if key not in self._values:
            self._order.insert(0, key)
        self._values[key] = value

    def unset(self, key: str) -> None:
        """Remove *key*; unknown keys are ignored."""
        if key in self._values:
            del self._values[key]
            self._order.remove(key)

    def to_list(self) -> list[str]:
        """Return the variables as ``KEY=VALUE`` strings in order."""
        return [f"{key}={value}" for key, value in self.items()]

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` pairs in order."""
        for key in list(self._order):
            yield key, self._values[key]

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, key: object) -> bool:
        return key in self._values