"""Shell environment: an ordered table of variables, some exported without a value."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class Environment:
    """Ordered mapping of variable names to values.

    A value of ``None`` marks a name that was exported without an
    assignment: it is listed by ``export`` but not by ``env``.
    """

    def __init__(self) -> None:
        self._vars: dict[str, str | None] = {}

    @classmethod
    def from_envp(cls, envp: Iterable[str]) -> "Environment":
        """Build an environment from ``NAME=VALUE`` strings.

        Strings without ``=`` are ignored. When a name repeats, the first
        occurrence wins, as a lookup would find it first.
        """
        env = cls()
        for entry in envp:
            name, sep, value = entry.partition("=")
            if not sep:
                continue
            env._vars.setdefault(name, value)
        return env

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or ``None`` if unset or valueless."""
        if not name:
            return None
        return self._vars.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def add(self, name: str, value: str | None) -> None:
        """Set ``name`` to ``value``; a new name goes at the end."""
        self._vars[name] = value

    def add_or_replace(self, assignment: str) -> None:
        """Apply ``NAME=VALUE`` (or a bare ``NAME``, which clears the value)."""
        name, sep, value = assignment.partition("=")
        self._vars[name] = value if sep else None

    def add_export_only(self, name: str) -> None:
        """Mark ``name`` as exported without touching an existing value."""
        self._vars.setdefault(name, None)

    def remove(self, name: str) -> bool:
        """Remove ``name``; return whether it was present."""
        return self._vars.pop(name, _MISSING) is not _MISSING

    def entries(self) -> list[str]:
        """All variables as ``NAME=VALUE``, or ``NAME`` when valueless, in order."""
        return [
            name if value is None else f"{name}={value}"
            for name, value in self._vars.items()
        ]

    def sorted_entries(self) -> list[str]:
        """The entries sorted as strings, as ``export`` lists them."""
        return sorted(self.entries())

    def to_envp(self) -> list[str]:
        """``NAME=VALUE`` strings for variables that have a value."""
        return [
            f"{name}={value}"
            for name, value in self._vars.items()
            if value is not None
        ]


_MISSING = object()