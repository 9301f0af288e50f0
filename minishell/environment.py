"""The shell's environment variables and variable expansion."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence


def _is_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


class Environment:
    """Ordered shell variables; a value of None means declared without a value."""

    def __init__(self, entries: Optional[Iterable[tuple[str, Optional[str]]]] = None) -> None:
        self._vars: dict[str, Optional[str]] = {}
        for name, value in entries or ():
            self._vars.setdefault(name, value)

    @classmethod
    def from_strings(cls, entries: Iterable[str]) -> "Environment":
        """Build from NAME=value strings; entries without '=' are ignored."""
        pairs = []
        for entry in entries:
            name, sep, value = entry.partition("=")
            if sep:
                pairs.append((name, value))
        return cls(pairs)

    def get(self, name: str) -> Optional[str]:
        """Return the value of name, or None if it is unset or has no value."""
        return self._vars.get(name)

    def set(self, name: str, value: Optional[str]) -> None:
        """Assign a value, keeping the position of an existing variable."""
        self._vars[name] = value

    def unset(self, name: str) -> None:
        """Remove name if present."""
        self._vars.pop(name, None)

    def to_list(self) -> list[str]:
        """Return NAME=value strings; a variable without a value gives NAME=."""
        return [f"{name}={value if value is not None else ''}" for name, value in self._vars.items()]

    def items(self) -> list[tuple[str, Optional[str]]]:
        return list(self._vars.items())

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __len__(self) -> int:
        return len(self._vars)

    def expand(self, arg: str, exit_status: int) -> Optional[str]:
        """Expand a $-reference; None means it expands to nothing."""
        result: Optional[str] = None
        if arg == '$""':
            return ""
        i = 0
        while i < len(arg):
            if arg[i] == "$":
                if arg[i + 1 : i + 2] == "?":
                    return str(exit_status)
                i += 1
                if i >= len(arg):
                    return "$"
                if arg[i] in "\"'":
                    return ""
                if not _is_alnum(arg[i]) or arg[i].isdigit():
                    return result
                result = self._vars.get(arg[i:])
            i += 1
        return result


def getenv(name: Optional[str], env_list: Sequence[str]) -> Optional[str]:
    """Return the value after '=' of the first entry starting with name."""
    if name is None or not env_list:
        return None
    for entry in env_list:
        if entry.startswith(name):
            _, sep, value = entry.partition("=")
            return value if sep else None
    return None