"""Finding a command on PATH and checking that it can be run."""

from __future__ import annotations

import os
from typing import Optional, Sequence

from .environment import getenv

_NOT_FOUND = "minishell: command not found"


class CommandError(Exception):
    """A command cannot be run; status is the exit status it gives."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def is_directory(path: str) -> bool:
    """Return True if path names an existing directory."""
    return os.path.isdir(path)


def resolve_command(name: Optional[str], env_list: Sequence[str]) -> Optional[str]:
    """Return the path to run for name, searching PATH or else the working directory."""
    if name is not None and name == "":
        raise CommandError(_NOT_FOUND, 127)
    if name is None:
        return None
    if name.startswith("."):
        return name
    search = getenv("PATH", env_list)
    if search is None:
        try:
            search = os.getcwd()
        except OSError as exc:
            raise CommandError("No such file or directory", 1) from exc
    for directory in (part for part in search.split(":") if part):
        candidate = name if name.startswith("/") else f"{directory}/{name}"
        if os.access(candidate, os.F_OK) or os.access(candidate, os.X_OK):
            return candidate
    return name


def check_executable(path: Optional[str], env_list: Sequence[str]) -> None:
    """Raise CommandError if path cannot be executed as a command."""
    if not path:
        raise CommandError("", 0)
    if path.startswith("./") or path.startswith("/"):
        if not os.access(path, os.F_OK):
            raise CommandError("minishell: No such file or directory", 127)
        if not os.access(path, os.X_OK):
            raise CommandError("minishell: Permission denied", 126)
        if is_directory(path):
            raise CommandError("minishell: is a directory", 126)
    if path.endswith("/"):
        if is_directory(path):
            raise CommandError("minishell: is a directory", 126)
        raise CommandError("minishell: Not a directory", 126)
    if not os.access(path, os.F_OK):
        if getenv("PATH", env_list) is None:
            raise CommandError("minishell : No such file or directory", 127)
        if not os.access(path, os.X_OK):
            raise CommandError("minishell : command not found", 127)
    elif is_directory(path):
        raise CommandError(_NOT_FOUND, 127)