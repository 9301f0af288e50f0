"""Parsed commands with their redirections and here-documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

HEREDOC_PREFIX = "/tmp/herdoc"


class RedirType(Enum):
    """Kind of a redirection."""

    REDIR_IN = "<"
    REDIR_OUT = ">"
    DREDIR_OUT = ">>"
    HERE_DOC = "<<"


_FILE_REDIRECTS = frozenset({RedirType.REDIR_IN, RedirType.REDIR_OUT, RedirType.DREDIR_OUT})


@dataclass
class Redirect:
    """A file redirection; ambiguous marks a target that expanded badly."""

    target: Optional[str]
    type: RedirType
    ambiguous: bool = False


@dataclass
class HereDoc:
    """A here-document: its delimiter, its index and whether lines are expanded."""

    delimiter: Optional[str]
    index: int
    expand: bool = False

    def path(self) -> str:
        """Return the temporary file that holds the here-document's body."""
        return f"{HEREDOC_PREFIX}{self.delimiter or ''}{self.index}"


@dataclass
class Command:
    """One command of a pipeline, or a pipe marker when is_pipe is set."""

    args: list[str] = field(default_factory=list)
    is_pipe: bool = False
    redirects: list[Redirect] = field(default_factory=list)
    heredocs: list[HereDoc] = field(default_factory=list)

    def name(self) -> Optional[str]:
        """Return the first argument, or None when there is none."""
        return self.args[0] if self.args else None


def has_pipe(commands: Iterable[Command]) -> bool:
    """Return True if any entry is a pipe marker."""
    return any(command.is_pipe for command in commands)


def count_pipes(commands: Iterable[Command]) -> int:
    """Return the number of pipe markers."""
    return sum(1 for command in commands if command.is_pipe)


def count_heredocs(commands: Iterable[Command]) -> int:
    """Return the number of here-documents that have a delimiter."""
    return sum(
        1
        for command in commands
        for heredoc in command.heredocs
        if heredoc.delimiter is not None
    )


def has_heredoc(commands: Iterable[Command]) -> bool:
    """Return True if any command carries a here-document."""
    return count_heredocs(commands) != 0


def has_file_redirect(command: Optional[Command]) -> bool:
    """Return True if the command has a <, > or >> redirection."""
    if command is None:
        return False
    return any(redirect.type in _FILE_REDIRECTS for redirect in command.redirects)


def redirect_symbol(redirect: Optional[Redirect]) -> Optional[str]:
    """Return the operator text of a redirection, or None for no redirection."""
    if redirect is None:
        return None
    return redirect.type.value