"""Opening the files that a command's redirections name."""

from __future__ import annotations

import os
from typing import BinaryIO, Optional

from .command import Command, RedirType

_NO_FILE = "minishell: No such file or directory"
_AMBIGUOUS = "minishell: ambiguous redirect"

_FLAGS = {
    RedirType.REDIR_IN: os.O_RDONLY,
    RedirType.REDIR_OUT: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    RedirType.DREDIR_OUT: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
}
_MODES = {
    RedirType.REDIR_IN: "rb",
    RedirType.REDIR_OUT: "wb",
    RedirType.DREDIR_OUT: "ab",
}


class RedirectionError(Exception):
    """A redirection could not be set up; status is the exit status it gives."""

    def __init__(self, message: str, status: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def _open(target: str, kind: RedirType) -> BinaryIO:
    try:
        fd = os.open(target, _FLAGS[kind], 0o644)
    except OSError as exc:
        raise RedirectionError(_NO_FILE) from exc
    return os.fdopen(fd, _MODES[kind])


def open_redirections(
    command: Command,
) -> tuple[Optional[BinaryIO], Optional[BinaryIO]]:
    """Open the redirections in order; return the resulting (stdin, stdout) files."""
    stdin: Optional[BinaryIO] = None
    stdout: Optional[BinaryIO] = None
    try:
        for redirect in command.redirects:
            if redirect.type not in _FLAGS:
                continue
            if redirect.ambiguous:
                raise RedirectionError(_AMBIGUOUS)
            if not redirect.target:
                raise RedirectionError(_NO_FILE)
            handle = _open(redirect.target, redirect.type)
            if redirect.type is RedirType.REDIR_IN:
                if stdin is not None:
                    stdin.close()
                stdin = handle
            else:
                if stdout is not None:
                    stdout.close()
                stdout = handle
    except BaseException:
        for handle in (stdin, stdout):
            if handle is not None:
                handle.close()
        raise
    return stdin, stdout


def check_redirect_files(command: Optional[Command]) -> bool:
    """Return True if every <, > and >> target can be opened, creating output files."""
    if command is None:
        return True
    for redirect in command.redirects:
        if redirect.type not in _FLAGS:
            continue
        if redirect.target is None:
            return False
        try:
            fd = os.open(redirect.target, _FLAGS[redirect.type], 0o644)
        except OSError:
            return False
        os.close(fd)
    return True


def last_heredoc_file(command: Command) -> Optional[BinaryIO]:
    """Open the file of the command's last here-document for reading, if it has one."""
    if not command.heredocs:
        return None
    try:
        return open(command.heredocs[-1].path(), "rb")
    except OSError as exc:
        raise RedirectionError(_NO_FILE) from exc