"""Here-documents: reading their bodies into temporary files and removing them."""

from __future__ import annotations

import os
from typing import Callable, Iterable, Iterator, Optional, Sequence

from .command import Command, HereDoc
from .environment import Environment

PROMPT = "> "


def _is_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def _append_opener(path: str, flags: int) -> int:
    return os.open(path, os.O_CREAT | os.O_WRONLY | os.O_APPEND, 0o600)


def expand_heredoc_line(line: str, env: Environment, exit_status: int) -> str:
    """Replace every $NAME and $? in a here-document line with its value."""
    parts: list[str] = []
    i = 0
    n = len(line)
    while i < n:
        if line[i] == "$":
            j = i + 1
            if line[j : j + 1] == "?":
                j += 1
            else:
                while j < n and _is_alnum(line[j]):
                    j += 1
            value = env.expand(line[i:j], exit_status)
            if value:
                parts.append(value)
            i = j
        else:
            j = line.find("$", i)
            if j == -1:
                j = n
            parts.append(line[i:j])
            i = j
    return "".join(parts)


def write_heredoc_line(
    heredoc: HereDoc, line: str, env: Environment, exit_status: int
) -> None:
    """Append one line, expanded if the here-document asks for it, to its file."""
    text = expand_heredoc_line(line, env, exit_status) if heredoc.expand else line
    with open(heredoc.path(), "a", encoding="utf-8", opener=_append_opener) as handle:
        handle.write(text)
        handle.write("\n")


def collect_heredoc(
    heredoc: HereDoc,
    lines: Iterable[Optional[str]],
    env: Environment,
    exit_status: int,
) -> int:
    """Write lines to the here-document until its delimiter or the end; return how many."""
    count = 0
    for line in lines:
        if line is None:
            break
        if heredoc.delimiter is not None and line == heredoc.delimiter:
            break
        write_heredoc_line(heredoc, line, env, exit_status)
        count += 1
    return count


def _all_heredocs(commands: Iterable[Command]) -> Iterator[HereDoc]:
    for command in commands:
        yield from command.heredocs


def create_heredoc_files(commands: Iterable[Command]) -> None:
    """Create, empty if new, the file of every here-document."""
    for heredoc in _all_heredocs(commands):
        fd = _append_opener(heredoc.path(), 0)
        os.close(fd)


def delete_heredoc_files(commands: Iterable[Command]) -> bool:
    """Remove every here-document file; return False if any could not be removed."""
    removed_all = True
    for heredoc in _all_heredocs(commands):
        try:
            os.unlink(heredoc.path())
        except OSError:
            removed_all = False
    return removed_all


def _prompted_lines(read_line: Callable[[str], Optional[str]]) -> Iterator[str]:
    while True:
        try:
            line = read_line(PROMPT)
        except EOFError:
            return
        if line is None:
            return
        if line.endswith("\n"):
            line = line[:-1]
        yield line


def read_heredocs(
    commands: Sequence[Command],
    env: Environment,
    exit_status: int,
    read_line: Callable[[str], Optional[str]],
) -> bool:
    """Read the body of every here-document; return True if reading was interrupted."""
    create_heredoc_files(commands)
    for heredoc in _all_heredocs(commands):
        try:
            collect_heredoc(heredoc, _prompted_lines(read_line), env, exit_status)
        except KeyboardInterrupt:
            return True
    return False