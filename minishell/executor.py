"""Running parsed commands: built-ins inside the shell, programs as child processes."""

from __future__ import annotations

import contextlib
import io
import os
import subprocess
import tempfile
from typing import IO, Callable, Iterable, Optional, Sequence, TextIO, Union

from .builtins import ShellExit, is_builtin, run_builtin, runs_in_parent
from .command import Command, has_file_redirect, has_heredoc, has_pipe
from .environment import Environment
from .heredoc import delete_heredoc_files, read_heredocs
from .pathsearch import CommandError, check_executable, resolve_command
from .redirections import (
    RedirectionError,
    check_redirect_files,
    last_heredoc_file,
    open_redirections,
)

_NOT_FOUND = "minishell: command not found"
_UNLINK_FAILED = "No such file or directory"

_Target = Union[int, IO[bytes], None]
_Pending = Union["subprocess.Popen[bytes]", int]


def _fileno(stream: TextIO) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _sink(stream: TextIO) -> tuple[_Target, Optional[IO[bytes]]]:
    """Return where a child should write so its output ends up in stream."""
    fd = _fileno(stream)
    if fd is not None:
        stream.flush()
        return fd, None
    spool = tempfile.TemporaryFile()
    return spool, spool


def _drain(spool: Optional[IO[bytes]], stream: TextIO) -> None:
    if spool is None:
        return
    spool.seek(0)
    data = spool.read()
    spool.close()
    if data:
        stream.write(data.decode("utf-8", errors="replace"))


def _close(*handles: Optional[IO[bytes]]) -> None:
    for handle in handles:
        if handle is not None:
            handle.close()


def _empty() -> IO[bytes]:
    return tempfile.TemporaryFile()


def _spool_text(text: str) -> IO[bytes]:
    spool = tempfile.TemporaryFile()
    spool.write(text.encode("utf-8"))
    spool.seek(0)
    return spool


def _exit_code(returncode: int) -> int:
    return 128 - returncode if returncode < 0 else returncode


def _wait(item: _Pending) -> int:
    if isinstance(item, int):
        return item
    while True:
        try:
            return _exit_code(item.wait())
        except KeyboardInterrupt:
            # The interrupt also reaches the child; keep waiting for it to finish.
            continue


def _getcwd() -> Optional[str]:
    try:
        return os.getcwd()
    except OSError:
        return None


def _run_builtin_detached(
    env: Environment, args: Sequence[str], status: int, out: TextIO, err: TextIO
) -> int:
    """Run a built-in as a child would: its changes never reach the shell."""
    scratch = Environment(env.items())
    cwd = _getcwd()
    try:
        return run_builtin(scratch, args, status, out, err)
    except ShellExit as exc:
        return exc.code
    finally:
        if cwd is not None:
            with contextlib.suppress(OSError):
                os.chdir(cwd)


class _Session:
    """Streams and environment shared by the processes of one command line."""

    def __init__(self, env: Environment, status: int, out: TextIO, err: TextIO) -> None:
        self.env = env
        self.status = status
        self.out = out
        self.err = err
        self.env_list = env.to_list()
        self.env_vars = {name: value if value is not None else "" for name, value in env.items()}
        self.out_target, self._out_spool = _sink(out)
        self.err_target, self._err_spool = _sink(err)

    def __enter__(self) -> "_Session":
        return self

    def __exit__(self, *exc_info: object) -> None:
        _drain(self._out_spool, self.out)
        _drain(self._err_spool, self.err)

    def fail(self, exc: Union[RedirectionError, CommandError]) -> int:
        if exc.message:
            self.err.write(f"{exc.message}\n")
        return exc.status

    def builtin(self, args: Sequence[str], out: TextIO) -> int:
        return _run_builtin_detached(self.env, args, self.status, out, self.err)

    def builtin_into(self, args: Sequence[str], handle: IO[bytes]) -> int:
        wrapper = io.TextIOWrapper(handle, encoding="utf-8", write_through=True)
        try:
            return self.builtin(args, wrapper)
        finally:
            wrapper.detach()

    def spawn(
        self, args: Sequence[str], stdin: Optional[IO[bytes]], stdout: _Target
    ) -> "subprocess.Popen[bytes]":
        name = args[0]
        path = name if name.startswith("/") else resolve_command(name, self.env_list)
        if path is None:
            raise CommandError(_NOT_FOUND, 127)
        check_executable(path, self.env_list)
        try:
            return subprocess.Popen(
                list(args),
                executable=path,
                stdin=stdin,
                stdout=stdout,
                stderr=self.err_target,
                env=self.env_vars,
            )
        except OSError as exc:
            raise CommandError(_NOT_FOUND, 127) from exc


def split_pipeline(commands: Iterable[Command]) -> list[Command]:
    """Return the commands of a pipeline without the pipe markers between them."""
    return [command for command in commands if not command.is_pipe]


def run_simple(
    env: Environment, command: Command, status: int, out: TextIO, err: TextIO
) -> int:
    """Run one command as the shell's child would and return its exit status."""
    with _Session(env, status, out, err) as session:
        try:
            stdin, stdout = open_redirections(command)
        except RedirectionError as exc:
            return session.fail(exc)
        try:
            if stdin is None and command.heredocs:
                stdin = last_heredoc_file(command)
            if is_builtin(command):
                if stdout is None:
                    return session.builtin(command.args, out)
                return session.builtin_into(command.args, stdout)
            if not command.args:
                return status
            target = stdout if stdout is not None else session.out_target
            return _wait(session.spawn(command.args, stdin, target))
        except (RedirectionError, CommandError) as exc:
            return session.fail(exc)
        finally:
            _close(stdin, stdout)


def _builtin_stage(
    session: _Session, stage: Command, stdout: Optional[IO[bytes]], last: bool
) -> tuple[_Pending, Optional[IO[bytes]]]:
    if stdout is not None:
        return session.builtin_into(stage.args, stdout), _empty()
    if last:
        return session.builtin(stage.args, session.out), None
    buffer = io.StringIO()
    code = session.builtin(stage.args, buffer)
    return code, _spool_text(buffer.getvalue())


def _run_stage(
    session: _Session, stage: Command, feed: Optional[IO[bytes]], last: bool
) -> tuple[_Pending, Optional[IO[bytes]]]:
    """Start one stage; return it and the file the next stage reads from."""
    stdin: Optional[IO[bytes]] = None
    stdout: Optional[IO[bytes]] = None
    try:
        stdin, stdout = open_redirections(stage)
        if stage.heredocs:
            _close(stdin)
            stdin = None
            stdin = last_heredoc_file(stage)
        if is_builtin(stage):
            return _builtin_stage(session, stage, stdout, last)
        if not stage.args:
            return 0, _empty()
        target: _Target
        if stdout is not None:
            target = stdout
        elif last:
            target = session.out_target
        else:
            target = subprocess.PIPE
        source = stdin if stdin is not None else feed
        proc = session.spawn(stage.args, source, target)
        if target == subprocess.PIPE and not last and stdout is None:
            return proc, proc.stdout
        return proc, _empty()
    except (RedirectionError, CommandError) as exc:
        return session.fail(exc), _empty()
    finally:
        _close(stdin, stdout, feed)


def run_pipeline(
    env: Environment, commands: Sequence[Command], status: int, out: TextIO, err: TextIO
) -> int:
    """Run the commands joined by pipes; the status is that of the last one."""
    stages = split_pipeline(commands)
    if not stages:
        return status
    with _Session(env, status, out, err) as session:
        pending: list[_Pending] = []
        feed: Optional[IO[bytes]] = None
        try:
            for index, stage in enumerate(stages):
                result, feed = _run_stage(session, stage, feed, index == len(stages) - 1)
                pending.append(result)
        finally:
            _close(feed)
            codes = [_wait(item) for item in pending]
        return codes[-1]


def _remove_heredocs(commands: Sequence[Command], status: int, err: TextIO) -> int:
    if delete_heredoc_files(commands):
        return status
    err.write(f"{_UNLINK_FAILED}\n")
    return 1


def _run_in_parent(env: Environment, command: Command, status: int, out: TextIO, err: TextIO) -> int:
    try:
        stdin, stdout = open_redirections(command)
    except RedirectionError as exc:
        err.write(f"{exc.message}\n")
        return exc.status
    _close(stdin)
    if stdout is None:
        return run_builtin(env, command.args, status, out, err)
    with io.TextIOWrapper(stdout, encoding="utf-8") as target:
        return run_builtin(env, command.args, status, target, err)


def execute(
    env: Environment,
    commands: Sequence[Command],
    status: int,
    read_line: Callable[[str], Optional[str]],
    out: TextIO,
    err: TextIO,
) -> int:
    """Run a parsed command line and return the new exit status.

    Built-ins that change the shell run in it; ShellExit from exit propagates.
    """
    commands = list(commands)
    if not commands:
        return status
    first = commands[0]
    piped = has_pipe(commands)
    heredoc = has_heredoc(commands)
    simple_builtin = is_builtin(first) and not piped and not has_file_redirect(first)
    if heredoc:
        if read_heredocs(commands, env, status, read_line):
            _remove_heredocs(commands, status, err)
            return 1
        if simple_builtin:
            status = run_builtin(env, first.args, status, out, err)
            return _remove_heredocs(commands, status, err)
    elif simple_builtin:
        return run_builtin(env, first.args, status, out, err)
    if (
        is_builtin(first)
        and not piped
        and runs_in_parent(first)
        and check_redirect_files(first)
    ):
        status = _run_in_parent(env, first, status, out, err)
    elif piped:
        status = run_pipeline(env, commands, status, out, err)
    else:
        status = run_simple(env, first, status, out, err)
    if heredoc:
        status = _remove_heredocs(commands, status, err)
    return status