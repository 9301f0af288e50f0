"""The shell's built-in commands: echo, cd, pwd, export, unset, env and exit."""

from __future__ import annotations

import os
from typing import Optional, Sequence, TextIO

from .command import Command
from .environment import Environment, getenv

BUILTINS = frozenset({"exit", "cd", "pwd", "export", "unset", "env", "echo"})

_DIGITS = "0123456789"
_IDENT_EXTRA = "_"


class ShellExit(Exception):
    """Raised by the exit built-in; code is the status the shell exits with."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def is_builtin(command: Optional[Command]) -> bool:
    """Return True if the command names a built-in."""
    if command is None:
        return False
    return command.name() in BUILTINS


def runs_in_parent(command: Command) -> bool:
    """Return True for built-ins that change the shell itself and so run in it."""
    name = command.name()
    has_arg = len(command.args) > 1
    if name in ("export", "unset"):
        return has_arg
    return name in ("cd", "exit")


def is_number(arg: str) -> bool:
    """Return True if arg is an optional sign followed only by digits."""
    body = arg[1:] if arg[:1] in ("+", "-") else arg
    return all(ch in _DIGITS for ch in body)


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in _IDENT_EXTRA)


def is_valid_identifier(name: Optional[str]) -> bool:
    """Return True if name may be unset: letters, digits and '_', not starting with a digit."""
    if name is None:
        return True
    if not name or name[0] in _DIGITS:
        return False
    return all(_is_ident_char(ch) for ch in name)


def is_valid_export(arg: str) -> bool:
    """Return True if the part of arg before '=' is a valid, non-empty name."""
    if not arg or arg[0] == "=" or arg[0] in _DIGITS:
        return False
    name = arg.split("=", 1)[0]
    return all(_is_ident_char(ch) for ch in name)


def split_assignment(arg: str) -> tuple[str, Optional[str]]:
    """Split NAME=value at the first '='; without '=' the value is None."""
    name, sep, value = arg.partition("=")
    return (name, value) if sep else (arg, None)


def _identifier_error(err: TextIO, prefix: str) -> None:
    err.write(f"{prefix} not a valid identifier\n")


def echo(args: Sequence[str], out: TextIO) -> int:
    """Print the arguments; leading -n, -nn... options suppress the newline."""
    k = 1
    no_newline = False
    while k < len(args):
        arg = args[k]
        if len(arg) > 1 and arg[0] == "-" and set(arg[1:]) == {"n"}:
            no_newline = True
            k += 1
        else:
            break
    out.write(" ".join(args[k:]))
    if not no_newline:
        out.write("\n")
    return 0


def pwd(args: Sequence[str], out: TextIO, err: TextIO) -> int:
    """Print the working directory."""
    try:
        path = os.getcwd()
    except OSError as exc:
        err.write(f"{os.strerror(exc.errno or 0)}\n")
        return 1
    if len(args) > 1 and len(args[1]) > 1 and args[1][0] == "-":
        err.write("pwd: invalid option\n")
        return 1
    out.write(f"{path}\n")
    return 0


def print_env(env: Environment, out: TextIO) -> None:
    """Print NAME=value for every variable that has a value."""
    for name, value in env.items():
        if value is not None:
            out.write(f"{name}={value}\n")


def print_export(env: Environment, out: TextIO) -> None:
    """Print every variable in 'declare -x' form."""
    for name, value in env.items():
        if value is None:
            out.write(f"declare -x {name}\n")
        elif value == "=":
            out.write(f'declare -x {name}=""\n')
        else:
            out.write(f'declare -x {name}="{value}"\n')


def _atoi(arg: str) -> int:
    sign = -1 if arg[:1] == "-" else 1
    body = arg[1:] if arg[:1] in ("+", "-") else arg
    return sign * int(body) if body else 0


def exit_builtin(args: Sequence[str], status: int, err: TextIO) -> int:
    """Raise ShellExit with the right code, or return 1 on too many arguments."""
    if len(args) == 1:
        raise ShellExit(status)
    if len(args) == 2 and is_number(args[1]):
        raise ShellExit(_atoi(args[1]) & 0xFF)
    if len(args) > 1 and not is_number(args[1]):
        err.write(f"minishell: exit: {args[1]}: numeric argument required\n")
        raise ShellExit(255)
    if len(args) > 2:
        err.write("minishell: exit: too many arguments\n")
        return 1
    return status


def export(env: Environment, args: Sequence[str], out: TextIO, err: TextIO) -> int:
    """Set or declare variables; with no arguments list them."""
    status = 0
    if len(env) == 0:
        if len(args) < 2:
            return 0
        if args[1] == "" or not is_valid_export(args[1]):
            _identifier_error(err, "minishell:")
            return 1
    for arg in args[1:]:
        if not is_valid_export(arg):
            _identifier_error(err, "minishell:")
            status = 1
            continue
        name, value = split_assignment(arg)
        if name in env:
            if value is not None:
                env.set(name, value)
        else:
            env.set(name, value)
    if len(args) == 1 and args[0] == "export":
        print_export(env, out)
    return status


def unset(env: Environment, args: Sequence[str], err: TextIO) -> int:
    """Remove the named variables."""
    if len(env) == 0:
        return 0
    first_name = next(iter(env))
    status = 0
    for arg in args[1:]:
        if not is_valid_identifier(arg):
            _identifier_error(err, "minishell :")
            status = 1
            continue
        names = list(env)
        if args[1].startswith(first_name) and names and names[0] == first_name:
            env.unset(first_name)
        env.unset(arg)
    return status


def _chdir(path: Optional[str]) -> Optional[OSError]:
    if path is None:
        return FileNotFoundError(2, os.strerror(2))
    try:
        os.chdir(path)
    except OSError as exc:
        return exc
    return None


def _perror_cd(err: TextIO, exc: OSError) -> None:
    err.write(f"cd: {os.strerror(exc.errno) if exc.errno else exc}\n")


def _update_pwd_vars(env: Environment, env_list: Sequence[str]) -> None:
    if "OLDPWD" in env:
        env.set("OLDPWD", getenv("PWD", env_list))
    if "PWD" in env:
        try:
            env.set("PWD", os.getcwd())
        except OSError:
            env.set("PWD", None)


def cd(env: Environment, args: Sequence[str], out: TextIO, err: TextIO) -> int:
    """Change directory and update PWD and OLDPWD."""
    env_list = env.to_list()
    status = 0
    target = args[1] if len(args) > 1 else ""
    if target == "":
        home = getenv("HOME", env_list)
        if home is None:
            err.write("minishell: cd: HOME not set\n")
            status = 1
        else:
            exc = _chdir(home)
            if exc is not None:
                _perror_cd(err, exc)
                status = 1
    elif target[0] == "~":
        path = getenv("HOME", env_list)
        if target[1:2] == "/":
            path = (path or "") + target[target.index("/"):]
        if path is None:
            err.write("minishell: cd: HOME not set\n")
            status = 1
        else:
            exc = _chdir(path)
            if exc is not None:
                _perror_cd(err, exc)
                status = 1
    elif target == "--":
        if _chdir(getenv("HOME", env_list)) is not None:
            err.write("minishell: cd: HOME not set\n")
            status = 1
    elif target == "-":
        path = getenv("OLDPWD", env_list)
        if path is None:
            err.write("minishell: cd: OLDPWD not set\n")
            status = 1
        else:
            _chdir(path)
            out.write(f"{path}\n")
    elif _chdir(target) is not None:
        err.write("minishell: No such file or directory\n")
        status = 1
    _update_pwd_vars(env, env_list)
    return status


def run_builtin(
    env: Environment, args: Sequence[str], status: int, out: TextIO, err: TextIO
) -> int:
    """Run the built-in named by args[0] and return the new exit status."""
    if not args:
        return status
    name = args[0]
    if name == "exit":
        return exit_builtin(args, status, err)
    if name == "cd":
        return cd(env, args, out, err)
    if name == "pwd":
        return pwd(args, out, err)
    if name == "export":
        return export(env, args, out, err)
    if name == "unset":
        if len(env) == 0:
            return status
        return unset(env, args, err)
    if name == "env":
        print_env(env, out)
        return status
    if name == "echo":
        return echo(args, out)
    return status