import io
import os

import pytest

from minishell.builtins import (
    ShellExit,
    cd,
    echo,
    exit_builtin,
    export,
    is_builtin,
    is_number,
    is_valid_export,
    is_valid_identifier,
    print_env,
    print_export,
    pwd,
    run_builtin,
    runs_in_parent,
    split_assignment,
    unset,
)
from minishell.command import Command
from minishell.environment import Environment


def streams():
    return io.StringIO(), io.StringIO()


def test_echo_joins_arguments():
    out = io.StringIO()
    assert echo(["echo", "a", "b"], out) == 0
    assert out.getvalue() == "a b\n"


def test_echo_n_flags_suppress_newline():
    out = io.StringIO()
    echo(["echo", "-n", "-nnn", "x"], out)
    assert out.getvalue() == "x"


def test_echo_invalid_flag_is_printed():
    out = io.StringIO()
    echo(["echo", "-nx", "y"], out)
    assert out.getvalue() == "-nx y\n"


def test_echo_without_arguments_prints_newline():
    out = io.StringIO()
    echo(["echo"], out)
    assert out.getvalue() == "\n"


@pytest.mark.parametrize(
    "arg,expected",
    [("42", True), ("-7", True), ("+3", True), ("+", True), ("4a", False), ("--1", False)],
)
def test_is_number(arg, expected):
    assert is_number(arg) is expected


@pytest.mark.parametrize(
    "name,expected",
    [("PATH", True), ("_a1", True), ("1a", False), ("", False), ("a-b", False), ("a=b", False)],
)
def test_is_valid_identifier(name, expected):
    assert is_valid_identifier(name) is expected


@pytest.mark.parametrize(
    "arg,expected",
    [("A=b-c", True), ("NAME", True), ("=x", False), ("9x", False), ("", False), ("a.b=1", False)],
)
def test_is_valid_export(arg, expected):
    assert is_valid_export(arg) is expected


def test_split_assignment():
    assert split_assignment("A=b=c") == ("A", "b=c")
    assert split_assignment("A") == ("A", None)
    assert split_assignment("A=") == ("A", "")


def test_is_builtin_and_runs_in_parent():
    assert is_builtin(Command(args=["echo", "hi"]))
    assert not is_builtin(Command(args=["ls"]))
    assert not is_builtin(None)
    assert runs_in_parent(Command(args=["cd"]))
    assert runs_in_parent(Command(args=["export", "A=1"]))
    assert not runs_in_parent(Command(args=["export"]))
    assert not runs_in_parent(Command(args=["echo", "x"]))


def test_export_adds_and_updates():
    env = Environment([("A", "1")])
    out, err = streams()
    assert export(env, ["export", "B=2", "A=3", "C"], out, err) == 0
    assert env.get("A") == "3"
    assert env.get("B") == "2"
    assert "C" in env and env.get("C") is None
    assert list(env) == ["A", "B", "C"]


def test_export_without_value_keeps_existing():
    env = Environment([("A", "1")])
    out, err = streams()
    export(env, ["export", "A"], out, err)
    assert env.get("A") == "1"


def test_export_invalid_reports_error():
    env = Environment([("A", "1")])
    out, err = streams()
    assert export(env, ["export", "1X=2", "B=3"], out, err) == 1
    assert "not a valid identifier" in err.getvalue()
    assert env.get("B") == "3"
    assert "1X" not in env


def test_export_lists_when_no_arguments():
    env = Environment([("A", "1"), ("B", None)])
    out, err = streams()
    export(env, ["export"], out, err)
    assert out.getvalue() == 'declare -x A="1"\ndeclare -x B\n'


def test_export_empty_env_no_arguments_prints_nothing():
    env = Environment()
    out, err = streams()
    assert export(env, ["export"], out, err) == 0
    assert out.getvalue() == ""


def test_export_empty_env_adds_variable():
    env = Environment()
    out, err = streams()
    assert export(env, ["export", "X=y"], out, err) == 0
    assert env.to_list() == ["X=y"]


def test_print_export_equal_sign_value():
    env = Environment([("E", "=")])
    out = io.StringIO()
    print_export(env, out)
    assert out.getvalue() == 'declare -x E=""\n'


def test_print_env_skips_valueless():
    env = Environment([("A", "1"), ("B", None), ("C", "")])
    out = io.StringIO()
    print_env(env, out)
    assert out.getvalue() == "A=1\nC=\n"


def test_unset_removes_variable():
    env = Environment([("A", "1"), ("B", "2"), ("C", "3")])
    _, err = streams()
    assert unset(env, ["unset", "B"], err) == 0
    assert list(env) == ["A", "C"]


def test_unset_invalid_name_sets_status():
    env = Environment([("A", "1"), ("B", "2")])
    _, err = streams()
    assert unset(env, ["unset", "9z", "B"], err) == 1
    assert "not a valid identifier" in err.getvalue()
    assert list(env) == ["A"]


def test_unset_prefix_of_first_name_removes_first():
    env = Environment([("PATH", "/bin"), ("HOME", "/h")])
    _, err = streams()
    unset(env, ["unset", "PATHX"], err)
    assert "PATH" not in env
    assert env.get("HOME") == "/h"


def test_exit_without_arguments_uses_status():
    _, err = streams()
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit"], 7, err)
    assert info.value.code == 7


def test_exit_with_number():
    _, err = streams()
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "42"], 0, err)
    assert info.value.code == 42


def test_exit_negative_wraps():
    _, err = streams()
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "-1"], 0, err)
    assert info.value.code == 255


def test_exit_non_numeric():
    _, err = streams()
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "abc"], 0, err)
    assert info.value.code == 255
    assert "abc: numeric argument required" in err.getvalue()


def test_exit_too_many_arguments_returns():
    _, err = streams()
    assert exit_builtin(["exit", "1", "2"], 0, err) == 1
    assert "too many arguments" in err.getvalue()


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out, err = streams()
    assert pwd(["pwd"], out, err) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_pwd_invalid_option(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out, err = streams()
    assert pwd(["pwd", "-L"], out, err) == 1
    assert out.getvalue() == ""
    assert "invalid option" in err.getvalue()


def test_cd_updates_pwd_and_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sub = tmp_path / "sub"
    sub.mkdir()
    start = os.getcwd()
    env = Environment([("PWD", start), ("OLDPWD", None)])
    out, err = streams()
    assert cd(env, ["cd", str(sub)], out, err) == 0
    assert os.path.realpath(os.getcwd()) == os.path.realpath(sub)
    assert env.get("PWD") == os.getcwd()
    assert env.get("OLDPWD") == start


def test_cd_dash_goes_to_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    other = tmp_path / "other"
    other.mkdir()
    env = Environment([("OLDPWD", str(other))])
    out, err = streams()
    assert cd(env, ["cd", "-"], out, err) == 0
    assert out.getvalue() == str(other) + "\n"
    assert os.path.realpath(os.getcwd()) == os.path.realpath(other)


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    before = os.getcwd()
    env = Environment([("PWD", before)])
    out, err = streams()
    assert cd(env, ["cd", str(tmp_path / "missing")], out, err) == 1
    assert "No such file or directory" in err.getvalue()
    assert os.getcwd() == before


def test_cd_home_not_set(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment([("A", "1")])
    out, err = streams()
    assert cd(env, ["cd"], out, err) == 1
    assert "HOME not set" in err.getvalue()


def test_cd_tilde_slash_joins_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "inner").mkdir()
    env = Environment([("HOME", str(tmp_path))])
    out, err = streams()
    assert cd(env, ["cd", "~/inner"], out, err) == 0
    assert os.path.realpath(os.getcwd()) == os.path.realpath(tmp_path / "inner")


def test_run_builtin_dispatches_echo_and_env():
    env = Environment([("A", "1")])
    out, err = streams()
    assert run_builtin(env, ["echo", "hi"], 5, out, err) == 0
    assert out.getvalue() == "hi\n"
    out2 = io.StringIO()
    assert run_builtin(env, ["env"], 5, out2, err) == 5
    assert out2.getvalue() == "A=1\n"


def test_run_builtin_export_then_unset():
    env = Environment([("A", "1")])
    out, err = streams()
    run_builtin(env, ["export", "B=2"], 0, out, err)
    assert env.get("B") == "2"
    run_builtin(env, ["unset", "B"], 0, out, err)
    assert "B" not in env


def test_run_builtin_exit_raises():
    env = Environment()
    out, err = streams()
    with pytest.raises(ShellExit) as info:
        run_builtin(env, ["exit"], 3, out, err)
    assert info.value.code == 3