import os

import pytest

from minishell.pathsearch import (
    CommandError,
    check_executable,
    is_directory,
    resolve_command,
)


@pytest.fixture
def bin_dir(tmp_path):
    directory = tmp_path / "bin"
    directory.mkdir()
    program = directory / "prog"
    program.write_text("#!/bin/sh\n")
    program.chmod(0o755)
    return directory


def test_is_directory(tmp_path):
    file_path = tmp_path / "f"
    file_path.write_text("x")
    assert is_directory(str(tmp_path)) is True
    assert is_directory(str(file_path)) is False
    assert is_directory(str(tmp_path / "missing")) is False


def test_resolve_finds_program_on_path(bin_dir, tmp_path):
    env_list = [f"PATH={tmp_path / 'empty'}:{bin_dir}"]
    assert resolve_command("prog", env_list) == f"{bin_dir}/prog"


def test_resolve_returns_name_when_missing(bin_dir):
    assert resolve_command("nothere", [f"PATH={bin_dir}"]) == "nothere"


def test_resolve_empty_name_raises():
    with pytest.raises(CommandError) as info:
        resolve_command("", ["PATH=/usr/bin"])
    assert info.value.status == 127
    assert info.value.message == "minishell: command not found"


def test_resolve_none_gives_none():
    assert resolve_command(None, ["PATH=/usr/bin"]) is None


def test_resolve_dot_path_kept():
    assert resolve_command("./run", []) == "./run"


def test_resolve_absolute_path(bin_dir):
    absolute = str(bin_dir / "prog")
    assert resolve_command(absolute, [f"PATH={bin_dir}"]) == absolute


def test_resolve_without_path_uses_cwd(bin_dir, monkeypatch):
    monkeypatch.chdir(bin_dir)
    assert resolve_command("prog", ["HOME=/nowhere"]) == f"{os.getcwd()}/prog"


def test_check_executable_accepts_program(bin_dir):
    assert check_executable(str(bin_dir / "prog"), [f"PATH={bin_dir}"]) is None


def test_check_missing_absolute(tmp_path):
    with pytest.raises(CommandError) as info:
        check_executable(str(tmp_path / "missing"), [])
    assert info.value.status == 127
    assert info.value.message == "minishell: No such file or directory"


def test_check_not_executable(tmp_path):
    plain = tmp_path / "plain"
    plain.write_text("x")
    plain.chmod(0o644)
    with pytest.raises(CommandError) as info:
        check_executable(str(plain), [])
    assert info.value.status == 126
    assert info.value.message == "minishell: Permission denied"


def test_check_absolute_directory(tmp_path):
    with pytest.raises(CommandError) as info:
        check_executable(str(tmp_path), [])
    assert info.value.status == 126
    assert info.value.message == "minishell: is a directory"


def test_check_relative_directory_with_slash(tmp_path, monkeypatch):
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path)
    with pytest.raises(CommandError) as info:
        check_executable("sub/", [])
    assert info.value.status == 126
    assert info.value.message == "minishell: is a directory"


def test_check_file_with_slash(tmp_path, monkeypatch):
    (tmp_path / "file").write_text("x")
    monkeypatch.chdir(tmp_path)
    with pytest.raises(CommandError) as info:
        check_executable("file/", [])
    assert info.value.status == 126
    assert info.value.message == "minishell: Not a directory"


def test_check_relative_missing_without_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(CommandError) as info:
        check_executable("ghost", ["HOME=/nowhere"])
    assert info.value.status == 127


def test_check_relative_missing_with_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(CommandError) as info:
        check_executable("ghost", ["PATH=/usr/bin"])
    assert info.value.status == 127


def test_check_relative_existing_directory(tmp_path, monkeypatch):
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path)
    with pytest.raises(CommandError) as info:
        check_executable("sub", ["PATH=/usr/bin"])
    assert info.value.status == 127
    assert info.value.message == "minishell: command not found"


def test_check_empty_path_exits_quietly():
    with pytest.raises(CommandError) as info:
        check_executable(None, [])
    assert info.value.status == 0