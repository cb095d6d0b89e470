import io
import os

import pytest

from minish.builtins import (
    DirectoryChanger,
    ShellExit,
    builtin_echo,
    builtin_env,
    builtin_exit,
    builtin_export,
    builtin_pwd,
    builtin_unset,
    is_builtin,
    is_numeric,
    is_valid_identifier,
    needs_child_process,
    run_builtin,
    valid_number,
)
from minish.environment import Environment


def _streams():
    return io.StringIO(), io.StringIO()


@pytest.mark.parametrize("name", ["cd", "echo", "pwd", "env", "export", "unset", "exit"])
def test_is_builtin_true(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "", "ECHO", "exit2"])
def test_is_builtin_false(name):
    assert is_builtin(name) is False


def test_needs_child_process():
    assert [needs_child_process(n) for n in ("echo", "pwd", "env")] == [True] * 3
    assert [needs_child_process(n) for n in ("cd", "export", "unset", "exit")] == [False] * 4


@pytest.mark.parametrize("text", ["0", "42", "-7", "+13", "-"])
def test_is_numeric_true(text):
    assert is_numeric(text) is True


@pytest.mark.parametrize("text", ["", None, "4a", "1.5", " 1", "--1"])
def test_is_numeric_false(text):
    assert is_numeric(text) is False


def test_valid_number_parses():
    assert valid_number("42") == 42
    assert valid_number("-42") == -42
    assert valid_number("+7") == 7
    assert valid_number("2147483647") == 2147483647
    assert valid_number("-2147483648") == -2147483648


@pytest.mark.parametrize("text", ["2147483648", "-2147483649", "", "-", "12x"])
def test_valid_number_rejects(text):
    with pytest.raises(ValueError):
        valid_number(text)


def test_is_valid_identifier_accepts():
    err = io.StringIO()
    assert is_valid_identifier("_A1=x y", err) is True
    assert err.getvalue() == ""


@pytest.mark.parametrize("name", ["1abc", "a-b", "=x", "a.b=c"])
def test_is_valid_identifier_rejects_and_reports(name):
    err = io.StringIO()
    assert is_valid_identifier(name, err) is False
    assert "not a valid identifier" in err.getvalue()
    assert name in err.getvalue()


def test_is_valid_identifier_empty_is_silent():
    err = io.StringIO()
    assert is_valid_identifier("", err) is False
    assert err.getvalue() == ""


def test_echo_joins_args():
    out = io.StringIO()
    assert builtin_echo(["echo", "hello", "world"], out) == 0
    assert out.getvalue() == "hello world\n"


def test_echo_no_newline_flag():
    out = io.StringIO()
    builtin_echo(["echo", "-n", "a", "b"], out)
    assert out.getvalue() == "a b"


def test_echo_only_exact_flag_counts():
    out = io.StringIO()
    builtin_echo(["echo", "-nn", "x"], out)
    assert out.getvalue() == "-nn x\n"


def test_echo_no_args():
    out = io.StringIO()
    builtin_echo(["echo"], out)
    assert out.getvalue() == "\n"


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert builtin_pwd(["pwd"], out) == 0
    assert out.getvalue() == f"{os.getcwd()}\n"


def test_pwd_rejects_option():
    out = io.StringIO()
    assert builtin_pwd(["pwd", "-L"], out) == 1
    assert out.getvalue() == "minishell: pwd: -L: invalid option\n"


def test_env_skips_valueless():
    env = Environment.from_envp(["A=1", "B=2"])
    env.add_export_only("C")
    out = io.StringIO()
    assert builtin_env(env, out) == 0
    assert out.getvalue().splitlines() == ["A=1", "B=2"]


def test_export_without_args_lists_sorted():
    env = Environment.from_envp(["ZED=last", "ALPHA=first"])
    env.add_export_only("MID")
    out, err = _streams()
    builtin_export(env, ["export"], out, err)
    assert out.getvalue().splitlines() == [
        'declare -x ALPHA="first"',
        "declare -x MID",
        'declare -x ZED="last"',
    ]


def test_export_assignment_sets_value():
    env = Environment()
    out, err = _streams()
    assert builtin_export(env, ["export", "FOO=bar"], out, err) == 0
    assert env.get("FOO") == "bar"


def test_export_replaces_value():
    env = Environment.from_envp(["FOO=old"])
    out, err = _streams()
    builtin_export(env, ["export", "FOO=new"], out, err)
    assert env.get("FOO") == "new"
    assert len(env) == 1


def test_export_name_only_keeps_existing_value():
    env = Environment.from_envp(["FOO=keep"])
    out, err = _streams()
    builtin_export(env, ["export", "FOO"], out, err)
    assert env.get("FOO") == "keep"


def test_export_name_only_adds_valueless():
    env = Environment()
    out, err = _streams()
    builtin_export(env, ["export", "NEW"], out, err)
    assert "NEW" in env
    assert env.get("NEW") is None


def test_export_invalid_identifier_leaves_env():
    env = Environment()
    out, err = _streams()
    assert builtin_export(env, ["export", "9x=1"], out, err) == 1
    assert len(env) == 0
    assert "not a valid identifier" in err.getvalue()


def test_unset_removes():
    env = Environment.from_envp(["A=1", "B=2"])
    assert builtin_unset(env, ["unset", "A"]) == 0
    assert list(env) == ["B"]


def test_unset_without_args_is_harmless():
    env = Environment.from_envp(["A=1"])
    builtin_unset(env, ["unset"])
    assert list(env) == ["A"]


def test_exit_without_args():
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit"], io.StringIO())
    assert info.value.status == 0


def test_exit_with_code():
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "42"], io.StringIO())
    assert info.value.status == 42


def test_exit_wraps_modulo_256():
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "-1"], io.StringIO())
    assert info.value.status == 255


def test_exit_non_numeric():
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "abc"], err)
    assert info.value.status == 2
    assert err.getvalue() == "exit: abc: numeric argument required\n"


def test_exit_too_many_arguments():
    err = io.StringIO()
    assert builtin_exit(["exit", "1", "2"], err) == 1
    assert err.getvalue() == "exit: too many arguments\n"


def test_exit_out_of_range():
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "2147483648"], err)
    assert info.value.status == 2
    assert "numeric argument required" in err.getvalue()


def test_cd_changes_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    changer = DirectoryChanger(Environment())
    out, err = _streams()
    assert changer.cd(str(target), out, err) == 0
    assert os.path.samefile(os.getcwd(), target)


def test_cd_home_from_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    changer = DirectoryChanger(Environment.from_envp([f"HOME={home}"]))
    out, err = _streams()
    assert changer.cd(None, out, err) == 0
    assert os.path.samefile(os.getcwd(), home)


def test_cd_without_home():
    changer = DirectoryChanger(Environment())
    out, err = _streams()
    assert changer.cd("", out, err) == 1
    assert "HOME not set" in out.getvalue()


def test_cd_dash_returns_to_previous(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "other"
    target.mkdir()
    changer = DirectoryChanger(Environment())
    out, err = _streams()
    changer.cd(str(target), out, err)
    assert changer.cd("-", out, err) == 0
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_cd_dash_without_previous():
    changer = DirectoryChanger(Environment())
    out, err = _streams()
    assert changer.cd("-", out, err) == 1
    assert "oldpwd not set" in out.getvalue()


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    changer = DirectoryChanger(Environment())
    out, err = _streams()
    assert changer.cd(str(tmp_path / "missing"), out, err) == 1
    assert err.getvalue().startswith("cd: ")
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_run_builtin_dispatches_echo():
    env = Environment()
    out, err = _streams()
    status = run_builtin(["echo", "hi"], env, out, err, DirectoryChanger(env))
    assert status == 0
    assert out.getvalue() == "hi\n"


def test_run_builtin_export_then_env():
    env = Environment()
    changer = DirectoryChanger(env)
    out, err = _streams()
    run_builtin(["export", "K=v"], env, out, err, changer)
    run_builtin(["env"], env, out, err, changer)
    assert out.getvalue() == "K=v\n"


def test_run_builtin_exit_raises():
    env = Environment()
    out, err = _streams()
    with pytest.raises(ShellExit) as info:
        run_builtin(["exit", "3"], env, out, err, DirectoryChanger(env))
    assert info.value.status == 3


def test_run_builtin_empty_args():
    env = Environment.from_envp(["A=1"])
    out, err = _streams()
    assert run_builtin([], env, out, err, DirectoryChanger(env)) == 0
    assert out.getvalue() == ""