import pytest

from minish.environment import Environment


@pytest.fixture
def env():
    return Environment.from_envp(["HOME=/home/user", "PATH=/bin:/usr/bin", "NOEQ", "X=a=b"])


def test_from_envp_reads_assignments(env):
    assert env.get("HOME") == "/home/user"
    assert env.get("PATH") == "/bin:/usr/bin"


def test_from_envp_skips_entries_without_equals(env):
    assert "NOEQ" not in env
    assert len(env) == 3


def test_value_keeps_later_equals_signs(env):
    assert env.get("X") == "a=b"


def test_first_duplicate_wins():
    env = Environment.from_envp(["A=1", "A=2"])
    assert env.get("A") == "1"
    assert len(env) == 1


def test_iteration_keeps_insertion_order(env):
    assert list(env) == ["HOME", "PATH", "X"]


def test_get_missing_and_empty_name(env):
    assert env.get("NOPE") is None
    assert env.get("") is None


def test_add_appends_at_end(env):
    env.add("NEW", "v")
    assert list(env)[-1] == "NEW"
    assert env.get("NEW") == "v"


def test_add_or_replace_keeps_position(env):
    env.add_or_replace("HOME=/tmp")
    assert env.get("HOME") == "/tmp"
    assert list(env)[0] == "HOME"


def test_add_or_replace_new_name(env):
    env.add_or_replace("FOO=bar")
    assert env.get("FOO") == "bar"
    assert env.entries()[-1] == "FOO=bar"


def test_add_or_replace_empty_value(env):
    env.add_or_replace("EMPTY=")
    assert env.get("EMPTY") == ""
    assert "EMPTY=" in env.entries()


def test_add_export_only_does_not_overwrite(env):
    env.add_export_only("HOME")
    assert env.get("HOME") == "/home/user"


def test_add_export_only_new_name_has_no_value(env):
    env.add_export_only("LONELY")
    assert "LONELY" in env
    assert env.get("LONELY") is None
    assert "LONELY" in env.entries()
    assert all(not e.startswith("LONELY") for e in env.to_envp())


def test_remove(env):
    assert env.remove("PATH") is True
    assert "PATH" not in env
    assert env.remove("PATH") is False
    assert list(env) == ["HOME", "X"]


def test_entries_format(env):
    assert env.entries() == ["HOME=/home/user", "PATH=/bin:/usr/bin", "X=a=b"]


def test_sorted_entries_is_sorted_permutation():
    env = Environment.from_envp(["b=2", "a=1", "C=3"])
    env.add_export_only("_u")
    result = env.sorted_entries()
    assert sorted(result) == result
    assert sorted(env.entries()) == result
    assert result[0] == "C=3"


def test_to_envp_round_trip(env):
    again = Environment.from_envp(env.to_envp())
    assert again.entries() == env.entries()


def test_empty_environment():
    env = Environment()
    assert len(env) == 0
    assert env.entries() == []
    assert env.sorted_entries() == []