import pytest

from activeftp.entities.command import Command, Verb


def test_splits_on_first_space_only():
    cmd = Command("RETR my file name.txt")
    assert cmd.verb is Verb.RETR
    assert cmd.get_name() == "RETR"
    assert cmd.get_arg() == "my file name.txt"


def test_no_argument():
    cmd = Command("PWD")
    assert cmd.verb is Verb.PWD
    assert cmd.get_arg() is None
    assert cmd.get_arg("default") == "default"


def test_argument_is_kept_verbatim():
    cmd = Command("USER  alice ")
    assert cmd.get_arg() == " alice "


def test_trailing_space_gives_empty_argument():
    cmd = Command("USER ")
    assert cmd.get_arg() == ""


@pytest.mark.parametrize("line", ["user alice", "Retr x", "NOOP", "QUIT", "PASV", "   ", " LIST"])
def test_unknown_or_lowercase_verbs_are_unknown(line):
    assert Command(line).verb is Verb.UNKNOWN


def test_whitespace_only_line_has_empty_verb():
    cmd = Command(" ")
    assert cmd.get_name() == ""
    assert cmd.verb is Verb.UNKNOWN


def test_password_is_masked_in_str():
    assert "secret" not in str(Command("PASS secret"))
    assert "alice" in str(Command("USER alice"))
