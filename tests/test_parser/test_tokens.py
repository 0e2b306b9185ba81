import pytest

from cmdtree.parser.tokens import TokenKind, classify, command_candidates


@pytest.mark.parametrize(
    "token, kind",
    [
        ("--", TokenKind.TERMINATOR),
        ("--name", TokenKind.FLAG),
        ("-n", TokenKind.FLAG),
        ("-", TokenKind.PLAIN),
        ("user", TokenKind.PLAIN),
        ("a=1", TokenKind.STRUCTURED),
        ('{"a": 1}', TokenKind.STRUCTURED),
    ],
)
def test_classify(token, kind):
    assert classify(token) is kind


def test_command_candidates_stop_at_flags_and_assignments():
    assert command_candidates(["user", "add", "--name", "x"]) == ["user", "add"]
    assert command_candidates(["user", "name=x", "add"]) == ["user"]
    assert command_candidates(["-v", "user"]) == []
    assert command_candidates([]) == []
