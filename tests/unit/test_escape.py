"""Test SQL literal and LIKE escaping"""

import threading

from sqlclaws.utils import escape


def test_placeholder_escape_is_stable():
    first = escape.placeholder_escape()
    assert escape.placeholder_escape() == first


def test_placeholder_escape_shape():
    token = escape.placeholder_escape()
    assert token.startswith("{") and token.endswith("}")
    assert len(token) == 66
    assert "%" not in token
    int(token[1:-1], 16)


def test_placeholder_escape_across_threads():
    tokens = []

    def read_token():
        tokens.append(escape.placeholder_escape())

    threads = [threading.Thread(target=read_token) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert set(tokens) == {escape.placeholder_escape()}


def test_add_and_remove_placeholder_escape(pct):
    assert escape.add_placeholder_escape("50%") == f"50{pct}"
    assert escape.remove_placeholder_escape(f"LIKE '{pct}a{pct}'") == "LIKE '%a%'"


def test_addslashes():
    assert escape.addslashes("O'Reilly") == "O\\'Reilly"
    assert escape.addslashes('say "hi"') == 'say \\"hi\\"'
    assert escape.addslashes("back\\slash") == "back\\\\slash"
    assert escape.addslashes("nul\x00") == "nul\\0"


def test_real_escape(pct):
    assert escape.real_escape(None) == ""
    assert escape.real_escape(False) == ""
    assert escape.real_escape(True) == "1"
    assert escape.real_escape(42) == "42"
    assert escape.real_escape(b"it's") == "it\\'s"
    assert escape.real_escape("100%") == f"100{pct}"


def test_sql_is_recursive():
    data = {"name": "O'Reilly", "tags": ["a'b", ("c'd",)]}
    assert escape.sql(data) == {"name": "O\\'Reilly", "tags": ["a\\'b", ["c\\'d"]]}


def test_like():
    assert escape.like("50%_off\\") == "50\\%\\_off\\\\"
    assert escape.like("plain") == "plain"
    assert escape.like(None) == ""


def test_like_booleans_match_literal_escaping():
    assert escape.like(True) == escape.real_escape(True) == "1"
    assert escape.like(False) == ""
    assert escape.like(5) == "5"
