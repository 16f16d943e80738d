"""
Testes da CLI nexo-keys. A CLI roda seu próprio event loop, então os testes são síncronos.
"""
import re

import pytest

from nexo.cli import main


@pytest.fixture(autouse=True)
def fresh_db():
    """A CLI cria as tabelas sozinha; aqui só isolamos pelo user_id."""
    yield


def test_issue_list_revoke(capsys):
    assert main(["issue", "--user", "cli_user", "--name", "Atalho", "--scopes", "events:read"]) == 0
    out = capsys.readouterr().out
    key = re.search(r"nxk_[A-Za-z0-9_-]+", out).group(0)
    key_id = int(re.search(r"Key #(\d+)", out).group(1))
    assert "events:read" in out

    assert main(["list", "--user", "cli_user"]) == 0
    listed = capsys.readouterr().out
    assert key[:12] in listed
    assert key not in listed
    assert "ativa" in listed

    assert main(["revoke", "--user", "cli_user", "--id", str(key_id)]) == 0
    assert main(["revoke", "--user", "someone_else", "--id", str(key_id)]) == 1


def test_issue_defaults_to_wildcard(capsys):
    assert main(["issue", "--user", "cli_wild", "--name", "full"]) == 0
    assert "(*)" in capsys.readouterr().out


def test_invalid_scope_exits_with_error(capsys):
    assert main(["issue", "--user", "cli_user", "--name", "x", "--scopes", "nope:read"]) == 2
    assert "Invalid scope: nope:read" in capsys.readouterr().err
