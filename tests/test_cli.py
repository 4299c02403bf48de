"""Tests for the init/seed command line."""

from contextlib import contextmanager

import pytest

from triagedb import cli
from triagedb.config import settings


@pytest.fixture
def patched_db(fake_db, monkeypatch):
    @contextmanager
    def get_db():
        yield fake_db

    monkeypatch.setattr(cli, "get_db", get_db)
    return fake_db


def test_init_prints_summary(patched_db, capsys):
    assert cli.main(["init"]) == 0

    out = capsys.readouterr().out
    assert "Created collection: triage_entries" in out
    assert "key_unique" in patched_db["system_metadata"].index_information()


def test_seed_with_drop(patched_db, capsys):
    assert cli.main(["init"]) == 0
    assert cli.main(["seed", "--drop"]) == 0

    out = capsys.readouterr().out
    assert "Dropped existing data" in out
    assert "Seed complete: 3 patients" in out
    assert patched_db["patients"].count_documents({}) == 3


def test_missing_configuration_exits_non_zero(monkeypatch, capsys):
    monkeypatch.setattr(settings, "MONGODB_URL", "")

    assert cli.main(["init"]) == 1
    assert "Initialization failed: Missing MongoDB configuration" in capsys.readouterr().err


def test_seed_flag_is_optional():
    args = cli.build_parser().parse_args(["seed"])
    assert args.drop is False


def test_command_required():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])
