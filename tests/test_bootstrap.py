import pytest

from backend.runner.bootstrap import SeedMissingError, seed_store
from pipeline import migrate_art_database


def test_copies_seed_when_target_missing(tmp_path):
    seed = tmp_path / "initial_data" / "art_database.json"
    seed.parent.mkdir()
    seed.write_bytes(b'{"records": [{"recordId": 1}]}\n')
    target = tmp_path / "disk" / "data" / "art_database.json"

    assert seed_store(seed, target) is True
    assert target.read_bytes() == seed.read_bytes()


def test_existing_target_is_never_overwritten(tmp_path):
    seed = tmp_path / "seed.json"
    seed.write_text('{"records": []}', encoding="utf-8")
    target = tmp_path / "target.json"
    target.write_text("not even json", encoding="utf-8")

    assert seed_store(seed, target) is False
    assert seed_store(seed, target) is False
    assert target.read_text(encoding="utf-8") == "not even json"


def test_missing_seed_raises_before_writing(tmp_path):
    target = tmp_path / "disk" / "target.json"

    with pytest.raises(SeedMissingError):
        seed_store(tmp_path / "absent.json", target)
    assert not target.parent.exists()


def test_cli_exits_non_zero_without_seed(tmp_path, capsys):
    target = tmp_path / "target.json"

    code = migrate_art_database.main(["--seed", str(tmp_path / "absent.json"), "--target", str(target)])

    assert code == 1
    assert not target.exists()
    assert "No seed copy found" in capsys.readouterr().err


def test_cli_is_idempotent(tmp_path, capsys):
    seed = tmp_path / "seed.json"
    seed.write_text('[{"recordId": 1}]', encoding="utf-8")
    target = tmp_path / "target.json"
    argv = ["--seed", str(seed), "--target", str(target)]

    assert migrate_art_database.main(argv) == 0
    assert migrate_art_database.main(argv) == 0

    out = capsys.readouterr().out
    assert "Migration complete" in out
    assert "already exists" in out
    assert target.read_bytes() == seed.read_bytes()
