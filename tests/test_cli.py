from pathlib import Path

import pytest

import burrow.__main__ as cli


@pytest.fixture
def runs(monkeypatch) -> list[tuple[Path, dict]]:
	"""Records the calls to `run` instead of starting the server."""
	calls: list[tuple[Path, dict]] = []
	monkeypatch.setattr(cli, "run", lambda root, **options: calls.append((root, options)))
	return calls


def test_missing_root(tmp_path: Path, runs, capsys):
	assert cli.main([str(tmp_path / "missing")]) == 1
	assert runs == []
	assert "Unable to access directory" in capsys.readouterr().err


def test_root_is_a_file(tmp_path: Path, runs):
	(tmp_path / "file").write_bytes(b"")
	assert cli.main([str(tmp_path / "file")]) == 1
	assert runs == []


def test_root(tmp_path: Path, runs, capsys):
	assert cli.main([str(tmp_path), "--port", "7070", "-H", "127.0.0.1"]) == 0
	assert runs == [(tmp_path, {"host": "127.0.0.1", "port": 7070})]
	assert "Hosting directory" in capsys.readouterr().err


def test_default_root(tmp_path: Path, runs, monkeypatch):
	monkeypatch.chdir(tmp_path)
	assert cli.main([]) == 0
	((root, options),) = runs
	assert root.resolve() == tmp_path.resolve()
	assert options == {"host": "0.0.0.0", "port": 1900}


# EOF
