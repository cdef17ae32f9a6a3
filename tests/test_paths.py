from pathlib import Path

from vanishing_ttt.paths import data_dir, default_difficulty, get_git_commit, repo_root


def test_repo_root_prefers_cwd_when_no_git_and_no_env(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("VTTT_REPO_ROOT", raising=False)
    monkeypatch.delenv("VTTT_DATA_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    import vanishing_ttt.paths as P

    monkeypatch.setattr(P, "_find_git_root", lambda start: None)

    assert repo_root() == tmp_path
    assert data_dir() == tmp_path / "data"


def test_env_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("VTTT_REPO_ROOT", str(tmp_path / "root"))
    assert repo_root() == tmp_path / "root"
    assert data_dir() == tmp_path / "root" / "data"
    monkeypatch.setenv("VTTT_DATA_DIR", str(tmp_path / "elsewhere"))
    assert data_dir() == tmp_path / "elsewhere"

    monkeypatch.delenv("VTTT_DIFFICULTY", raising=False)
    assert default_difficulty() == "normal"
    monkeypatch.setenv("VTTT_DIFFICULTY", "hard")
    assert default_difficulty() == "hard"


def test_git_commit_none_outside_repo(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("VTTT_REPO_ROOT", str(tmp_path))
    assert get_git_commit() is None


def test_find_git_root_walks_up(tmp_path: Path):
    import vanishing_ttt.paths as P

    (tmp_path / ".git").mkdir()
    nested = tmp_path / "src" / "pkg" / "mod.py"
    assert P._find_git_root(nested) == tmp_path
    assert P._find_git_root(tmp_path / "a" / "b" / "c" / "d" / "e" / "f" / "g") is None
