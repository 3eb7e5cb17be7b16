"""Shared pytest fixtures for Sprig tests."""

import pytest
import tempfile
import shutil
from pathlib import Path
from click.testing import CliRunner

from sprig.cli.main import cli
from sprig.core.config import Config
from sprig.core.repository import Repository


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's global config and SPRIG_* variables out of tests."""
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', tmp_path / 'global.sprigconfig')
    for key in ('SPRIG_INIT_DEFAULTBRANCH', 'SPRIG_COLOR_UI', 'SPRIG_CORE_LOGLEVEL'):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository on branch master."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def write_file(repo):
    """Write a file into the working tree of ``repo``."""
    def _write(name, content):
        path = repo.work_tree / name
        path.write_text(content)
        return path
    return _write


@pytest.fixture
def commit_files(repo, write_file):
    """
    Write, stage and commit files in one step.

    Usage: ``commit_files("message", a="content", **more)``; keys are file
    names with dots spelled as underscores, e.g. ``a_txt`` for ``a.txt``.
    """
    def _commit(message, **files):
        for key, content in files.items():
            name = key.replace('_', '.')
            write_file(name, content)
            repo.add(name)
        return repo.commit(message)
    return _commit


@pytest.fixture
def repo_with_commits(repo, commit_files):
    """Repository with two commits on master after the initial one."""
    commit_files("First commit", file1_txt="Hello, World!\n")
    commit_files("Second commit", file2_txt="Second file\n")
    return repo


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def cli_repo(repo, monkeypatch):
    """Initialized repository as the current directory, colour off."""
    monkeypatch.chdir(repo.work_tree)
    monkeypatch.setenv('SPRIG_COLOR_UI', 'false')
    return repo


@pytest.fixture
def sprig(runner, cli_repo):
    """Run a sprig command in ``cli_repo``."""
    def _run(*args):
        return runner.invoke(cli, list(args), catch_exceptions=False)
    return _run


@pytest.fixture
def reopen(repo):
    """Load a fresh handle on ``repo`` to see what commands saved."""
    def _reopen():
        return Repository(str(repo.work_tree)).open()
    return _reopen
