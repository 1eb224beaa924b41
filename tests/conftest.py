import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture()
def sandbox(tmp_path, monkeypatch):
    # Work in an isolated temp directory with a predictable PATH
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", os.environ.get("PATH", "/usr/bin:/bin"))
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture()
def make_exe(tmp_path):
    """Create an executable shell script in tmp_path/bin."""
    bindir = tmp_path / "bin"
    bindir.mkdir(exist_ok=True)

    def make(name, body="exit 0", mode=0o755):
        path = bindir / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(mode)
        return path

    return make


@pytest.fixture()
def shell(sandbox):
    from seashell.shell import Shell
    sh = Shell(use_history=False)
    yield sh
    sh.jobs.terminate_all()
