"""
Shared fixtures for the accumulo-util tests.
"""

import stat
from pathlib import Path

import pytest

from accumulo_util.core.config import InstallPaths


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the caller's Accumulo/Java/Hadoop environment (and any .env) out of the tests."""
    for var in ("ACCUMULO_HOME", "ACCUMULO_CONF_DIR", "JAVA_HOME", "HADOOP_HOME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def install(tmp_path) -> InstallPaths:
    """An empty Accumulo installation tree."""
    home = tmp_path / "accumulo"
    for name in ("bin", "lib", "conf"):
        (home / name).mkdir(parents=True)
    return InstallPaths(home=home, conf=home / "conf")


def make_executable(path: Path, content: str = "#!/bin/sh\nexit 0\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def java_home(tmp_path) -> Path:
    home = tmp_path / "jdk"
    make_executable(home / "bin" / "keytool")
    return home


@pytest.fixture
def hadoop_home(tmp_path) -> Path:
    home = tmp_path / "hadoop"
    make_executable(home / "bin" / "hadoop")
    return home
