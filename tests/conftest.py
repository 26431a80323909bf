"""Pytest configuration and fixtures for devenv tests."""

import stat
from pathlib import Path

import pytest

from devenv.config import ConfigLoader


DOCKER_SCRIPT = """\
if [ "$1" = "compose" ]; then
  echo "2.20.2"
  exit 0
fi
echo "Docker version 24.0.5, build ced0996"
"""

MAKE_SCRIPT = 'echo "GNU Make 4.4.1"\n'


class FakeBin:
    """A directory of fake executables used as the search path."""

    def __init__(self, directory: Path):
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> str:
        return str(self.directory)

    def add(self, name: str, body: str = "exit 0\n") -> Path:
        """Create an executable shell script."""
        script = self.directory / name
        script.write_text("#!/bin/sh\n" + body)
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    def add_docker(self, version: str = "24.0.5", compose: str = "2.20.2") -> Path:
        return self.add("docker", DOCKER_SCRIPT.replace("24.0.5", version).replace("2.20.2", compose))

    def add_make(self) -> Path:
        return self.add("make", MAKE_SCRIPT)

    def add_all(self) -> "FakeBin":
        """Install every mandatory tool with a recent version."""
        self.add_docker()
        self.add_make()
        return self


@pytest.fixture
def fake_bin(tmp_path):
    """Empty fake bin directory."""
    return FakeBin(tmp_path / "bin")


@pytest.fixture
def ssh_dir(tmp_path):
    """Empty key directory."""
    directory = tmp_path / "home" / ".ssh"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def config():
    """Default configuration without the host-dependent docker group check."""
    return ConfigLoader.from_dict({"docker_group": None}).config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep a stray devenv.yaml or DEVENV_CONFIG from leaking into tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DEVENV_CONFIG", raising=False)
