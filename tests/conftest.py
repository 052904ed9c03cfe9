"""Shared fixtures for FileMailer tests."""

from pathlib import Path

import pytest

from filemailer.config import FileMailerConfig


def make_config(watch_folder: Path, filetypes=("zip", "rar"), **watch_overrides) -> FileMailerConfig:
    """Build a configuration pointing at a test folder."""
    watch = {"folder": watch_folder, "filetypes": list(filetypes), "settle_seconds": 0}
    watch.update(watch_overrides)
    return FileMailerConfig(
        watch=watch,
        email={"sender": "archiver@x.com", "addressees": ["a@x.com"]},
        smtp={
            "host": "smtp.x.com",
            "port": 465,
            "username": "archiver@x.com",
            "password": "secret",
        },
    )


@pytest.fixture
def watch_folder(tmp_path):
    """Create an empty watched folder."""
    folder = tmp_path / "watch"
    folder.mkdir()
    return folder


@pytest.fixture
def config(watch_folder):
    """Configuration with allow-list ["zip", "rar"] and one addressee."""
    return make_config(watch_folder)
