import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from simplefin_helper import load_config


@pytest.fixture(autouse=True)
def clean_environ() -> Iterator[None]:
    with patch.dict(os.environ, {}, clear=True):
        yield


def test_load_config_from_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _ = env_file.write_text(
        "SIMPLEFIN_SETUP_TOKEN=aHR0cHM6Ly9leGFtcGxlLmNvbQ==\n"
        "SIMPLEFIN_LOG_LEVEL=DEBUG\n"
        "SIMPLEFIN_TIMEOUT=2.5\n"
    )
    config = load_config(env_file)
    assert config.access_url is None
    assert config.setup_token == "aHR0cHM6Ly9leGFtcGxlLmNvbQ=="
    assert config.log_level == "DEBUG"
    assert config.timeout == 2.5


def test_load_config_environment_wins(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _ = env_file.write_text("SIMPLEFIN_ACCESS_URL=https://a:b@from-file\n")
    os.environ["SIMPLEFIN_ACCESS_URL"] = "https://a:b@from-env"
    config = load_config(env_file)
    assert config.access_url == "https://a:b@from-env"
    assert config.log_level == "INFO"
    assert config.timeout is None


def test_load_config_requires_credential(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="SIMPLEFIN_ACCESS_URL"):
        _ = load_config(tmp_path / "missing.env")


def test_load_config_bad_timeout(tmp_path: Path) -> None:
    os.environ["SIMPLEFIN_ACCESS_URL"] = "https://a:b@host"
    os.environ["SIMPLEFIN_TIMEOUT"] = "soon"
    with pytest.raises(ValueError, match="SIMPLEFIN_TIMEOUT"):
        _ = load_config(tmp_path / "missing.env")
