"""Environment-based configuration for SimpleFIN clients."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, NamedTuple

from dotenv import load_dotenv


if TYPE_CHECKING:
    from pathlib import Path


class SimpleFINConfig(NamedTuple):
    """Settings read from `SIMPLEFIN_*` environment variables."""

    access_url: str | None
    setup_token: str | None
    log_level: str
    timeout: float | None


def load_config(env_file: str | Path | None = None) -> SimpleFINConfig:
    """Load configuration from a `.env` file and the environment.

    Variables already set in the environment win over the `.env` file.

    Args:
        env_file: path of the `.env` file. Defaults to searching upwards from
            the working directory.

    Returns:
        The loaded configuration.

    Raises:
        ValueError: if neither `SIMPLEFIN_ACCESS_URL` nor
            `SIMPLEFIN_SETUP_TOKEN` is set, or `SIMPLEFIN_TIMEOUT` is not a
            number.

    """
    _ = load_dotenv(env_file)

    timeout_str = os.getenv("SIMPLEFIN_TIMEOUT")
    try:
        timeout = float(timeout_str) if timeout_str else None
    except ValueError as e:
        msg = f"SIMPLEFIN_TIMEOUT must be a number of seconds, got {timeout_str!r}"
        raise ValueError(msg) from e

    config = SimpleFINConfig(
        access_url=os.getenv("SIMPLEFIN_ACCESS_URL") or None,
        setup_token=os.getenv("SIMPLEFIN_SETUP_TOKEN") or None,
        log_level=os.getenv("SIMPLEFIN_LOG_LEVEL", "INFO"),
        timeout=timeout,
    )
    if config.access_url is None and config.setup_token is None:
        msg = "SIMPLEFIN_ACCESS_URL or SIMPLEFIN_SETUP_TOKEN is required"
        raise ValueError(msg)
    return config
