"""Robot connection settings, read from the environment or a ``.env`` file.

Usage:
    from sweepmap.client.config import load_config

    config = load_config()            # reads ./.env, env vars win
    config = load_config("robot.env")

Variables (prefix ``SWEEPMAP_``): ``HOST`` (required), ``NAME``,
``SCHEME``, ``USERNAME``, ``PASSWORD``, ``TIMEOUT``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ..engine.errors import ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "SWEEPMAP_"
DEFAULT_TIMEOUT = 5.0


@dataclass(frozen=True)
class RobotConfig:
    host: str
    name: str = "Robot"
    scheme: str = "http"
    username: str | None = None
    password: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}/api/v2"

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.username:
            return (self.username, self.password or "")
        return None

    @staticmethod
    def from_env(
        prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None
    ) -> RobotConfig:
        env = os.environ if environ is None else environ

        host = env.get(f"{prefix}HOST", "").strip()
        if not host:
            raise ValidationError(f"{prefix}HOST is not set")

        raw_timeout = env.get(f"{prefix}TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ValidationError(
                    f"{prefix}TIMEOUT must be a number, got {raw_timeout!r}"
                ) from exc

        return RobotConfig(
            host=host,
            name=env.get(f"{prefix}NAME") or "Robot",
            scheme=env.get(f"{prefix}SCHEME") or "http",
            username=env.get(f"{prefix}USERNAME") or None,
            password=env.get(f"{prefix}PASSWORD") or None,
            timeout=timeout,
        )


def load_config(env_file: str | Path | None = None) -> RobotConfig:
    """Load ``.env`` (without overriding the environment) and build a config."""
    loaded = load_dotenv(env_file)
    if loaded:
        logger.debug("Loaded settings from %s", env_file or ".env")
    return RobotConfig.from_env()
