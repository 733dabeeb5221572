"""
Runner configuration and the environment snapshot.

Settings are read once, before a batch starts. The environment snapshot
(dotenv file overlaid by the process environment) is the only source of
placeholder values; nothing downstream reads os.environ.
"""

import os
from collections.abc import Mapping

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError


# Default timeout in seconds
DEFAULT_TIMEOUT = 30.0

# Headers sent with every request unless the request or its auth overrides them
COMMON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "*/*",
    "Cache-Control": "no-cache",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


class Settings(BaseModel):
    """
    Settings for a batch run.

    Attributes:
        request_timeout: Per-request timeout in seconds
        fail_on_http_error: Whether 4xx/5xx responses are reported as failures
        baseline_headers: Headers applied beneath request-declared headers
        env_file: Dotenv file consulted for placeholder values, if any
    """
    model_config = ConfigDict(frozen=True)

    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    fail_on_http_error: bool = True
    baseline_headers: dict[str, str] = Field(default_factory=lambda: dict(COMMON_HEADERS))
    env_file: str | None = ".env"

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from COLLECTION_RUNNER_* variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Returns:
            Settings with any overrides applied

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        if environ is None:
            environ = os.environ

        overrides: dict = {}

        timeout = environ.get("COLLECTION_RUNNER_TIMEOUT")
        if timeout:
            try:
                overrides["request_timeout"] = float(timeout)
            except ValueError:
                raise ConfigurationError(
                    f"COLLECTION_RUNNER_TIMEOUT must be a number, got {timeout!r}"
                ) from None
            if overrides["request_timeout"] <= 0:
                raise ConfigurationError("COLLECTION_RUNNER_TIMEOUT must be positive")

        fail_on_http_error = environ.get("COLLECTION_RUNNER_FAIL_ON_HTTP_ERROR")
        if fail_on_http_error:
            overrides["fail_on_http_error"] = _parse_bool(
                "COLLECTION_RUNNER_FAIL_ON_HTTP_ERROR", fail_on_http_error
            )

        env_file = environ.get("COLLECTION_RUNNER_ENV_FILE")
        if env_file:
            overrides["env_file"] = env_file

        return cls(**overrides)


def load_environment(
    env_file: str | None = None,
    environ: Mapping[str, str] | None = None
) -> dict[str, str]:
    """
    Take a snapshot of the variables available for placeholder substitution.

    Values from the dotenv file are overlaid by the process environment, so a
    variable set in the shell wins over the same name in the file.

    Args:
        env_file: Path to a dotenv file; missing files are ignored
        environ: Process environment, defaults to os.environ

    Returns:
        Variable name to value mapping
    """
    if environ is None:
        environ = os.environ

    snapshot: dict[str, str] = {}
    if env_file and os.path.isfile(env_file):
        snapshot.update(
            {key: value for key, value in dotenv_values(env_file).items() if value is not None}
        )
    snapshot.update(environ)
    return snapshot
