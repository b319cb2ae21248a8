"""
Deployment environment configuration.

Loads .env and exposes the settings used by the CDK app and the CLI. Every
value can be overridden via environment variables.

Environment variables:
  - STACKKIT_CONFIG        (optional, default: constructs.json)
  - STACKKIT_ENVIRONMENT   (optional, default: dev)
  - STACKKIT_STACK_NAME    (optional, default: StackKit-<environment>)
  - STACKKIT_LOG_LEVEL     (optional, default: INFO)
  - CDK_DEFAULT_ACCOUNT    (optional; provided by the CDK CLI)
  - CDK_DEFAULT_REGION / AWS_REGION (optional, default: eu-central-1)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


_DEFAULT_CONFIG_FILE = "constructs.json"
_DEFAULT_ENVIRONMENT = "dev"
_DEFAULT_REGION = "eu-central-1"
_DEFAULT_LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


def _load_dotenv() -> None:
    """
    Load a .env file into the process environment (if one exists).

    Search order:
    1. Current working directory (.env)
    2. The project root, one level above this package

    Shell / CI environment variables already set take priority: we always
    call load_dotenv() with override=False so existing values are never
    overwritten.
    """
    cwd_env = Path.cwd() / ".env"
    project_root_env = Path(__file__).resolve().parents[1] / ".env"

    env_file: Optional[Path] = None
    if cwd_env.is_file():
        env_file = cwd_env
    elif project_root_env.is_file():
        env_file = project_root_env

    if env_file is None:
        return

    if load_dotenv(env_file, override=False):
        logger.debug("loaded .env from %s (shell vars take precedence)", env_file)
    else:
        logger.debug(
            ".env found at %s but all variables were already set in the environment",
            env_file,
        )


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable, stripped; return default if unset or empty."""
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


# Load .env on module import so getters see env vars.
_load_dotenv()


def get_config_path() -> Path:
    """Return path of the constructs JSON file."""
    return Path(_get_env("STACKKIT_CONFIG", _DEFAULT_CONFIG_FILE) or _DEFAULT_CONFIG_FILE)


def get_environment_name() -> str:
    """Return deployment environment name (dev, prod, ...)."""
    return _get_env("STACKKIT_ENVIRONMENT", _DEFAULT_ENVIRONMENT) or _DEFAULT_ENVIRONMENT


def get_stack_name() -> str:
    """Return the CloudFormation stack name, derived from the environment by default."""
    return _get_env("STACKKIT_STACK_NAME") or f"StackKit-{get_environment_name()}"


def get_account() -> Optional[str]:
    """Return the target AWS account, or None for environment-agnostic synthesis."""
    return _get_env("CDK_DEFAULT_ACCOUNT")


def get_region() -> str:
    """Return the target AWS region."""
    return (
        _get_env("CDK_DEFAULT_REGION")
        or _get_env("AWS_REGION")
        or _DEFAULT_REGION
    )


def get_log_level() -> str:
    """Return the configured log level name."""
    return (_get_env("STACKKIT_LOG_LEVEL", _DEFAULT_LOG_LEVEL) or _DEFAULT_LOG_LEVEL).upper()
