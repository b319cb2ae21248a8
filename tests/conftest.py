"""
Pytest configuration for the stackkit test suite.

Tests import `stackkit...` normally. To make that work in a fresh checkout
without requiring an editable install, we add the project root to `sys.path`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# CDK/jsii tries to write to the user cache directory (e.g. ~/Library/Caches/...)
# during import. In the sandbox, writes outside the workspace are blocked, so we
# redirect the jsii runtime package cache into the repo.
os.environ.setdefault(
    "JSII_RUNTIME_PACKAGE_CACHE_ROOT",
    str(PROJECT_ROOT / ".jsii-package-cache"),
)


def pytest_configure() -> None:
    """
    Ensure the local `stackkit` package is importable for tests.

    Prepend so local sources win over any globally installed package.
    """
    if str(PROJECT_ROOT) not in sys.path:
        sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep developer shell settings out of config-dependent tests."""
    for name in (
        "STACKKIT_CONFIG",
        "STACKKIT_ENVIRONMENT",
        "STACKKIT_STACK_NAME",
        "STACKKIT_LOG_LEVEL",
        "CDK_DEFAULT_ACCOUNT",
        "CDK_DEFAULT_REGION",
        "AWS_REGION",
    ):
        monkeypatch.delenv(name, raising=False)


def make_cloudformation_client(outputs=None, stack_name="StackKitTest"):
    """
    Build a mock CloudFormation client whose DescribeStacks returns `outputs`.

    Args:
        outputs: Mapping of output key to value
        stack_name: Name reported for the stack
    """
    client = MagicMock()
    client.describe_stacks.return_value = {
        "Stacks": [
            {
                "StackName": stack_name,
                "Outputs": [
                    {"OutputKey": key, "OutputValue": value}
                    for key, value in (outputs or {}).items()
                ],
            }
        ]
    }
    return client


@pytest.fixture
def cloudformation_client():
    return make_cloudformation_client()


@pytest.fixture
def make_client():
    return make_cloudformation_client
