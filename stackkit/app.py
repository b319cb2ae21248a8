"""AWS CDK application that provisions the configured constructs."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from aws_cdk import App, Environment, Tags

from stackkit import config as config_mod
from stackkit.stacks.constructs_stack import ConstructsStack
from stackkit.validators import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


def load_constructs_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load the constructs mapping from a JSON file.

    The file holds a top-level object with a `constructs` key:

        {"constructs": {"avatars": {"type": "storage"}}}

    Args:
        path: Path to the JSON file

    Returns:
        Mapping of construct id to construct configuration

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
    """
    config_path = Path(path)
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(
            str(config_path), [ValidationError("file", f"Cannot read file: {e}")]
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            str(config_path), [ValidationError("file", f"Invalid JSON: {e}")]
        ) from e

    if not isinstance(payload, dict):
        raise ConfigurationError(
            str(config_path), [ValidationError("file", "Top-level value must be an object")]
        )
    constructs = payload.get("constructs", {})
    if not isinstance(constructs, dict):
        raise ConfigurationError(
            str(config_path), [ValidationError("constructs", "Must be an object")]
        )
    logger.debug("loaded %d construct(s) from %s", len(constructs), config_path)
    return constructs


def create_stack(
    app: App,
    constructs_config: Dict[str, Any],
    cloudformation_client: Any = None,
) -> ConstructsStack:
    """
    Add the constructs stack for the configured environment to an app.

    Args:
        app: The CDK app
        constructs_config: Mapping of construct id to construct configuration
        cloudformation_client: Optional boto3 client used to read stack outputs

    Returns:
        The created stack
    """
    environment_name = config_mod.get_environment_name()

    # CDK requires an account for non-environment-agnostic stacks; the CDK CLI
    # typically provides CDK_DEFAULT_ACCOUNT/CDK_DEFAULT_REGION automatically.
    env_config = Environment(
        account=config_mod.get_account(),
        region=config_mod.get_region(),
    )

    return ConstructsStack(
        app,
        config_mod.get_stack_name(),
        environment_name=environment_name,
        constructs_config=constructs_config,
        cloudformation_client=cloudformation_client,
        env=env_config,
        description=f"Declarative constructs ({environment_name})",
    )


def create_app(config_path: Optional[Union[str, Path]] = None) -> App:
    """
    Create and configure the CDK App.

    Args:
        config_path: Constructs JSON file (defaults to STACKKIT_CONFIG)

    Returns:
        Configured CDK App instance
    """
    app = App()

    # Global tags applied to all stacks in this app
    Tags.of(app).add("ManagedBy", "CDK")
    Tags.of(app).add("Environment", config_mod.get_environment_name())

    constructs_config = load_constructs_config(config_path or config_mod.get_config_path())
    create_stack(app, constructs_config)
    return app


if __name__ == "__main__":
    create_app().synth()
