"""
Registry of construct types and helpers to build them from configuration.

The constructs configuration maps construct ids to their settings:

    {
        "avatars": {"type": "storage", "encryption": "kms"},
        "exports": {"type": "storage"}
    }

References let other parts of a deployment point at construct values with
`${construct:<id>.<property>}`, e.g. `${construct:avatars.bucketArn}`.
"""

import logging
import re
from typing import Any, Dict, Mapping, Tuple, Type

from constructs import Construct

from ..provider import AwsProvider
from ..validators import ConfigurationError, ValidationError
from .base import AwsConstruct

logger = logging.getLogger(__name__)

_REGISTRY: Dict[str, Tuple[Type[AwsConstruct], Mapping[str, Any]]] = {}

_REFERENCE_PATTERN = re.compile(r"^\$\{construct:([\w-]+)\.([\w-]+)\}$")
_BARE_REFERENCE_PATTERN = re.compile(r"^([\w-]+)\.([\w-]+)$")
_CONSTRUCT_ID_PATTERN = re.compile(r"[\w-]+")


def register_construct(
    type_name: str, cls: Type[AwsConstruct], definition: Mapping[str, Any]
) -> None:
    """
    Register a construct type.

    Args:
        type_name: Value of the `type` key that selects this construct
        cls: Construct class, called as cls(scope, provider, id, configuration)
        definition: Configuration definition of the construct type
    """
    _REGISTRY[type_name] = (cls, definition)


def get_construct_class(type_name: str) -> Type[AwsConstruct]:
    """
    Look up a registered construct class.

    Raises:
        KeyError: If no construct is registered for type_name
    """
    return _REGISTRY[type_name][0]


def get_construct_definition(type_name: str) -> Mapping[str, Any]:
    """Look up the configuration definition of a registered construct type."""
    return _REGISTRY[type_name][1]


def registered_types() -> Tuple[str, ...]:
    return tuple(sorted(_REGISTRY))


def build_constructs(
    scope: Construct,
    provider: AwsProvider,
    constructs_config: Mapping[str, Any],
) -> Dict[str, AwsConstruct]:
    """
    Instantiate every configured construct.

    Args:
        scope: Parent construct (usually the stack)
        provider: The AWS provider of the stack
        constructs_config: Mapping of construct id to construct configuration

    Returns:
        Mapping of construct id to construct instance, in configuration order

    Raises:
        ConfigurationError: If an id is malformed, or an entry is not an object or
            has a missing/unknown type
    """
    built: Dict[str, AwsConstruct] = {}
    for construct_id, configuration in constructs_config.items():
        if not isinstance(construct_id, str) or not _CONSTRUCT_ID_PATTERN.fullmatch(construct_id):
            raise ConfigurationError(
                str(construct_id),
                [
                    ValidationError(
                        "id",
                        "Must only contain letters, digits, underscores and hyphens",
                    )
                ],
            )
        if not isinstance(configuration, dict):
            raise ConfigurationError(
                construct_id, [ValidationError("configuration", "Must be an object")]
            )
        type_name = configuration.get("type")
        if not type_name:
            raise ConfigurationError(
                construct_id, [ValidationError("type", "This field is required")]
            )
        if not isinstance(type_name, str):
            raise ConfigurationError(
                construct_id, [ValidationError("type", "Must be a string")]
            )
        if type_name not in _REGISTRY:
            raise ConfigurationError(
                construct_id,
                [
                    ValidationError(
                        "type",
                        f"Unknown construct type {type_name!r} "
                        f"(available: {', '.join(registered_types())})",
                    )
                ],
            )
        cls = get_construct_class(type_name)
        logger.debug("building construct %s of type %s", construct_id, type_name)
        built[construct_id] = cls(scope, provider, construct_id, configuration)
    return built


def parse_reference(expression: str) -> Tuple[str, str]:
    """
    Split a reference expression into (construct id, property).

    Accepts `${construct:id.property}` and the bare `id.property` form.

    Raises:
        ConfigurationError: If the expression is malformed
    """
    text = (expression or "").strip()
    match = _REFERENCE_PATTERN.match(text) or _BARE_REFERENCE_PATTERN.match(text)
    if not match:
        raise ConfigurationError(
            "reference",
            [
                ValidationError(
                    "expression",
                    f"Invalid reference {expression!r}, expected ${{construct:<id>.<property>}}",
                )
            ],
        )
    return match.group(1), match.group(2)


def resolve_reference(constructs: Mapping[str, AwsConstruct], expression: str) -> str:
    """
    Resolve a construct reference to its (tokenized) value.

    Args:
        constructs: Built constructs by id
        expression: Reference such as `${construct:avatars.bucketArn}`

    Returns:
        The referenced value, a CDK token until the stack is synthesized

    Raises:
        ConfigurationError: If the construct or property does not exist
    """
    construct_id, prop = parse_reference(expression)
    construct = constructs.get(construct_id)
    if construct is None:
        raise ConfigurationError(
            construct_id,
            [ValidationError("reference", f"No construct named {construct_id!r}")],
        )
    references = construct.references()
    if prop not in references:
        available = ", ".join(sorted(references)) or "none"
        raise ConfigurationError(
            construct_id,
            [
                ValidationError(
                    "reference",
                    f"Unknown property {prop!r} (available: {available})",
                )
            ],
        )
    return references[prop]
