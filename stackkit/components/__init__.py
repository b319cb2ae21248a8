"""Construct types that can be declared in the constructs configuration."""

from .registry import (
    build_constructs,
    get_construct_class,
    get_construct_definition,
    register_construct,
    resolve_reference,
)
from .storage import STORAGE_DEFAULTS, STORAGE_DEFINITION, Storage

register_construct("storage", Storage, STORAGE_DEFINITION)

__all__ = [
    "STORAGE_DEFAULTS",
    "STORAGE_DEFINITION",
    "Storage",
    "build_constructs",
    "get_construct_class",
    "get_construct_definition",
    "register_construct",
    "resolve_reference",
]
