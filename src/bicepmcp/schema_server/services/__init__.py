"""Services for the Bicep schema server."""

from .api_version_selector import is_stable, select_latest_stable, sort_api_versions
from .resource_visitor import ResourceVisitor
from .schema_generator import SchemaGenerator, get_schema_generator, reset_schema_generator, set_schema_generator
from .type_cache import TypeCache
from .type_loader import BicepTypeLoader

__all__ = [
    "BicepTypeLoader",
    "ResourceVisitor",
    "SchemaGenerator",
    "TypeCache",
    "get_schema_generator",
    "is_stable",
    "reset_schema_generator",
    "select_latest_stable",
    "set_schema_generator",
    "sort_api_versions",
]
