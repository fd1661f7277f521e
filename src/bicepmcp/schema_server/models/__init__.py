"""Data models for the Bicep schema server."""

from .bicep_types import (
    CrossFileTypeReference,
    ObjectType,
    ResourceFunctionType,
    ResourceType,
    TypeIndex,
    TypeNode,
    parse_type_nodes,
    type_references,
)
from .schema_models import (
    ComplexType,
    DiscriminatedObjectTypeEntity,
    GetBicepSchemaResponse,
    ListApiVersionsResponse,
    PropertyInfo,
    ResourceFunctionTypeEntity,
    ResourceTypeEntity,
    TypesDefinitionResult,
)

__all__ = [
    "CrossFileTypeReference",
    "ObjectType",
    "ResourceFunctionType",
    "ResourceType",
    "TypeIndex",
    "TypeNode",
    "parse_type_nodes",
    "type_references",
    "ComplexType",
    "DiscriminatedObjectTypeEntity",
    "GetBicepSchemaResponse",
    "ListApiVersionsResponse",
    "PropertyInfo",
    "ResourceFunctionTypeEntity",
    "ResourceTypeEntity",
    "TypesDefinitionResult",
]
