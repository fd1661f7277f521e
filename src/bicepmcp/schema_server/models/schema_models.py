"""Dataclass models for flattened schemas and MCP tool output schemas."""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class PropertyInfo:
    """Single property of a flattened complex type."""

    name: str
    type: str
    description: str | None = None
    is_required: bool = False
    is_read_only: bool = False
    is_write_only: bool = False
    modifiers: list[str] = field(default_factory=list)
    constraints: str | None = None


@dataclass
class ComplexType:
    """Presentation form of an object type."""

    name: str
    properties: list[PropertyInfo] = field(default_factory=list)
    additional_properties: str | None = None
    kind: str = "object"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass
class DiscriminatedObjectTypeEntity(ComplexType):
    """Object type whose shape is selected by a discriminator property."""

    discriminator: str | None = None
    variants: dict[str, str] = field(default_factory=dict)
    kind: str = "discriminatedObject"


@dataclass
class ResourceTypeEntity(ComplexType):
    """Resource type with its body properties lifted in."""

    api_version: str | None = None
    body_type: str | None = None
    scopes: list[str] = field(default_factory=list)
    read_only_scopes: list[str] = field(default_factory=list)
    writable_scopes: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)
    kind: str = "resource"


@dataclass
class ResourceFunctionTypeEntity(ComplexType):
    """Function (for example ``listKeys``) invocable on a resource."""

    resource_type: str | None = None
    api_version: str | None = None
    input_type: str | None = None
    output_type: str | None = None
    kind: str = "resourceFunction"


@dataclass
class TypesDefinitionResult:
    """Output of a single resolution, partitioned by entity kind."""

    resource_type_entities: list[ResourceTypeEntity] = field(default_factory=list)
    resource_function_type_entities: list[ResourceFunctionTypeEntity] = field(default_factory=list)
    other_complex_type_entities: list[ComplexType] = field(default_factory=list)


@dataclass
class GetBicepSchemaResponse:
    """Response schema for get_bicep_resource_schema tool."""

    resource_type: str
    api_version: str | None
    types: list[dict[str, Any]]
    total_types: int
    success: bool
    error: dict[str, str] | None = None


@dataclass
class ListApiVersionsResponse:
    """Response schema for list_bicep_api_versions tool."""

    resource_type: str
    api_versions: list[str]
    latest_stable: str | None
    success: bool
    error: dict[str, str] | None = None
