"""Pydantic models for the Bicep resource type graph.

Type files published by bicep-types-az are JSON arrays of type nodes. Each node
carries a ``$type`` discriminator and refers to other nodes through
``{"$ref": "<path>#/<index>"}`` objects. References are normalized on load into
``CrossFileTypeReference`` values that always name the file they point into, so
the rest of the resolver never deals with file-relative ``#/N`` shortcuts.
"""

import posixpath
from enum import IntEnum, IntFlag
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, ValidationInfo, model_validator

from ..errors import TypeParseError


class ObjectTypePropertyFlags(IntFlag):
    """Property flags as serialized by bicep-types."""

    NONE = 0
    REQUIRED = 1
    READ_ONLY = 2
    WRITE_ONLY = 4
    DEPLOY_TIME_CONSTANT = 8
    IDENTIFIER = 16


class ResourceFlags(IntFlag):
    """Resource level flags."""

    NONE = 0
    READ_ONLY = 1


class ScopeType(IntFlag):
    """Deployment scopes a resource can be declared at."""

    UNKNOWN = 0
    TENANT = 1
    MANAGEMENT_GROUP = 2
    SUBSCRIPTION = 4
    RESOURCE_GROUP = 8
    EXTENSION = 16


class BuiltInTypeKind(IntEnum):
    """Kinds used by the legacy BuiltInType node."""

    ANY = 1
    NULL = 2
    BOOL = 3
    INT = 4
    STRING = 5
    OBJECT = 6
    ARRAY = 7
    RESOURCE_REF = 8


def parse_reference(ref: str, containing_path: str = "") -> dict[str, Any]:
    """Split a ``path#/index`` reference string into its parts.

    An empty path points into ``containing_path``; any other path is resolved
    relative to the directory of ``containing_path``.
    """
    path, sep, fragment = ref.partition("#")
    if not sep or not fragment.startswith("/"):
        raise ValueError(f"Invalid type reference '{ref}'")

    try:
        index = int(fragment[1:])
    except ValueError as e:
        raise ValueError(f"Invalid type reference index in '{ref}'") from e

    if not path:
        path = containing_path
    elif containing_path:
        path = posixpath.normpath(posixpath.join(posixpath.dirname(containing_path), path))

    if not path:
        raise ValueError(f"Type reference '{ref}' does not name a type file")

    return {"relative_path": path, "index": index}


class CrossFileTypeReference(BaseModel):
    """Pointer to the node at ``index`` in the type file at ``relative_path``."""

    model_config = ConfigDict(frozen=True)

    relative_path: str = Field(..., min_length=1)
    index: int = Field(..., ge=0)

    @model_validator(mode="before")
    @classmethod
    def _expand_ref(cls, data: Any, info: ValidationInfo) -> Any:
        if isinstance(data, dict) and "$ref" in data:
            if not isinstance(data["$ref"], str):
                raise ValueError("$ref must be a string")
            containing_path = (info.context or {}).get("relative_path", "")
            return parse_reference(data["$ref"], containing_path)
        return data

    def __str__(self) -> str:
        return f"{self.relative_path}#/{self.index}"


class _TypeModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ObjectTypeProperty(_TypeModel):
    type: CrossFileTypeReference
    flags: int = 0
    description: str | None = None


class FunctionParameter(_TypeModel):
    name: str
    type: CrossFileTypeReference
    description: str | None = None


class ResourceType(_TypeModel):
    node_type: Literal["ResourceType"] = Field("ResourceType", alias="$type")
    name: str
    body: CrossFileTypeReference
    scope_type: int = Field(0, alias="scopeType")
    read_only_scopes: int | None = Field(None, alias="readOnlyScopes")
    readable_scopes: int | None = Field(None, alias="readableScopes")
    writable_scopes: int | None = Field(None, alias="writableScopes")
    flags: int = 0

    @property
    def type_name(self) -> str:
        """Resource type name without the ``@apiVersion`` suffix."""
        return self.name.rpartition("@")[0] or self.name

    @property
    def api_version(self) -> str | None:
        _, sep, version = self.name.rpartition("@")
        return version if sep else None


class ResourceFunctionType(_TypeModel):
    node_type: Literal["ResourceFunctionType"] = Field("ResourceFunctionType", alias="$type")
    name: str
    resource_type: str = Field(..., alias="resourceType")
    api_version: str = Field(..., alias="apiVersion")
    output: CrossFileTypeReference
    input: CrossFileTypeReference | None = None


class ObjectType(_TypeModel):
    node_type: Literal["ObjectType"] = Field("ObjectType", alias="$type")
    name: str
    properties: dict[str, ObjectTypeProperty] = Field(default_factory=dict)
    additional_properties: CrossFileTypeReference | None = Field(None, alias="additionalProperties")
    sensitive: bool | None = None


class DiscriminatedObjectType(_TypeModel):
    node_type: Literal["DiscriminatedObjectType"] = Field("DiscriminatedObjectType", alias="$type")
    name: str
    discriminator: str
    base_properties: dict[str, ObjectTypeProperty] = Field(default_factory=dict, alias="baseProperties")
    elements: dict[str, CrossFileTypeReference] = Field(default_factory=dict)


class ArrayType(_TypeModel):
    node_type: Literal["ArrayType"] = Field("ArrayType", alias="$type")
    item_type: CrossFileTypeReference = Field(..., alias="itemType")
    min_length: int | None = Field(None, alias="minLength")
    max_length: int | None = Field(None, alias="maxLength")


class UnionType(_TypeModel):
    node_type: Literal["UnionType"] = Field("UnionType", alias="$type")
    elements: list[CrossFileTypeReference] = Field(default_factory=list)


class FunctionType(_TypeModel):
    node_type: Literal["FunctionType"] = Field("FunctionType", alias="$type")
    parameters: list[FunctionParameter] = Field(default_factory=list)
    output: CrossFileTypeReference


class StringLiteralType(_TypeModel):
    node_type: Literal["StringLiteralType"] = Field("StringLiteralType", alias="$type")
    value: str


class StringType(_TypeModel):
    node_type: Literal["StringType"] = Field("StringType", alias="$type")
    sensitive: bool | None = None
    min_length: int | None = Field(None, alias="minLength")
    max_length: int | None = Field(None, alias="maxLength")
    pattern: str | None = None


class IntegerType(_TypeModel):
    node_type: Literal["IntegerType"] = Field("IntegerType", alias="$type")
    min_value: int | None = Field(None, alias="minValue")
    max_value: int | None = Field(None, alias="maxValue")


class BooleanType(_TypeModel):
    node_type: Literal["BooleanType"] = Field("BooleanType", alias="$type")


class AnyType(_TypeModel):
    node_type: Literal["AnyType"] = Field("AnyType", alias="$type")


class NullType(_TypeModel):
    node_type: Literal["NullType"] = Field("NullType", alias="$type")


class BuiltInType(_TypeModel):
    node_type: Literal["BuiltInType"] = Field("BuiltInType", alias="$type")
    kind: int


TypeNode = Annotated[
    Union[
        ResourceType,
        ResourceFunctionType,
        ObjectType,
        DiscriminatedObjectType,
        ArrayType,
        UnionType,
        FunctionType,
        StringLiteralType,
        StringType,
        IntegerType,
        BooleanType,
        AnyType,
        NullType,
        BuiltInType,
    ],
    Field(discriminator="node_type"),
]

COMPLEX_TYPES = (ObjectType, DiscriminatedObjectType)

_TYPE_NODES_ADAPTER = TypeAdapter(list[TypeNode])


def parse_type_nodes(data: Any, relative_path: str) -> list[TypeNode]:
    """Validate the decoded content of a type file.

    Raises:
        TypeParseError: If the content is not an array of known type nodes
    """
    if not isinstance(data, list):
        raise TypeParseError(f"Type file '{relative_path}' must contain a JSON array, got {type(data).__name__}")

    try:
        return _TYPE_NODES_ADAPTER.validate_python(data, context={"relative_path": relative_path})
    except ValidationError as e:
        raise TypeParseError(f"Invalid type definitions in '{relative_path}': {e}") from e


def type_references(node: TypeNode) -> list[CrossFileTypeReference]:
    """Return the outgoing edges of a type node in declaration order."""
    if isinstance(node, ResourceType):
        return [node.body]
    if isinstance(node, ResourceFunctionType):
        return [node.output] if node.input is None else [node.input, node.output]
    if isinstance(node, ObjectType):
        refs = [prop.type for prop in node.properties.values()]
        if node.additional_properties is not None:
            refs.append(node.additional_properties)
        return refs
    if isinstance(node, DiscriminatedObjectType):
        return [prop.type for prop in node.base_properties.values()] + list(node.elements.values())
    if isinstance(node, ArrayType):
        return [node.item_type]
    if isinstance(node, UnionType):
        return list(node.elements)
    if isinstance(node, FunctionType):
        return [param.type for param in node.parameters] + [node.output]
    # Scalar types have no edges
    return []


class TypeIndex(BaseModel):
    """Resource type name -> available API versions and their root references.

    Names are matched case-insensitively; ``resource_names`` keeps the casing
    used by the index for display.
    """

    model_config = ConfigDict(frozen=True)

    resources: dict[str, list[tuple[str, CrossFileTypeReference]]] = Field(default_factory=dict)
    resource_names: dict[str, str] = Field(default_factory=dict)
    resource_functions: dict[str, dict[str, list[CrossFileTypeReference]]] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, data: Any) -> "TypeIndex":
        """Build an index from the decoded ``index.json`` document.

        Raises:
            TypeParseError: If the document does not have the index shape
        """
        if not isinstance(data, dict) or not isinstance(data.get("resources"), dict):
            raise TypeParseError("Type index must be an object with a 'resources' mapping")

        resources: dict[str, list[tuple[str, CrossFileTypeReference]]] = {}
        resource_names: dict[str, str] = {}
        resource_functions: dict[str, dict[str, list[CrossFileTypeReference]]] = {}

        try:
            for key, raw_ref in data["resources"].items():
                name, sep, version = key.rpartition("@")
                if not sep or not name or not version:
                    raise TypeParseError(f"Invalid resource key '{key}' in type index")
                reference = CrossFileTypeReference.model_validate(raw_ref, context={"relative_path": ""})
                resources.setdefault(name.lower(), []).append((version, reference))
                resource_names.setdefault(name.lower(), name)

            for name, versions in (data.get("resourceFunctions") or {}).items():
                for version, raw_refs in versions.items():
                    resource_functions.setdefault(name.lower(), {})[version] = [
                        CrossFileTypeReference.model_validate(raw_ref, context={"relative_path": ""})
                        for raw_ref in raw_refs
                    ]
        except (ValidationError, AttributeError, TypeError) as e:
            raise TypeParseError(f"Invalid type index document: {e}") from e

        return cls(resources=resources, resource_names=resource_names, resource_functions=resource_functions)

    def find_resource(self, resource_type_name: str) -> list[tuple[str, CrossFileTypeReference]] | None:
        return self.resources.get(resource_type_name.lower())

    def get_api_versions(self, resource_type_name: str) -> set[str]:
        return {version for version, _ in self.resources.get(resource_type_name.lower(), [])}

    def get_resource_functions(self, resource_type_name: str, api_version: str) -> list[CrossFileTypeReference]:
        return list(self.resource_functions.get(resource_type_name.lower(), {}).get(api_version, []))
