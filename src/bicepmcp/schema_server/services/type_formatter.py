"""Flattening of resolved type nodes into presentation entities."""

from collections.abc import Mapping

from ..models.bicep_types import (
    AnyType,
    ArrayType,
    BooleanType,
    BuiltInType,
    BuiltInTypeKind,
    CrossFileTypeReference,
    DiscriminatedObjectType,
    FunctionType,
    IntegerType,
    NullType,
    ObjectType,
    ObjectTypeProperty,
    ObjectTypePropertyFlags,
    ResourceFlags,
    ResourceFunctionType,
    ResourceType,
    ScopeType,
    StringLiteralType,
    StringType,
    TypeNode,
    UnionType,
)
from ..models.schema_models import (
    ComplexType,
    DiscriminatedObjectTypeEntity,
    PropertyInfo,
    ResourceFunctionTypeEntity,
    ResourceTypeEntity,
)

_SCOPE_NAMES = [
    (ScopeType.TENANT, "Tenant"),
    (ScopeType.MANAGEMENT_GROUP, "ManagementGroup"),
    (ScopeType.SUBSCRIPTION, "Subscription"),
    (ScopeType.RESOURCE_GROUP, "ResourceGroup"),
    (ScopeType.EXTENSION, "Extension"),
]

_BUILT_IN_NAMES = {
    BuiltInTypeKind.ANY: "any",
    BuiltInTypeKind.NULL: "null",
    BuiltInTypeKind.BOOL: "bool",
    BuiltInTypeKind.INT: "int",
    BuiltInTypeKind.STRING: "string",
    BuiltInTypeKind.OBJECT: "object",
    BuiltInTypeKind.ARRAY: "array",
    BuiltInTypeKind.RESOURCE_REF: "resourceRef",
}


def scope_names(scopes: int) -> list[str]:
    return [name for flag, name in _SCOPE_NAMES if scopes & flag]


def quote_literal(value: str) -> str:
    """Quote a string literal the way Bicep does, e.g. ``it's`` -> ``'it\\'s'``."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class TypeFormatter:
    """Renders nodes of one resolution, looked up by canonical reference string."""

    def __init__(self, resolved: Mapping[str, TypeNode]):
        self._resolved = resolved
        # Object bodies are represented by their resource entity
        self.lifted_bodies: dict[str, str] = {
            str(node.body): node.type_name
            for node in resolved.values()
            if isinstance(node, ResourceType) and isinstance(resolved.get(str(node.body)), ObjectType)
        }

    def _node(self, reference: CrossFileTypeReference) -> TypeNode:
        try:
            return self._resolved[str(reference)]
        except KeyError:
            raise ValueError(f"Type {reference} was not resolved") from None

    def get_type_name(self, reference: CrossFileTypeReference, _seen: frozenset[str] = frozenset()) -> str:
        """Render the type expression for a reference, e.g. ``'A' | 'B'`` or ``Subnet[]``."""
        key = str(reference)
        if key in _seen:
            # Array or union nested in itself
            return "any"
        if key in self.lifted_bodies:
            return self.lifted_bodies[key]
        seen = _seen | {key}
        node = self._node(reference)

        if isinstance(node, ResourceType):
            return node.type_name
        if isinstance(node, (ObjectType, DiscriminatedObjectType, ResourceFunctionType)):
            return node.name
        if isinstance(node, ArrayType):
            item_name = self.get_type_name(node.item_type, seen)
            item_node = self._node(node.item_type)
            if isinstance(item_node, UnionType) and len(item_node.elements) > 1:
                return f"({item_name})[]"
            return f"{item_name}[]"
        if isinstance(node, UnionType):
            return " | ".join(self.get_type_name(element, seen) for element in node.elements) or "never"
        if isinstance(node, StringLiteralType):
            return quote_literal(node.value)
        if isinstance(node, StringType):
            return "string"
        if isinstance(node, IntegerType):
            return "int"
        if isinstance(node, BooleanType):
            return "bool"
        if isinstance(node, AnyType):
            return "any"
        if isinstance(node, NullType):
            return "null"
        if isinstance(node, BuiltInType):
            try:
                return _BUILT_IN_NAMES[BuiltInTypeKind(node.kind)]
            except ValueError:
                return "any"
        if isinstance(node, FunctionType):
            return "function"
        raise TypeError(f"Unsupported type node {type(node).__name__}")

    def _constraints(self, node: TypeNode) -> str | None:
        parts = []
        if isinstance(node, (StringType, ArrayType)):
            if node.min_length is not None:
                parts.append(f"minLength: {node.min_length}")
            if node.max_length is not None:
                parts.append(f"maxLength: {node.max_length}")
        if isinstance(node, StringType) and node.pattern:
            parts.append(f"pattern: {node.pattern}")
        if isinstance(node, IntegerType):
            if node.min_value is not None:
                parts.append(f"minValue: {node.min_value}")
            if node.max_value is not None:
                parts.append(f"maxValue: {node.max_value}")
        return ", ".join(parts) or None

    def to_property_info(self, name: str, prop: ObjectTypeProperty) -> PropertyInfo:
        flags = ObjectTypePropertyFlags(prop.flags)
        node = self._node(prop.type)

        modifiers = []
        if flags & ObjectTypePropertyFlags.DEPLOY_TIME_CONSTANT:
            modifiers.append("deploy-time constant")
        if flags & ObjectTypePropertyFlags.IDENTIFIER:
            modifiers.append("identifier")
        if isinstance(node, (StringType, ObjectType)) and node.sensitive:
            modifiers.append("secure")

        return PropertyInfo(
            name=name,
            type=self.get_type_name(prop.type),
            description=prop.description,
            is_required=bool(flags & ObjectTypePropertyFlags.REQUIRED),
            is_read_only=bool(flags & ObjectTypePropertyFlags.READ_ONLY),
            is_write_only=bool(flags & ObjectTypePropertyFlags.WRITE_ONLY),
            modifiers=modifiers,
            constraints=self._constraints(node),
        )

    def to_properties(self, properties: Mapping[str, ObjectTypeProperty]) -> list[PropertyInfo]:
        return [self.to_property_info(name, prop) for name, prop in properties.items()]

    def to_complex_type(self, node: ObjectType | DiscriminatedObjectType) -> ComplexType:
        if isinstance(node, DiscriminatedObjectType):
            return DiscriminatedObjectTypeEntity(
                name=node.name,
                properties=self.to_properties(node.base_properties),
                discriminator=node.discriminator,
                variants={value: self.get_type_name(ref) for value, ref in node.elements.items()},
            )

        additional = None
        if node.additional_properties is not None:
            additional = self.get_type_name(node.additional_properties)
        return ComplexType(
            name=node.name,
            properties=self.to_properties(node.properties),
            additional_properties=additional,
        )

    def to_resource_entity(self, node: ResourceType) -> ResourceTypeEntity:
        """Flatten a resource, lifting the properties of an ObjectType body."""
        body = self._node(node.body)
        properties = []
        additional = None
        if isinstance(body, ObjectType):
            properties = self.to_properties(body.properties)
            if body.additional_properties is not None:
                additional = self.get_type_name(body.additional_properties)

        # Newer type files describe scopes as readable/writable, older ones as scopeType/readOnlyScopes
        if node.readable_scopes is not None or node.writable_scopes is not None:
            scopes = node.readable_scopes or 0
            writable = node.writable_scopes or 0
            read_only = scopes & ~writable
        else:
            scopes = node.scope_type
            read_only = node.read_only_scopes or 0
            writable = scopes & ~read_only

        flags = []
        if ResourceFlags(node.flags) & ResourceFlags.READ_ONLY:
            flags.append("ReadOnly")

        return ResourceTypeEntity(
            name=node.type_name,
            properties=properties,
            additional_properties=additional,
            api_version=node.api_version,
            body_type=self.get_type_name(node.body),
            scopes=scope_names(scopes),
            read_only_scopes=scope_names(read_only),
            writable_scopes=scope_names(writable),
            flags=flags,
        )

    def to_function_entity(self, node: ResourceFunctionType) -> ResourceFunctionTypeEntity:
        return ResourceFunctionTypeEntity(
            name=node.name,
            resource_type=node.resource_type,
            api_version=node.api_version,
            input_type=self.get_type_name(node.input) if node.input is not None else None,
            output_type=self.get_type_name(node.output),
        )
