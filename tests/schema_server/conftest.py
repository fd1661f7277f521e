"""Shared fixtures for Bicep schema server tests.

The sample type store mirrors the layout of bicep-types-az: an index.json at the
root and one types.json per provider/API version, with references between files.
"""

import copy
from typing import Any

import httpx
import pytest

from bicepmcp.schema_server.services.resource_visitor import ResourceVisitor
from bicepmcp.schema_server.services.schema_generator import SchemaGenerator
from bicepmcp.schema_server.services.type_cache import TypeCache
from bicepmcp.schema_server.services.type_loader import BicepTypeLoader

BASE_URL = "https://types.example.test/generated"

WIDGETS_2023 = "test/microsoft.test/2023-01-01/types.json"
WIDGETS_2021 = "test/microsoft.test/2021-04-01/types.json"
WIDGETS_PREVIEW = "test/microsoft.test/2022-09-01-preview/types.json"
COMMON = "test/microsoft.test/common/types.json"
SHAPES_2024 = "test/microsoft.test/2024-01-01/types.json"

SAMPLE_DOCUMENTS: dict[str, Any] = {
    "index.json": {
        "resources": {
            "Microsoft.Test/widgets@2021-04-01": {"$ref": f"{WIDGETS_2021}#/2"},
            "Microsoft.Test/widgets@2022-09-01-preview": {"$ref": f"{WIDGETS_PREVIEW}#/2"},
            "Microsoft.Test/widgets@2023-01-01": {"$ref": f"{WIDGETS_2023}#/8"},
            "Microsoft.Test/gadgets@2021-04-01-preview": {"$ref": f"{WIDGETS_2021}#/2"},
            "Microsoft.Test/notAResource@2023-01-01": {"$ref": f"{WIDGETS_2023}#/9"},
            "Microsoft.Test/outOfRange@2023-01-01": {"$ref": f"{WIDGETS_2023}#/99"},
            "Microsoft.Test/unpublished@2023-01-01": {"$ref": "test/unpublished/types.json#/0"},
            "Microsoft.Test/shapes@2024-01-01": {"$ref": f"{SHAPES_2024}#/7"},
        },
        "resourceFunctions": {
            "microsoft.test/widgets": {
                "2023-01-01": [
                    {"$ref": f"{WIDGETS_2023}#/10"},
                    {"$ref": f"{WIDGETS_2023}#/11"},
                ]
            }
        },
        "settings": {"name": "Test", "isSingleton": False},
    },
    WIDGETS_2023: [
        {"$type": "StringType"},
        {"$type": "StringLiteralType", "value": "Enabled"},
        {"$type": "StringLiteralType", "value": "Disabled"},
        {"$type": "UnionType", "elements": [{"$ref": "#/1"}, {"$ref": "#/2"}]},
        {
            "$type": "ObjectType",
            "name": "WidgetProperties",
            "properties": {
                "state": {"type": {"$ref": "#/3"}, "flags": 0, "description": "Widget state"},
                "child": {"type": {"$ref": "../common/types.json#/0"}, "flags": 0},
                "children": {"type": {"$ref": "#/5"}, "flags": 0, "description": "Child settings"},
            },
        },
        {"$type": "ArrayType", "itemType": {"$ref": "../common/types.json#/0"}, "maxLength": 5},
        {"$type": "IntegerType", "minValue": 1, "maxValue": 10},
        {
            "$type": "ObjectType",
            "name": "Microsoft.Test/widgets",
            "properties": {
                "name": {"type": {"$ref": "#/0"}, "flags": 9, "description": "The resource name"},
                "properties": {"type": {"$ref": "#/4"}, "flags": 0, "description": "Widget properties"},
                "count": {"type": {"$ref": "#/6"}, "flags": 2},
                "secret": {"type": {"$ref": "../common/types.json#/1"}, "flags": 4},
            },
        },
        {
            "$type": "ResourceType",
            "name": "Microsoft.Test/widgets@2023-01-01",
            "scopeType": 8,
            "body": {"$ref": "#/7"},
            "flags": 0,
        },
        {
            "$type": "ObjectType",
            "name": "ListKeysResult",
            "properties": {"keys": {"type": {"$ref": "#/0"}, "flags": 2}},
        },
        {
            "$type": "ResourceFunctionType",
            "name": "listKeys",
            "resourceType": "Microsoft.Test/widgets",
            "apiVersion": "2023-01-01",
            "output": {"$ref": "#/9"},
        },
        {
            "$type": "ResourceFunctionType",
            "name": "listSecrets",
            "resourceType": "Microsoft.Test/widgets",
            "apiVersion": "2023-01-01",
            "output": {"$ref": "#/9"},
        },
    ],
    COMMON: [
        {
            "$type": "ObjectType",
            "name": "ChildSettings",
            "properties": {
                "label": {"type": {"$ref": "#/1"}, "flags": 1},
                "owner": {"type": {"$ref": "../2023-01-01/types.json#/4"}, "flags": 0},
            },
        },
        {"$type": "StringType", "sensitive": True, "minLength": 8},
    ],
    WIDGETS_2021: [
        {"$type": "StringType"},
        {
            "$type": "ObjectType",
            "name": "Microsoft.Test/widgets",
            "properties": {"name": {"type": {"$ref": "#/0"}, "flags": 1}},
        },
        {
            "$type": "ResourceType",
            "name": "Microsoft.Test/widgets@2021-04-01",
            "scopeType": 8,
            "body": {"$ref": "#/1"},
            "flags": 0,
        },
    ],
    SHAPES_2024: [
        {"$type": "BuiltInType", "kind": 5},
        {"$type": "StringLiteralType", "value": "Circle"},
        {"$type": "StringLiteralType", "value": "Square"},
        {"$type": "UnionType", "elements": [{"$ref": "#/1"}, {"$ref": "#/2"}]},
        {"$type": "ArrayType", "itemType": {"$ref": "#/3"}},
        {
            "$type": "ObjectType",
            "name": "CircleShape",
            "properties": {"outlines": {"type": {"$ref": "#/4"}, "flags": 0}},
            "additionalProperties": {"$ref": "#/0"},
        },
        {
            "$type": "DiscriminatedObjectType",
            "name": "Microsoft.Test/shapes",
            "discriminator": "kind",
            "baseProperties": {"name": {"type": {"$ref": "#/0"}, "flags": 1}},
            "elements": {"Circle": {"$ref": "#/5"}},
        },
        {
            "$type": "ResourceType",
            "name": "Microsoft.Test/shapes@2024-01-01",
            "scopeType": 8,
            "body": {"$ref": "#/6"},
        },
    ],
    WIDGETS_PREVIEW: [
        {"$type": "StringType"},
        {
            "$type": "ObjectType",
            "name": "Microsoft.Test/widgets",
            "properties": {"name": {"type": {"$ref": "#/0"}, "flags": 1}},
        },
        {
            "$type": "ResourceType",
            "name": "Microsoft.Test/widgets@2022-09-01-preview",
            "readableScopes": 12,
            "writableScopes": 8,
            "body": {"$ref": "#/1"},
        },
    ],
}


class FakeTypeStore:
    """In-memory stand-in for the bicep-types-az HTTP surface."""

    def __init__(self, documents: dict[str, Any]):
        self.documents = documents
        self.requests: list[str] = []
        self.status_overrides: dict[str, int] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        relative_path = request.url.path.removeprefix("/generated/")
        self.requests.append(relative_path)

        if relative_path in self.status_overrides:
            return httpx.Response(self.status_overrides[relative_path], text="Service Unavailable")
        if relative_path not in self.documents:
            return httpx.Response(404, text="Not Found")

        document = self.documents[relative_path]
        if isinstance(document, str):
            return httpx.Response(200, text=document)
        return httpx.Response(200, json=document)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def request_count(self, relative_path: str | None = None) -> int:
        if relative_path is None:
            return len(self.requests)
        return self.requests.count(relative_path)


class FakeClock:
    """Manually advanced clock for TTL expiry."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def type_store():
    """Fake type store serving a private copy of the sample documents."""
    return FakeTypeStore(copy.deepcopy(SAMPLE_DOCUMENTS))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def type_cache(clock):
    """Type cache with the default 24 hour TTL driven by the fake clock."""
    return TypeCache(timer=clock)


@pytest.fixture
def type_loader(type_cache, type_store):
    return BicepTypeLoader(type_cache, base_url=BASE_URL, transport=type_store.transport)


@pytest.fixture
def resource_visitor(type_loader):
    return ResourceVisitor(type_loader)


@pytest.fixture
def schema_generator(resource_visitor):
    return SchemaGenerator(resource_visitor)
