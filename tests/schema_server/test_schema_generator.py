"""Tests for schema generation and response assembly."""

import pytest

from bicepmcp.schema_server.config import SchemaServerConfig
from bicepmcp.schema_server.models.schema_models import (
    ComplexType,
    ResourceFunctionTypeEntity,
    ResourceTypeEntity,
    TypesDefinitionResult,
)
from bicepmcp.schema_server.services import schema_generator as schema_generator_module
from bicepmcp.schema_server.services.schema_generator import (
    SchemaGenerator,
    get_schema_generator,
    reset_schema_generator,
    set_schema_generator,
)
from bicepmcp.schema_server.services.type_cache import TypeCache


class TestGetResourceTypeDefinitions:
    """Test resolution with and without an explicit API version."""

    @pytest.mark.asyncio
    async def test_explicit_version(self, schema_generator):
        result = await schema_generator.get_resource_type_definitions("Microsoft.Test/widgets", "2021-04-01")

        assert result.resource_type_entities[0].api_version == "2021-04-01"

    @pytest.mark.asyncio
    async def test_defaults_to_latest_stable(self, schema_generator):
        result = await schema_generator.get_resource_type_definitions("Microsoft.Test/widgets")

        assert result.resource_type_entities[0].api_version == "2023-01-01"

    @pytest.mark.asyncio
    async def test_preview_only_resource_selects_preview(self, schema_generator):
        assert await schema_generator.select_api_version("Microsoft.Test/gadgets") == "2021-04-01-preview"

    @pytest.mark.asyncio
    async def test_response_order(self, schema_generator):
        result = await schema_generator.get_resource_type_definitions("Microsoft.Test/widgets", "2023-01-01")
        response = SchemaGenerator.get_response(result)

        assert len(response) == 6
        assert [entry.kind for entry in response] == [
            "resource",
            "resourceFunction",
            "resourceFunction",
            "object",
            "object",
            "object",
        ]
        assert [entry.name for entry in response] == [
            "Microsoft.Test/widgets",
            "listKeys",
            "listSecrets",
            "ListKeysResult",
            "WidgetProperties",
            "ChildSettings",
        ]


class TestGetResponse:
    """Test concatenation of a resolution result."""

    def test_concatenates_without_deduplication(self):
        shared = ComplexType(name="Shared")
        result = TypesDefinitionResult(
            resource_type_entities=[ResourceTypeEntity(name="A/b")],
            resource_function_type_entities=[ResourceFunctionTypeEntity(name="listKeys")],
            other_complex_type_entities=[shared, shared],
        )

        response = SchemaGenerator.get_response(result)

        assert [entry.name for entry in response] == ["A/b", "listKeys", "Shared", "Shared"]

    def test_empty_result(self):
        assert SchemaGenerator.get_response(TypesDefinitionResult()) == []


class TestGlobalGenerator:
    """Test the process-wide generator accessors."""

    def setup_method(self):
        reset_schema_generator()

    def teardown_method(self):
        reset_schema_generator()

    def test_set_and_get(self, schema_generator):
        set_schema_generator(schema_generator)

        assert get_schema_generator() is schema_generator

    def test_created_from_config(self, monkeypatch):
        config = SchemaServerConfig(types_base_url="https://mirror.example.test/types", cache_ttl=120)
        monkeypatch.setattr(schema_generator_module, "get_config", lambda: config)

        generator = get_schema_generator()

        assert generator is get_schema_generator()
        loader = generator.resource_visitor.type_loader
        assert loader.base_url == "https://mirror.example.test/types"
        assert loader.cache.ttl == 120

    def test_from_config_uses_given_cache(self):
        cache = TypeCache()

        generator = SchemaGenerator.from_config(SchemaServerConfig(file_cache_enabled=False), cache)

        loader = generator.resource_visitor.type_loader
        assert loader.cache is cache
        assert loader.file_cache_enabled is False
