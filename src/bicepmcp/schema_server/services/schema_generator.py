"""Top-level schema generation for a resource type."""

import logging

from ..config import SchemaServerConfig, get_config
from ..models.schema_models import ComplexType, TypesDefinitionResult
from .api_version_selector import select_latest_stable
from .resource_visitor import ResourceVisitor
from .type_cache import TypeCache
from .type_loader import BicepTypeLoader

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """Resolves a resource type into a flat, ordered list of complex types."""

    def __init__(self, resource_visitor: ResourceVisitor):
        self.resource_visitor = resource_visitor

    @classmethod
    def from_config(cls, config: SchemaServerConfig, cache: TypeCache | None = None) -> "SchemaGenerator":
        """Wire cache, loader and visitor from configuration."""
        if cache is None:
            cache = TypeCache(ttl=config.cache_ttl, max_size=config.cache_max_size)
        loader = BicepTypeLoader.from_config(config, cache)
        return cls(ResourceVisitor(loader))

    async def get_resource_type_definitions(
        self, resource_type_name: str, api_version: str | None = None
    ) -> TypesDefinitionResult:
        """Resolve a resource type, choosing the latest stable API version when none is given."""
        if not api_version:
            api_version = await self.select_api_version(resource_type_name)
            logger.info(f"Selected API version {api_version} for {resource_type_name}")

        return await self.resource_visitor.load_single_resource(resource_type_name, api_version)

    async def select_api_version(self, resource_type_name: str) -> str:
        versions = await self.resource_visitor.get_resource_api_versions(resource_type_name)
        return select_latest_stable(versions)

    async def close(self) -> None:
        await self.resource_visitor.type_loader.close()

    @staticmethod
    def get_response(result: TypesDefinitionResult) -> list[ComplexType]:
        """Concatenate resources, then resource functions, then other complex types."""
        all_complex_types: list[ComplexType] = []
        all_complex_types.extend(result.resource_type_entities)
        all_complex_types.extend(result.resource_function_type_entities)
        all_complex_types.extend(result.other_complex_type_entities)
        return all_complex_types


# Global generator instance
_schema_generator: SchemaGenerator | None = None


def get_schema_generator() -> SchemaGenerator:
    """Get the process-wide schema generator, creating it from configuration."""
    global _schema_generator
    if _schema_generator is None:
        _schema_generator = SchemaGenerator.from_config(get_config())
    return _schema_generator


def set_schema_generator(generator: SchemaGenerator) -> None:
    global _schema_generator
    _schema_generator = generator


def reset_schema_generator() -> None:
    global _schema_generator
    _schema_generator = None


async def close_schema_generator() -> None:
    """Close the HTTP client of the process-wide generator, if one was created."""
    if _schema_generator is not None:
        await _schema_generator.close()
