"""Resolution of a resource type's full type graph."""

import logging
from collections import deque

from ..errors import UnknownApiVersionError, UnknownResourceTypeError
from ..models.bicep_types import (
    COMPLEX_TYPES,
    CrossFileTypeReference,
    ResourceFunctionType,
    ResourceType,
    TypeNode,
    type_references,
)
from ..models.schema_models import TypesDefinitionResult
from .api_version_selector import sort_api_versions
from .type_formatter import TypeFormatter
from .type_loader import BicepTypeLoader

logger = logging.getLogger(__name__)


class ResourceVisitor:
    """Walks the cross-file reference graph rooted at one resource type."""

    def __init__(self, type_loader: BicepTypeLoader):
        self.type_loader = type_loader

    async def get_resource_api_versions(self, resource_type_name: str) -> set[str]:
        """Get every API version the index lists for a resource type.

        Raises:
            UnknownResourceTypeError: If the resource type is not in the index
        """
        type_index = await self.type_loader.load_type_index()
        versions = type_index.get_api_versions(resource_type_name)
        if not versions:
            raise UnknownResourceTypeError(resource_type_name)
        return versions

    async def load_single_resource(self, resource_type_name: str, api_version: str) -> TypesDefinitionResult:
        """Resolve a resource type and everything reachable from it.

        Each distinct reference is resolved once per call, so cycles terminate
        and shared nodes appear once in the result. Nothing is returned unless
        every reachable reference resolves.

        Raises:
            UnknownResourceTypeError: If the resource type is not in the index
            UnknownApiVersionError: If the index has no entry for the API version
        """
        type_index = await self.type_loader.load_type_index()
        entries = type_index.find_resource(resource_type_name)
        if entries is None:
            raise UnknownResourceTypeError(resource_type_name)

        root_reference = next((ref for version, ref in entries if version == api_version), None)
        if root_reference is None:
            available = sort_api_versions(version for version, _ in entries)
            raise UnknownApiVersionError(resource_type_name, api_version, available)

        logger.info(f"Resolving {resource_type_name}@{api_version} from {root_reference}")

        resolved: dict[str, TypeNode] = {}
        pending: deque[CrossFileTypeReference] = deque()

        root = await self.type_loader.load_resource_type(root_reference)
        resolved[str(root_reference)] = root
        pending.extend(type_references(root))

        for function_reference in type_index.get_resource_functions(resource_type_name, api_version):
            if str(function_reference) in resolved:
                continue
            function_type = await self.type_loader.load_resource_function_type(function_reference)
            resolved[str(function_reference)] = function_type
            pending.extend(type_references(function_type))

        while pending:
            reference = pending.popleft()
            key = str(reference)
            if key in resolved:
                continue
            logger.debug(f"Visiting {key}")
            node = await self.type_loader.load_type(reference)
            resolved[key] = node
            pending.extend(type_references(node))

        result = self._build_result(resolved)
        stats = self.type_loader.cache.get_stats()
        logger.info(
            f"Resolved {resource_type_name}@{api_version}: {len(resolved)} types visited, "
            f"{len(result.other_complex_type_entities)} complex types, "
            f"cache hit rate {stats['hit_rate']:.0%} over {stats['entries']} entries"
        )
        return result

    def _build_result(self, resolved: dict[str, TypeNode]) -> TypesDefinitionResult:
        formatter = TypeFormatter(resolved)
        result = TypesDefinitionResult()

        for key, node in resolved.items():
            if isinstance(node, ResourceType):
                result.resource_type_entities.append(formatter.to_resource_entity(node))
            elif isinstance(node, ResourceFunctionType):
                result.resource_function_type_entities.append(formatter.to_function_entity(node))
            elif isinstance(node, COMPLEX_TYPES) and key not in formatter.lifted_bodies:
                result.other_complex_type_entities.append(formatter.to_complex_type(node))

        return result
