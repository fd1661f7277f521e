"""Remote loader for the bicep-types-az type index and type files."""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from ..config import DEFAULT_TYPES_BASE_URL, SchemaServerConfig
from ..errors import InvalidReferenceError, RemoteFetchError, TypeMismatchError, TypeParseError
from ..models.bicep_types import (
    CrossFileTypeReference,
    ResourceFunctionType,
    ResourceType,
    TypeIndex,
    TypeNode,
    parse_type_nodes,
)
from .type_cache import TypeCache

logger = logging.getLogger(__name__)

TYPE_INDEX_CACHE_KEY = "bicep_az_type_index"
RESOURCE_TYPE_CACHE_KEY_PREFIX = "bicep_az_resource_type_"
FUNCTION_TYPE_CACHE_KEY_PREFIX = "bicep_az_function_type_"
TYPE_CACHE_KEY_PREFIX = "bicep_az_type_"
TYPE_FILE_CACHE_KEY_PREFIX = "bicep_az_type_file_"


class BicepTypeLoader:
    """Fetches Bicep type data over HTTP and serves it through a TypeCache.

    Every ``load_*`` method checks the cache under a key made of a role prefix
    and the reference's canonical string, so the same node resolved in two roles
    is cached twice. With ``file_cache_enabled`` the parsed node array of each
    file is cached as well, and several indices of one file cost one request.
    Requests share one ``httpx.AsyncClient``, opened on first use.
    """

    def __init__(
        self,
        cache: TypeCache,
        base_url: str = DEFAULT_TYPES_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        file_cache_enabled: bool = True,
    ):
        """Initialize the type loader.

        Args:
            cache: Cache shared with other loaders in the process
            base_url: Root URL that index.json and type file paths are relative to
            timeout: Per-request timeout in seconds
            transport: HTTP transport override (mock transports in tests)
            file_cache_enabled: Cache parsed type files in addition to single nodes
        """
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.file_cache_enabled = file_cache_enabled
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(
        cls,
        config: SchemaServerConfig,
        cache: TypeCache,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "BicepTypeLoader":
        return cls(
            cache,
            base_url=config.types_base_url,
            timeout=config.request_timeout,
            transport=transport,
            file_cache_enabled=config.file_cache_enabled,
        )

    @property
    def type_index_url(self) -> str:
        return f"{self.base_url}/index.json"

    def get_type_url(self, relative_path: str) -> str:
        return f"{self.base_url}/{relative_path.lstrip('/')}"

    async def load_type_index(self) -> TypeIndex:
        """Load the type index, fetching it when the cached copy has expired.

        Raises:
            RemoteFetchError: If the index cannot be retrieved
            TypeParseError: If the index document is malformed
        """
        cached_index = self.cache.get(TYPE_INDEX_CACHE_KEY)
        if cached_index is not None:
            logger.debug("Type index served from cache")
            return cached_index

        url = self.type_index_url
        logger.info(f"Fetching type index from {url}")
        data = await self._fetch_json(url)

        try:
            type_index = TypeIndex.from_document(data)
        except TypeParseError as e:
            logger.error(f"Failed to parse type index from {url}: {e}")
            e.url = url
            raise

        self.cache.set(TYPE_INDEX_CACHE_KEY, type_index)
        return type_index

    async def load_resource_type(self, reference: CrossFileTypeReference) -> ResourceType:
        """Resolve a reference that must point at a ResourceType node."""
        return await self._load_typed(reference, RESOURCE_TYPE_CACHE_KEY_PREFIX, ResourceType)

    async def load_resource_function_type(self, reference: CrossFileTypeReference) -> ResourceFunctionType:
        """Resolve a reference that must point at a ResourceFunctionType node."""
        return await self._load_typed(reference, FUNCTION_TYPE_CACHE_KEY_PREFIX, ResourceFunctionType)

    async def load_type(self, reference: CrossFileTypeReference) -> TypeNode:
        """Resolve a reference to whatever node it points at."""
        return await self._load_typed(reference, TYPE_CACHE_KEY_PREFIX, None)

    async def _load_typed(self, reference: CrossFileTypeReference, prefix: str, expected: type | None) -> Any:
        if reference is None:
            raise ValueError("reference cannot be None")

        cache_key = f"{prefix}{reference}"
        cached_type = self.cache.get(cache_key)
        if cached_type is not None:
            logger.debug(f"Cache hit for {cache_key}")
            return cached_type

        type_node = await self._load_type_from_remote(reference)
        if expected is not None and not isinstance(type_node, expected):
            raise TypeMismatchError(reference, expected.__name__, type(type_node).__name__)

        self.cache.set(cache_key, type_node)
        return type_node

    async def _load_type_from_remote(self, reference: CrossFileTypeReference) -> TypeNode:
        type_nodes = await self._load_type_file(reference.relative_path)
        if reference.index >= len(type_nodes):
            raise InvalidReferenceError(reference, len(type_nodes))
        return type_nodes[reference.index]

    async def _load_type_file(self, relative_path: str) -> Sequence[TypeNode]:
        file_cache_key = f"{TYPE_FILE_CACHE_KEY_PREFIX}{relative_path}"
        if self.file_cache_enabled:
            cached_nodes = self.cache.get(file_cache_key)
            if cached_nodes is not None:
                logger.debug(f"Type file {relative_path} served from cache")
                return cached_nodes

        url = self.get_type_url(relative_path)
        logger.info(f"Fetching types from {url}")
        data = await self._fetch_json(url)

        try:
            type_nodes = parse_type_nodes(data, relative_path)
        except TypeParseError as e:
            logger.error(f"Failed to deserialize types from {url}: {e}")
            e.url = url
            raise

        if self.file_cache_enabled:
            # Tuples keep the cached file immutable
            type_nodes = tuple(type_nodes)
            self.cache.set(file_cache_key, type_nodes)
        return type_nodes

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(transport=self._transport, timeout=self.timeout, follow_redirects=True)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client; the next fetch opens a new one."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _fetch_json(self, url: str) -> Any:
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise RemoteFetchError(url, reason=str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(f"Failed to fetch {url}. Status code: {response.status_code}")
            raise RemoteFetchError(url, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Response from {url} is not valid JSON: {e}")
            raise TypeParseError(f"Failed to deserialize JSON from {url}", url=url) from e
