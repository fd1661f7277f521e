"""Implementation of list_bicep_api_versions MCP tool."""

import logging

from ..errors import BicepSchemaError
from ..models.schema_models import ListApiVersionsResponse
from ..services.api_version_selector import select_latest_stable, sort_api_versions
from ..services.schema_generator import SchemaGenerator, get_schema_generator

logger = logging.getLogger(__name__)


async def list_bicep_api_versions_impl(
    resource_type: str, generator: SchemaGenerator | None = None
) -> ListApiVersionsResponse:
    """List the API versions published for a resource type, newest first."""
    resource_type = (resource_type or "").strip()
    if not resource_type:
        return ListApiVersionsResponse(
            resource_type=resource_type,
            api_versions=[],
            latest_stable=None,
            success=False,
            error={"code": "INVALID_INPUT", "message": "resource_type is required"},
        )

    generator = generator or get_schema_generator()

    try:
        versions = await generator.resource_visitor.get_resource_api_versions(resource_type)
        return ListApiVersionsResponse(
            resource_type=resource_type,
            api_versions=sort_api_versions(versions),
            latest_stable=select_latest_stable(versions),
            success=True,
        )
    except BicepSchemaError as e:
        logger.error(f"Failed to list API versions for {resource_type}: {e}")
        return ListApiVersionsResponse(
            resource_type=resource_type,
            api_versions=[],
            latest_stable=None,
            success=False,
            error={"code": e.code, "message": str(e)},
        )
