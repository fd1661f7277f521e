"""Implementation of get_bicep_resource_schema MCP tool."""

import logging

from ..errors import BicepSchemaError
from ..models.schema_models import GetBicepSchemaResponse
from ..services.schema_generator import SchemaGenerator, get_schema_generator

logger = logging.getLogger(__name__)


async def get_bicep_resource_schema_impl(
    resource_type: str,
    api_version: str | None = None,
    generator: SchemaGenerator | None = None,
) -> GetBicepSchemaResponse:
    """Resolve the Bicep schema of a resource type.

    Args:
        resource_type: Resource type name, e.g. "Microsoft.Storage/storageAccounts"
        api_version: API version to use; latest stable when None
        generator: Schema generator override for testing

    Returns:
        GetBicepSchemaResponse with the flattened types or an error
    """
    resource_type = (resource_type or "").strip()
    api_version = (api_version or "").strip() or None

    if not resource_type:
        return GetBicepSchemaResponse(
            resource_type=resource_type,
            api_version=api_version,
            types=[],
            total_types=0,
            success=False,
            error={"code": "INVALID_INPUT", "message": "resource_type is required"},
        )

    generator = generator or get_schema_generator()
    logger.info(f"Getting Bicep schema for {resource_type} (api_version={api_version or 'latest'})")

    try:
        if api_version is None:
            api_version = await generator.select_api_version(resource_type)
        result = await generator.get_resource_type_definitions(resource_type, api_version)
    except BicepSchemaError as e:
        logger.error(f"Failed to get Bicep schema for {resource_type}: {e}")
        return GetBicepSchemaResponse(
            resource_type=resource_type,
            api_version=api_version,
            types=[],
            total_types=0,
            success=False,
            error={"code": e.code, "message": str(e)},
        )

    complex_types = generator.get_response(result)
    return GetBicepSchemaResponse(
        resource_type=resource_type,
        api_version=api_version,
        types=[complex_type.to_dict() for complex_type in complex_types],
        total_types=len(complex_types),
        success=True,
    )
