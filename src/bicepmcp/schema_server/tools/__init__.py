"""Bicep schema server tools implementations."""

from ..models.schema_models import GetBicepSchemaResponse, ListApiVersionsResponse
from .get_bicep_resource_schema import get_bicep_resource_schema_impl
from .list_bicep_api_versions import list_bicep_api_versions_impl


def register_schema_tools(mcp):
    """Register Bicep schema tools with the MCP server."""

    @mcp.tool
    async def get_bicep_resource_schema(  # noqa: F841
        resource_type: str,
        api_version: str | None = None,
    ) -> GetBicepSchemaResponse:
        """Get the Bicep schema of an Azure resource type.

        Use this tool when:
        - Writing or reviewing a Bicep template that declares an Azure resource
        - You need the exact property names, types and required flags of a resource
        - Checking which properties are read-only or write-only for an API version
        - Looking up the input/output shape of resource functions such as listKeys

        Args:
            resource_type: Resource type name, e.g. "Microsoft.Storage/storageAccounts"
            api_version: API version such as "2023-01-01". Defaults to the latest stable version.

        Example:
            get_bicep_resource_schema("Microsoft.KeyVault/vaults")
            → {"resource_type": "Microsoft.KeyVault/vaults", "api_version": "2023-07-01",
               "types": [{"kind": "resource", "name": "Microsoft.KeyVault/vaults", "properties": [...]},
                         {"kind": "object", "name": "VaultProperties", "properties": [...]}],
               "total_types": 12, "success": true}

            get_bicep_resource_schema("Microsoft.KeyVault/vaults", "1999-01-01")
            → {"types": [], "success": false,
               "error": {"code": "NOT_FOUND", "message": "API version '1999-01-01' not found ..."}}

        Note: Types are ordered resource first, then resource functions, then the other
        object types the resource refers to. Type data is cached for 24 hours.
        """
        return await get_bicep_resource_schema_impl(resource_type, api_version)

    @mcp.tool
    async def list_bicep_api_versions(resource_type: str) -> ListApiVersionsResponse:  # noqa: F841
        """List the API versions available for an Azure resource type.

        Use this tool when:
        - Choosing an API version for a resource in a Bicep template
        - Checking whether a preview API version has a stable successor

        Args:
            resource_type: Resource type name, e.g. "Microsoft.Web/sites"

        Example:
            list_bicep_api_versions("Microsoft.Web/sites")
            → {"api_versions": ["2024-04-01", "2023-12-01", "2023-01-01-preview"],
               "latest_stable": "2024-04-01", "success": true}
        """
        return await list_bicep_api_versions_impl(resource_type)
