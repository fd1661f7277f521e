"""Bicep Schema MCP Server - Azure resource type schemas for Bicep authoring."""

import logging
import sys
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from .config import get_config
from .services.schema_generator import close_schema_generator
from .tools import register_schema_tools

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def schema_lifespan(server: FastMCP):
    """Close the shared type store client when the server stops."""
    try:
        yield {}
    finally:
        await close_schema_generator()


# Initialize the Bicep Schema MCP server
mcp = FastMCP(
    name="BicepMCP Schema Server",
    version=__version__,
    lifespan=schema_lifespan,
    instructions="""
        Bicep schema server provides Azure resource type schemas from the published Bicep type definitions:

        Core Tools:
        - get_bicep_resource_schema: Full schema of a resource type for one API version
        - list_bicep_api_versions: API versions available for a resource type

        Features:
        - Latest stable API version chosen automatically when none is given
        - Nested object types resolved across type files and deduplicated
        - Read-only, write-only and required property flags
        - Resource functions such as listKeys with their input and output types
        - Type data cached in memory for 24 hours

        Best Practices:
        - Call get_bicep_resource_schema before writing a resource declaration
        - Pin api_version when editing a template that already declares one
        - Use list_bicep_api_versions to find a stable replacement for preview versions
    """,
)

# Register all schema tools
register_schema_tools(mcp)


def main():
    """Entry point for the Bicep schema server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = get_config()
    logging.getLogger().setLevel(getattr(logging, config.log_level))
    logger.info(f"Starting {config.server_name} with types from {config.types_base_url}")

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)


if __name__ == "__main__":
    main()
