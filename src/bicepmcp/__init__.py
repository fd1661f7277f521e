"""BicepMCP - MCP servers for Bicep authoring."""
