"""Bicep schema server: resolves Azure resource type schemas."""
