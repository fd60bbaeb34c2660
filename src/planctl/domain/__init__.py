"""Domain layer: record models, tree engine, and pure rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
