"""Domain layer — date patterns, period arithmetic, references, streams.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
