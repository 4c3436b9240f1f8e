"""Domain layer — errors, document shapes, and canonical serialization.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
