"""Domain layer — identifiers, ACH value objects, capabilities, selection models.

This layer depends only on stdlib and pydantic.
It must never import from services, rails, nacha, plugins, or config.
"""
