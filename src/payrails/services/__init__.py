"""Service layer — selection, validation, and ServiceResult facades.

Services may import from domain, nacha, rails, config, and plugins.
They must never import from commands or output.
"""
