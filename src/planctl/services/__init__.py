"""Service layer — project operations returning ServiceResult.

Services may import from domain, formats, and infrastructure layers.
They must never import from commands, output, or config.
"""
