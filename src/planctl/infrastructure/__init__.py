"""Infrastructure layer — JSON project files on disk.

This layer depends on stdlib, pydantic, and the domain layer. It must
never import from services, commands, or output. The service layer
bridges between the engines and persistence.
"""
