"""Infrastructure layer — document storage and the NetworkX projection.

This layer depends on stdlib, third-party libs (NetworkX, pydantic), and
the domain models it stores. It must never import from services,
commands, or output.
"""
