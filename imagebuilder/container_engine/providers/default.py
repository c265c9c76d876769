"""
Default provider for container engine.
"""

__all__ = ["Default"]


from .docker import Docker


class Default(Docker):
    pass
