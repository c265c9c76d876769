"""
Podman provider for container engine. Not supported yet.
"""

__all__ = ["Podman"]

from imagebuilder.core import Provider
from imagebuilder.core.exceptions import UnsupportedEngineError

from .._models import EngineType


class Podman(Provider):
    def __init__(self, **kwargs):
        raise UnsupportedEngineError(EngineType.PODMAN)
