"""
Docker CLI provider for container engine. Not supported yet.
"""

__all__ = ["DockerCLI"]

from imagebuilder.core import Provider
from imagebuilder.core.exceptions import UnsupportedEngineError

from .._models import EngineType


class DockerCLI(Provider):
    def __init__(self, **kwargs):
        raise UnsupportedEngineError(
            EngineType.DOCKER_CLI, "docker CLI is not supported yet"
        )
