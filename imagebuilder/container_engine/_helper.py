from typing import Any

from imagebuilder.core.exceptions import UnsupportedEngineError

from ._models import EngineType
from .component import ContainerEngine


def create_container_engine(
    choice: str | None = EngineType.DOCKER,
    **parameters: Any,
) -> ContainerEngine:
    """Create the container engine for a backend identifier.

    Identifiers are case insensitive and ``-`` matches ``_``. Podman and
    the Docker CLI are recognised but rejected.

    Raises:
        UnsupportedEngineError: The backend is not implemented or not
            known.
    """
    engine = EngineType.normalize(choice)
    if engine not in EngineType.all():
        raise UnsupportedEngineError(
            engine, f"unknown container engine {choice}"
        )
    return ContainerEngine(
        __provider__=dict(type=engine, parameters=parameters),
    )
