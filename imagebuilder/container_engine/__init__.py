from ._auth import encode_registry_auth
from ._config import BUILD_TIMEOUT, PUSH_TIMEOUT, RETENTION_LABEL, TAG_TIMEOUT
from ._helper import create_container_engine
from ._models import EngineType, ErrorLine, ImageItem, StreamLine
from ._stream import ProgressSink, StdoutSink, decode_stream
from .component import ContainerEngine

__all__ = [
    "ContainerEngine",
    "EngineType",
    "ErrorLine",
    "ImageItem",
    "ProgressSink",
    "StdoutSink",
    "StreamLine",
    "create_container_engine",
    "decode_stream",
    "encode_registry_auth",
    "BUILD_TIMEOUT",
    "PUSH_TIMEOUT",
    "RETENTION_LABEL",
    "TAG_TIMEOUT",
]
