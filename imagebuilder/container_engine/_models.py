from imagebuilder.core import DataModel, DataModelField


class EngineType:
    DOCKER = "docker"
    DEFAULT = "default"
    PODMAN = "podman"
    DOCKER_CLI = "docker_cli"

    @staticmethod
    def all() -> list[str]:
        return [
            EngineType.DOCKER,
            EngineType.DEFAULT,
            EngineType.PODMAN,
            EngineType.DOCKER_CLI,
        ]

    @staticmethod
    def normalize(choice: str | None) -> str:
        if not choice:
            return EngineType.DEFAULT
        return choice.strip().lower().replace("-", "_")


class ImageItem(DataModel):
    """Locally built image.

    Attributes:
        name: Image name without tag.
        reference: Working reference, ``name:tag``.
        tags: Tags requested for the build.
        labels: Labels applied to the image.
    """

    name: str
    reference: str
    tags: list[str] = []
    labels: dict[str, str] = {}


class StreamLine(DataModel):
    """Progress line of the engine stream.

    Build streams carry ``stream``; push streams mostly carry
    ``status`` with an optional layer ``id`` and ``progress`` bar.
    """

    stream: str = ""
    status: str = ""
    id: str = ""
    progress: str = ""

    def text(self) -> str:
        if self.stream or not self.status:
            return self.stream
        parts = [f"{self.id}:" if self.id else "", self.status, self.progress]
        return " ".join(p for p in parts if p) + "\n"


class ErrorDetail(DataModel):
    message: str = ""


class ErrorLine(DataModel):
    """Terminal error line of the engine stream."""

    error: str = ""
    error_detail: ErrorDetail | None = DataModelField(
        alias="errorDetail",
        default=None,
    )

    def detail(self) -> str | None:
        if self.error_detail is None:
            return None
        return self.error_detail.message or None


class RegistryAuth(DataModel):
    """Credentials forwarded to the engine for a push."""

    username: str = ""
    password: str = ""
    server_address: str = DataModelField(alias="serveraddress", default="")
