from __future__ import annotations

import os
from typing import Any

from pydantic import field_validator

from imagebuilder.container_engine import EngineType
from imagebuilder.core import DataModel, DataModelField, Loader, YamlLoader
from imagebuilder.core.constants import CONFIG_FILE


class Registry(DataModel):
    """Push destination.

    Attributes:
        url: Registry host, e.g. ``quay.io``.
        namespace: Organization or user the image is pushed under.
        username: Registry user. Empty for anonymous push.
        password: Registry password.
    """

    url: str
    namespace: str
    username: str = ""
    password: str = DataModelField(default="", repr=False)

    @field_validator("username", "password", mode="before")
    @classmethod
    def _empty_credentials(cls, value: Any) -> Any:
        # Unset ${env.*} references resolve to None.
        return "" if value is None else value


class BuildRequest(DataModel):
    """Image to build.

    Attributes:
        source: Folder holding the Dockerfile and build context.
        image_name: Image name.
        tags: Image tags. The first one forms the working reference.
        retention: Retention label value, e.g. ``90d``.
    """

    source: str = "."
    image_name: str
    tags: list[str] = DataModelField(min_length=1)
    retention: str = ""

    @property
    def image_tag(self) -> str:
        return self.tags[0]

    @property
    def reference(self) -> str:
        return f"{self.image_name}:{self.image_tag}"


class PipelineResult(DataModel):
    """Stages that ran, in order, and the destinations pushed."""

    built: str | None = None
    tagged: list[str] = []
    pushed: list[str] = []


class PipelineConfig(DataModel):
    """Pipeline configuration file.

    Attributes:
        engine: Container engine backend identifier.
        engine_parameters: Parameters passed to the engine provider.
        source: Folder holding the Dockerfile and build context.
        image_name: Image name.
        image_tag: Image tag.
        retention: Retention label value.
        build: Build the image.
        tag: Tag the image for each registry.
        push: Push the image to each registry.
        registries: Push destinations, in order.
        variables: Values referenced as ``${variables.NAME}``.
    """

    engine: str = EngineType.DOCKER
    engine_parameters: dict[str, Any] = dict()
    source: str = "."
    image_name: str
    image_tag: str = "latest"
    retention: str = ""
    build: bool = True
    tag: bool = True
    push: bool = True
    registries: list[Registry] = []
    variables: dict[str, Any] = dict()

    @field_validator("image_tag")
    @classmethod
    def _check_tag(cls, value: str) -> str:
        if not value:
            raise ValueError("image_tag must not be empty")
        return value

    @property
    def request(self) -> BuildRequest:
        return BuildRequest(
            source=self.source,
            image_name=self.image_name,
            tags=[self.image_tag],
            retention=self.retention,
        )

    @staticmethod
    def parse(path: str = CONFIG_FILE) -> PipelineConfig:
        obj = YamlLoader.load(path=path)
        variables = obj.get("variables") or dict()
        obj = Loader.resolve_refs(obj, variables)
        config = PipelineConfig.from_dict(obj)
        if not os.path.isabs(config.source):
            base = os.path.dirname(os.path.abspath(path))
            config.source = os.path.normpath(os.path.join(base, config.source))
        return config
