"""
Docker provider for container engine.
"""

from __future__ import annotations

__all__ = ["Docker"]

import os
from contextlib import contextmanager
from typing import IO, Any, Callable, Iterable, Iterator

import docker
import requests
import urllib3.exceptions
from docker.errors import DockerException
from docker.utils import parse_repository_tag, tar

from imagebuilder.core import Provider, Response
from imagebuilder.core._log_helper import info, warn
from imagebuilder.core.exceptions import (
    ArchiveError,
    BadRequestError,
    ContainerEngineError,
    DeadlineExceededError,
    EngineCallError,
    StreamReleaseError,
)

from .._auth import encode_registry_auth
from .._config import (
    BUILD_TIMEOUT,
    DOCKERFILE,
    PUSH_TIMEOUT,
    RETENTION_LABEL,
    TAG_TIMEOUT,
)
from .._models import ImageItem
from .._session import Session
from .._stream import ProgressSink, StdoutSink, decode_stream


class Docker(Provider):
    base_url: str | None
    build_timeout: int
    tag_timeout: int
    push_timeout: int
    retention_label: str
    strict_auth: bool
    sink: ProgressSink

    _client_factory: Callable[[int], Any]

    def __init__(
        self,
        base_url: str | None = None,
        build_timeout: int = BUILD_TIMEOUT,
        tag_timeout: int = TAG_TIMEOUT,
        push_timeout: int = PUSH_TIMEOUT,
        retention_label: str = RETENTION_LABEL,
        strict_auth: bool = False,
        sink: ProgressSink | None = None,
        client_factory: Callable[[int], Any] | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            base_url:
                Daemon URL. Uses the DOCKER_HOST environment when None.
            build_timeout:
                Deadline in seconds for a build.
            tag_timeout:
                Deadline in seconds for a tag.
            push_timeout:
                Deadline in seconds for a push.
            retention_label:
                Label key carrying the retention value of built images.
            strict_auth:
                Fail a push when its credentials cannot be encoded,
                instead of pushing without them.
            sink:
                Receives the progress text of build and push streams.
                Defaults to standard output.
            client_factory:
                Creates a Docker client given a timeout in seconds.
        """
        self.base_url = base_url
        self.build_timeout = build_timeout
        self.tag_timeout = tag_timeout
        self.push_timeout = push_timeout
        self.retention_label = retention_label
        self.strict_auth = strict_auth
        self.sink = sink or StdoutSink()
        self._client_factory = client_factory or self._create_client
        super().__init__(**kwargs)

    def build(
        self,
        source: str,
        name: str,
        tags: list[str],
        retention: str = "",
    ) -> Response[ImageItem]:
        if not tags:
            raise BadRequestError(f"No tag given to build {name}")
        image_tag = f"{name}:{tags[0]}"
        labels = {self.retention_label: retention}
        context = self._archive(source)
        info("Building %s from %s", image_tag, source)
        try:
            with Session(
                self._client_factory, self.build_timeout, "build", name
            ) as session:
                with self._translate(f"error building {name}", "build", name):
                    stream = session.client.api.build(
                        fileobj=context,
                        custom_context=True,
                        dockerfile=DOCKERFILE,
                        tag=image_tag,
                        labels=labels,
                        decode=False,
                    )
                self._show(
                    session,
                    stream,
                    f"error for {name} found by container engine during build",
                    "build",
                    name,
                )
        finally:
            context.close()
        result = ImageItem(
            name=name,
            reference=image_tag,
            tags=tags,
            labels=labels,
        )
        return Response(result=result)

    def tag(
        self,
        source_reference: str,
        destination: str,
    ) -> Response[None]:
        repository, tag = parse_repository_tag(destination)
        info("Tagging %s as %s", source_reference, destination)
        with Session(
            self._client_factory, self.tag_timeout, "tag", destination
        ) as session:
            with self._translate(
                f"error tagging {destination}", "tag", destination
            ):
                tagged = session.client.api.tag(
                    source_reference, repository, tag=tag
                )
            if not tagged:
                raise EngineCallError(
                    f"error tagging {destination}",
                    operation="tag",
                    target=destination,
                )
        return Response(result=None)

    def push(
        self,
        destination: str,
        username: str = "",
        password: str = "",
        registry_address: str = "",
    ) -> Response[None]:
        token = encode_registry_auth(
            username,
            password,
            registry_address,
            strict=self.strict_auth,
        )
        info("Pushing %s", destination)
        with Session(
            self._client_factory, self.push_timeout, "push", destination
        ) as session:
            with self._translate(
                f"error pushing {destination}", "push", destination
            ):
                stream = self._push_request(
                    session.client.api, destination, token
                )
            self._show(
                session,
                stream,
                f"error for {destination} found by container engine "
                "during push",
                "push",
                destination,
            )
        return Response(result=None)

    def _create_client(self, timeout: int) -> docker.DockerClient:
        if self.base_url:
            return docker.DockerClient(base_url=self.base_url, timeout=timeout)
        return docker.from_env(timeout=timeout)

    def _archive(self, source: str) -> IO[bytes]:
        if not os.path.isdir(source):
            raise ArchiveError(
                f"error archiving {source} (not a directory)",
                operation="build",
                target=source,
            )
        try:
            return tar(source)
        except (OSError, DockerException) as e:
            raise ArchiveError(
                f"error archiving {source} ({e})",
                operation="build",
                target=source,
            ) from e

    def _push_request(
        self,
        api: Any,
        destination: str,
        token: str,
    ) -> _ResponseStream:
        # APIClient.push only takes a dict and encodes it itself, so
        # the pre-encoded token goes through the lower level request.
        repository, tag = parse_repository_tag(destination)
        response = api._post_json(
            api._url("/images/{0}/push", repository),
            None,
            headers={"X-Registry-Auth": token},
            params={"tag": tag},
            stream=True,
        )
        try:
            api._raise_for_status(response)
        except Exception:
            response.close()
            raise
        return _ResponseStream(
            api._stream_helper(response, decode=False), response
        )

    def _show(
        self,
        session: Session,
        stream: Iterable[bytes] | None,
        message: str,
        operation: str,
        target: str,
    ) -> None:
        if stream is None:
            return
        failed = True
        try:
            decode_stream(session.watch(stream), self.sink)
            failed = False
        except ContainerEngineError as e:
            raise e.with_context(message, operation, target) from e
        finally:
            self._release(stream, operation, target, failed)

    def _release(
        self,
        stream: Iterable[bytes],
        operation: str,
        target: str,
        failed: bool,
    ) -> None:
        close = getattr(stream, "close", None)
        if close is None:
            return
        try:
            close()
        except (
            OSError,
            DockerException,
            urllib3.exceptions.HTTPError,
        ) as e:
            if not failed:
                raise StreamReleaseError(
                    f"error closing image {operation} response ({e})",
                    operation=operation,
                    target=target,
                ) from e
            warn("Error closing %s response for %s: %s", operation, target, e)

    @contextmanager
    def _translate(
        self,
        message: str,
        operation: str,
        target: str,
    ) -> Iterator[None]:
        try:
            yield
        except requests.exceptions.Timeout as e:
            raise DeadlineExceededError(
                f"{message} (timed out: {e})",
                operation=operation,
                target=target,
            ) from e
        except (DockerException, requests.exceptions.RequestException) as e:
            raise EngineCallError(
                f"{message} ({e})",
                operation=operation,
                target=target,
            ) from e


class _ResponseStream:
    """Push stream that also closes the HTTP response on release."""

    def __init__(self, chunks: Iterator[bytes], response: Any):
        self.chunks = chunks
        self.response = response

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.chunks)

    def close(self) -> None:
        close = getattr(self.chunks, "close", None)
        if close is not None:
            close()
        self.response.close()
