from imagebuilder.core import Component, Response, operation

from ._models import ImageItem


class ContainerEngine(Component):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)

    @operation()
    def build(
        self,
        source: str,
        name: str,
        tags: list[str],
        retention: str | None = None,
        **kwargs,
    ) -> Response[ImageItem]:
        """Build an image from a source folder.

        Args:
            source:
                Folder archived as the build context.
                Assumes the folder has a Dockerfile.
            name:
                Image name.
            tags:
                Image tags. The first one forms the working reference
                ``name:tags[0]``.
            retention:
                Retention label value, e.g. ``90d``.

        Returns:
            Built image.
        """
        ...

    @operation()
    def tag(
        self,
        source_reference: str,
        destination: str,
        **kwargs,
    ) -> Response[None]:
        """Add a reference to an existing local image.

        Args:
            source_reference:
                Existing image reference.
            destination:
                New reference, ``registry/namespace/name:tag``.
        """
        ...

    @operation()
    def push(
        self,
        destination: str,
        username: str | None = None,
        password: str | None = None,
        registry_address: str | None = None,
        **kwargs,
    ) -> Response[None]:
        """Push an image reference to its registry.

        Args:
            destination:
                Reference to push.
            username:
                Registry user. Empty for anonymous push.
            password:
                Registry password.
            registry_address:
                Registry the credentials belong to.
        """
        ...

    @operation()
    async def abuild(
        self,
        source: str,
        name: str,
        tags: list[str],
        retention: str | None = None,
        **kwargs,
    ) -> Response[ImageItem]:
        """Build an image from a source folder.

        Args:
            source:
                Folder archived as the build context.
                Assumes the folder has a Dockerfile.
            name:
                Image name.
            tags:
                Image tags. The first one forms the working reference
                ``name:tags[0]``.
            retention:
                Retention label value, e.g. ``90d``.

        Returns:
            Built image.
        """
        ...

    @operation()
    async def atag(
        self,
        source_reference: str,
        destination: str,
        **kwargs,
    ) -> Response[None]:
        """Add a reference to an existing local image.

        Args:
            source_reference:
                Existing image reference.
            destination:
                New reference, ``registry/namespace/name:tag``.
        """
        ...

    @operation()
    async def apush(
        self,
        destination: str,
        username: str | None = None,
        password: str | None = None,
        registry_address: str | None = None,
        **kwargs,
    ) -> Response[None]:
        """Push an image reference to its registry.

        Args:
            destination:
                Reference to push.
            username:
                Registry user. Empty for anonymous push.
            password:
                Registry password.
            registry_address:
                Registry the credentials belong to.
        """
        ...
