from common.fakes import FakeDockerClient, ListSink
from common.sync_and_async_client import SyncAndAsyncClient

from imagebuilder.container_engine import ContainerEngine
from imagebuilder.container_engine.providers.docker import Docker


def get_component(
    docker_client: FakeDockerClient,
    sink: ListSink,
    **parameters,
) -> ContainerEngine:
    return ContainerEngine(
        __provider__=Docker(
            sink=sink,
            client_factory=docker_client.factory,
            **parameters,
        )
    )


class ContainerEngineClient(SyncAndAsyncClient):
    def __init__(self, async_call: bool, **parameters):
        self.docker_client = FakeDockerClient()
        self.sink = ListSink()
        self.client = get_component(self.docker_client, self.sink, **parameters)
        self.async_call = async_call

    @property
    def api(self):
        return self.docker_client.api

    async def build(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def tag(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def push(self, **kwargs):
        return await self._execute_method(**kwargs)
