import inspect
from typing import Any


class SyncAndAsyncClient:
    """Calls the sync or the ``a``-prefixed async operation of a client."""

    client: Any
    async_call: bool

    async def _execute_method(self, **kwargs):
        method_name = inspect.stack()[1].function
        client_method_name = (
            f"a{method_name}" if self.async_call else method_name
        )
        method = getattr(self.client, client_method_name)
        if self.async_call:
            return await method(**kwargs)
        return method(**kwargs)
