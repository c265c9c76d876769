import asyncio
from typing import Any

from ._log_helper import debug
from ._operation import Context, Operation
from ._type_converter import TypeConverter
from .exceptions import NotSupportedError


class Provider:
    __component__: Any
    __type__: str

    def __init__(self, **kwargs):
        self.__type__ = kwargs.pop("__type__", self.__class__.__module__)
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __setup__(self, context: Context | None = None) -> None:
        pass

    def __run__(
        self,
        operation: Operation | None = None,
        context: Context | None = None,
        **kwargs,
    ) -> Any:
        if operation and operation.name:
            func = getattr(self, operation.name, None)
            if func and callable(func):
                debug(
                    "Running %s on %s [%s]",
                    operation.name,
                    self.__type__,
                    context.id if context else None,
                )
                self.__setup__(context=context)
                args = TypeConverter.convert_args(func, operation.args or {})
                return func(**args)
        raise NotSupportedError(
            f"{self.__type__} does not support "
            f"{operation.name if operation else None}"
        )

    async def __arun__(
        self,
        operation: Operation | None = None,
        context: Context | None = None,
        **kwargs,
    ) -> Any:
        if operation and operation.name:
            afunc = getattr(self, f"a{operation.name}", None)
            if afunc and callable(afunc):
                self.__setup__(context=context)
                args = TypeConverter.convert_args(afunc, operation.args or {})
                return await afunc(**args)

        return await asyncio.to_thread(
            self.__run__,
            operation=operation,
            context=context,
            **kwargs,
        )
