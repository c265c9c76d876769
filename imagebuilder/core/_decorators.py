import inspect
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from ._operation import Operation

T = TypeVar("T", bound=Callable[..., Any])


def operation(**config: Any) -> Callable[[T], T]:
    """Route a component method to the bound provider.

    The decorated method is a stub; its signature names the operation
    arguments. Synchronous methods dispatch through ``__run__`` and
    coroutine methods (named with an ``a`` prefix) through ``__arun__``.
    """

    def decorator(func: T) -> T:
        setattr(func, "__operation__", True)
        setattr(func, "__config__", config)
        sig = inspect.signature(func)

        def _operation(name: str, args: tuple, kwargs: dict) -> Operation:
            bound_args = sig.bind(*args, **kwargs)
            bound_args.apply_defaults()
            locals = dict(bound_args.arguments)
            locals.pop("self", None)
            return Operation.normalize(name=name, args=locals)

        if not inspect.iscoroutinefunction(func):

            @wraps(func)
            def wrapper(*args, **kwargs) -> Any:
                self = args[0]
                context = kwargs.pop("__context__", None)
                operation = _operation(func.__name__, args, kwargs)
                return self.__run__(operation, context)

            return cast(T, wrapper)

        @wraps(func)
        async def awrapper(*args, **kwargs) -> Any:
            self = args[0]
            context = kwargs.pop("__context__", None)
            operation = _operation(func.__name__[1:], args, kwargs)
            return await self.__arun__(operation, context)

        return cast(T, awrapper)

    return decorator
