from typing import Generic, TypeVar

from ._operation import Context
from .data_model import DataModel

T = TypeVar("T")


class Response(DataModel, Generic[T]):
    result: T
    """Result of the provider operation."""

    context: Context | None = None
    """Operation context."""
