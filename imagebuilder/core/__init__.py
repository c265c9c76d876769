from ._component import Component
from ._decorators import operation
from ._loader import Loader
from ._log_helper import warn
from ._operation import Context, Operation
from ._provider import Provider
from ._response import Response
from ._type_converter import TypeConverter
from ._yaml_loader import YamlLoader
from .data_model import DataModel, DataModelField

__all__ = [
    "Component",
    "Context",
    "DataModel",
    "DataModelField",
    "Loader",
    "Operation",
    "Provider",
    "Response",
    "TypeConverter",
    "YamlLoader",
    "operation",
    "warn",
]
