from __future__ import annotations

import importlib
import os
import re
from enum import Enum
from typing import Any

from ._provider import Provider
from ._type_converter import TypeConverter
from .exceptions import LoadError

REF_PATTERN = re.compile(r"^\$\{(.+)\}$")


class RefType(str, Enum):
    ENV = "env"
    VARIABLE = "variables"


class Loader:
    @staticmethod
    def load_class(path: str, base: type) -> Any:
        class_name = None
        if ":" in path:
            module_name, class_name = path.split(":", 1)
        else:
            module_name = path
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            if e.name != module_name:
                raise
            raise LoadError(f"{base.__name__} not found at {path}") from e
        if class_name is not None:
            return getattr(module, class_name)
        for value in module.__dict__.get("__all__", []):
            cls = getattr(module, value)
            if isinstance(cls, type) and issubclass(cls, base):
                return cls
        raise LoadError(f"{base.__name__} not found at {module_name}")

    @staticmethod
    def load_provider_instance(
        path: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Provider:
        parameters = parameters or dict()
        if path is None:
            return Provider(**parameters)
        provider = Loader.load_class(path, Provider)
        converted_parameters = TypeConverter.convert_args(
            provider.__init__, parameters
        )
        return provider(**converted_parameters)

    @staticmethod
    def resolve_refs(
        value: Any,
        variables: dict[str, Any] | None = None,
    ) -> Any:
        """Resolve ``${env.NAME}`` and ``${variables.NAME}`` references.

        Dicts and lists are walked recursively. Unset environment
        variables resolve to None.
        """
        if isinstance(value, dict):
            return {
                k: Loader.resolve_refs(v, variables) for k, v in value.items()
            }
        if isinstance(value, list):
            return [Loader.resolve_refs(v, variables) for v in value]
        if not isinstance(value, str):
            return value
        match = REF_PATTERN.match(value)
        if not match:
            return value
        ref = match.group(1)
        prefix, _, param = ref.partition(".")
        if prefix == RefType.ENV.value:
            return os.getenv(param)
        if prefix == RefType.VARIABLE.value:
            variables = variables or dict()
            if param not in variables:
                raise LoadError(f"Variable {param} not defined")
            return Loader.resolve_refs(variables[param], variables)
        raise LoadError(f"Unsupported reference {value}")
