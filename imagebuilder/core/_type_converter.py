import inspect
import json
from typing import Any, get_args, get_origin, get_type_hints


class TypeConverter:
    @staticmethod
    def convert_value(value, expected_type):
        origin = get_origin(expected_type)

        # Optional[T] and T | None
        if origin is not None and type(None) in get_args(expected_type):
            expected_type = next(
                t for t in get_args(expected_type) if t is not type(None)
            )
            origin = get_origin(expected_type)

        if isinstance(value, list) and origin in (list, tuple):
            elem_type = (
                get_args(expected_type)[0] if get_args(expected_type) else Any
            )
            return [TypeConverter.convert_value(v, elem_type) for v in value]

        if isinstance(value, dict) and hasattr(expected_type, "from_dict"):
            return expected_type.from_dict(value)

        try:
            if expected_type is int and isinstance(value, (str, float)):
                return int(value)
            if expected_type is float and isinstance(value, (str, int)):
                return float(value)
            if expected_type is str and isinstance(value, (int, float)):
                return str(value)
            if expected_type is bool and isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on")
            if expected_type is list and isinstance(value, str):
                return [value]
            if expected_type is dict and isinstance(value, str):
                return json.loads(value)
        except (ValueError, TypeError):
            pass  # leave the value for the callee to reject

        return value

    @staticmethod
    def convert_args(method, args: dict) -> dict:
        sig = inspect.signature(method)
        converted_args: dict = {}

        hints = get_type_hints(method)
        for param_name in sig.parameters:
            if param_name in args:
                converted_args[param_name] = TypeConverter.convert_value(
                    args[param_name], hints.get(param_name, None)
                )

        return args | converted_args
