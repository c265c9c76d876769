import yaml

from .exceptions import LoadError


class YamlLoader:
    @staticmethod
    def load(path: str) -> dict:
        try:
            with open(path, "r") as file:
                obj = yaml.safe_load(file)
        except OSError as e:
            raise LoadError(f"Unable to read {path}") from e
        except yaml.YAMLError as e:
            raise LoadError(f"Invalid YAML in {path}") from e
        if obj is None:
            return dict()
        if not isinstance(obj, dict):
            raise LoadError(f"{path} must contain a mapping")
        return obj
