import os

import pytest
from common.fakes import RecordingProvider

from imagebuilder.container_engine import ContainerEngine
from imagebuilder.core import Context, Loader, Operation, TypeConverter
from imagebuilder.core.exceptions import (
    LoadError,
    NotSupportedError,
    StreamDecodeError,
)
from imagebuilder.pipeline import PipelineConfig

CONFIG = """
variables:
  namespace: allyourbases
engine: Docker
engine_parameters:
  build_timeout: 600
source: ./image
image_name: usethe
image_tag: forks
retention: 90d
push: false
registries:
  - url: reg1.io
    namespace: ${variables.namespace}
    username: ${env.TEST_REGISTRY_USER}
    password: ${env.TEST_REGISTRY_PASSWORD}
  - url: reg2.io
    namespace: team
"""


def test_parse_config(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_REGISTRY_USER", "user1")
    monkeypatch.setenv("TEST_REGISTRY_PASSWORD", "secret1")
    path = os.path.join(tmp_path, "imagebuilder.yaml")
    with open(path, "w") as file:
        file.write(CONFIG)

    config = PipelineConfig.parse(path)

    assert config.engine == "Docker"
    assert config.engine_parameters == {"build_timeout": 600}
    assert config.source == os.path.join(str(tmp_path), "image")
    assert config.request.reference == "usethe:forks"
    assert config.request.retention == "90d"
    assert config.build is True
    assert config.push is False
    first, second = config.registries
    assert first.namespace == "allyourbases"
    assert first.username == "user1"
    assert first.password == "secret1"
    assert second.username == ""
    assert "secret1" not in repr(first)


def test_parse_config_unset_env(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_REGISTRY_USER", raising=False)
    monkeypatch.delenv("TEST_REGISTRY_PASSWORD", raising=False)
    path = os.path.join(tmp_path, "imagebuilder.yaml")
    with open(path, "w") as file:
        file.write(CONFIG)

    config = PipelineConfig.parse(path)

    assert config.registries[0].username == ""
    assert config.registries[0].password == ""


def test_parse_config_missing_file(tmp_path):
    with pytest.raises(LoadError):
        PipelineConfig.parse(os.path.join(tmp_path, "missing.yaml"))


def test_parse_config_not_a_mapping(tmp_path):
    path = os.path.join(tmp_path, "imagebuilder.yaml")
    with open(path, "w") as file:
        file.write("- just\n- a list\n")

    with pytest.raises(LoadError):
        PipelineConfig.parse(path)


def test_resolve_refs(monkeypatch):
    monkeypatch.setenv("TEST_TOKEN", "abc")
    value = {
        "a": "${env.TEST_TOKEN}",
        "b": ["${variables.x}", "plain", 3],
        "c": "prefix ${env.TEST_TOKEN}",
    }

    resolved = Loader.resolve_refs(value, {"x": "${variables.y}", "y": 1})

    assert resolved == {
        "a": "abc",
        "b": [1, "plain", 3],
        "c": "prefix ${env.TEST_TOKEN}",
    }


@pytest.mark.parametrize(
    "value",
    ["${variables.missing}", "${secrets.token}"],
)
def test_resolve_refs_errors(value: str):
    with pytest.raises(LoadError):
        Loader.resolve_refs(value, {})


def test_load_provider_instance():
    provider = Loader.load_provider_instance(
        "imagebuilder.container_engine.providers.docker",
        {"tag_timeout": "30"},
    )

    assert provider.tag_timeout == 30


def test_load_missing_provider():
    with pytest.raises(LoadError):
        Loader.load_provider_instance(
            "imagebuilder.container_engine.providers.rkt"
        )


def test_component_without_provider():
    engine = ContainerEngine()

    with pytest.raises(NotSupportedError):
        engine.tag(source_reference="a:b", destination="r/n/a:b")


def test_provider_without_operation():
    engine = ContainerEngine(__provider__=RecordingProvider())

    with pytest.raises(NotSupportedError):
        engine.__run__("remove")


def test_operation_context():
    provider = RecordingProvider()
    contexts = []
    provider.__setup__ = lambda context=None: contexts.append(context)
    engine = ContainerEngine(__provider__=provider)

    engine.tag(source_reference="a:b", destination="r/n/a:b")
    engine.tag(
        source_reference="a:b",
        destination="r/n/a:b",
        __context__=Context(id="ctx-1"),
    )

    assert contexts[0].id
    assert contexts[1].id == "ctx-1"


def test_operation_normalize():
    operation = Operation.normalize(
        name="push",
        args={
            "self": object(),
            "destination": "r/n/a:b",
            "username": None,
            "kwargs": {"extra": 1},
        },
    )

    assert operation.name == "push"
    assert operation.args == {"destination": "r/n/a:b", "extra": 1}
    assert str(operation) == "push(destination='r/n/a:b', extra=1)"


@pytest.mark.parametrize(
    "value,expected_type,expected",
    [
        ("60", int, 60),
        ("1.5", float, 1.5),
        ("false", bool, False),
        ("yes", bool, True),
        (5, str, "5"),
        ("v1", list[str], "v1"),
        (["v1"], list[str], ["v1"]),
        ("60", int | None, 60),
        ("sixty", int, "sixty"),
    ],
)
def test_convert_value(value, expected_type, expected):
    assert TypeConverter.convert_value(value, expected_type) == expected


def test_with_context_keeps_type():
    error = StreamDecodeError("bad line", line="{x")

    wrapped = error.with_context("error during push", "push", "r/n/a:b")

    assert type(wrapped) is StreamDecodeError
    assert wrapped is not error
    assert wrapped.line == "{x"
    assert wrapped.operation == "push"
    assert wrapped.target == "r/n/a:b"
    assert str(wrapped) == "error during push (bad line)"
    assert error.operation is None
