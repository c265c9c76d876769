import json
import os

import pytest
from common.fakes import RecordingProvider

from imagebuilder import main as cli
from imagebuilder.container_engine import ContainerEngine
from imagebuilder.core.exceptions import EngineReportedError


@pytest.fixture
def provider(monkeypatch):
    provider = RecordingProvider()
    engines = []

    def create_container_engine(choice, **parameters):
        engines.append((choice, parameters))
        return ContainerEngine(__provider__=provider)

    monkeypatch.setattr(cli, "create_container_engine", create_container_engine)
    provider.engines = engines
    return provider


@pytest.mark.parametrize("command", ["run", "arun"])
def test_run_with_flags(provider, monkeypatch, capsys, command: str):
    monkeypatch.setenv(cli.USERNAME_ENV, "user1")
    monkeypatch.setenv(cli.PASSWORD_ENV, "secret1")

    code = cli.main(
        [
            command,
            "--source",
            "./image",
            "--name",
            "usethe",
            "--tag",
            "forks",
            "--retention",
            "90d",
            "--registry-url",
            "reg1.io",
            "--namespace",
            "allyourbases",
        ]
    )

    assert code == 0
    destination = "reg1.io/allyourbases/usethe:forks"
    assert provider.calls == [
        ("build", "./image", "usethe", ["forks"], "90d"),
        ("tag", "usethe:forks", destination),
        ("push", destination, "user1", "secret1", "reg1.io"),
    ]
    assert provider.engines == [("docker", {})]
    output = json.loads(capsys.readouterr().out)
    assert output["pushed"] == [destination]


def test_run_with_config(provider, tmp_path, capsys):
    path = os.path.join(tmp_path, "imagebuilder.yaml")
    with open(path, "w") as file:
        file.write(
            "engine: docker\n"
            "engine_parameters:\n"
            "  push_timeout: 60\n"
            "image_name: usethe\n"
            "image_tag: forks\n"
            "registries:\n"
            "  - url: reg1.io\n"
            "    namespace: allyourbases\n"
        )

    code = cli.main(["run", "--config", path, "--no-build", "--tag", "v2"])

    assert code == 0
    assert provider.engines == [("docker", {"push_timeout": 60})]
    assert [call[0] for call in provider.calls] == ["tag", "push"]
    assert provider.calls[0] == (
        "tag",
        "usethe:v2",
        "reg1.io/allyourbases/usethe:v2",
    )


def test_run_failure(provider, capsys):
    provider.errors["build"] = EngineReportedError("COPY failed")

    code = cli.main(["run", "--name", "usethe", "--no-push"])

    assert code == 1
    assert "EngineReportedError: COPY failed" in capsys.readouterr().err
    assert [call[0] for call in provider.calls] == ["build"]


def test_run_requires_name(capsys):
    code = cli.main(["run"])

    assert code == 1
    assert "LoadError" in capsys.readouterr().err


def test_run_unsupported_engine(capsys):
    code = cli.main(["run", "--name", "usethe", "--engine", "podman"])

    assert code == 1
    assert "podman is not supported yet" in capsys.readouterr().err


def test_registry_url_requires_namespace(provider, capsys):
    code = cli.main(
        ["run", "--name", "usethe", "--registry-url", "reg1.io"]
    )

    assert code == 1
    assert "--namespace is required" in capsys.readouterr().err
    assert provider.calls == []


def test_run_rejects_empty_tag(provider, capsys):
    code = cli.main(["run", "--name", "usethe", "--tag", ""])

    assert code == 1
    assert "image_tag must not be empty" in capsys.readouterr().err
    assert provider.calls == []
