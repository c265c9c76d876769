import argparse
import asyncio
import logging
import os
import sys

from pydantic import ValidationError

from imagebuilder.container_engine import EngineType, create_container_engine
from imagebuilder.core.constants import ROOT_PACKAGE_NAME
from imagebuilder.core.exceptions import BaseError, LoadError
from imagebuilder.pipeline import (
    PipelineConfig,
    PipelineResult,
    Registry,
    abuild_and_push,
    build_and_push,
)

USERNAME_ENV = "IMAGEBUILDER_REGISTRY_USERNAME"
PASSWORD_ENV = "IMAGEBUILDER_REGISTRY_PASSWORD"


def load_config(args: argparse.Namespace) -> PipelineConfig:
    """
    Pipeline config from --config, overridden by flags
    """
    if args.config:
        config = PipelineConfig.parse(args.config)
    elif args.name:
        config = PipelineConfig(image_name=args.name)
    else:
        raise LoadError("Either --config or --name is required")
    overrides = {
        key: value
        for key, value in {
            "engine": args.engine,
            "source": args.source,
            "image_name": args.name,
            "image_tag": args.tag,
            "retention": args.retention,
        }.items()
        if value is not None
    }
    if args.no_build:
        overrides["build"] = False
    if args.no_tag:
        overrides["tag"] = False
    if args.no_push:
        overrides["push"] = False
    if args.registry_url:
        if not args.namespace:
            raise LoadError("--namespace is required with --registry-url")
        overrides["registries"] = [
            Registry(
                url=args.registry_url,
                namespace=args.namespace,
                username=os.getenv(USERNAME_ENV, ""),
                password=os.getenv(PASSWORD_ENV, ""),
            ).to_dict()
        ]
    return PipelineConfig.from_dict({**config.to_dict(), **overrides})


def run(config: PipelineConfig) -> PipelineResult:
    """
    imagebuilder Run
    """
    engine = create_container_engine(
        config.engine, **config.engine_parameters
    )
    return build_and_push(engine, config)


async def arun(config: PipelineConfig) -> PipelineResult:
    """
    imagebuilder Run Async
    """
    engine = create_container_engine(
        config.engine, **config.engine_parameters
    )
    return await abuild_and_push(engine, config)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog=ROOT_PACKAGE_NAME,
        description="Build, tag and push container images",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    run_parser = subparsers.add_parser("run", help="Run the image pipeline")
    arun_parser = subparsers.add_parser(
        "arun", help="Run the image pipeline in async mode"
    )
    run_parser_arguments = [
        ("--config", str, None, "Pipeline config file"),
        ("--engine", str, None, f"Container engine ({EngineType.DOCKER})"),
        ("--source", str, None, "Folder holding the Dockerfile"),
        ("--name", str, None, "Image name"),
        ("--tag", str, None, "Image tag"),
        ("--retention", str, None, "Retention label value, e.g. 90d"),
        ("--registry-url", str, None, "Registry to tag and push to"),
        ("--namespace", str, None, "Registry namespace"),
        ("--log-level", str, "INFO", "Logging level"),
    ]
    run_parser_flags = [
        ("--no-build", "Skip the build"),
        ("--no-tag", "Skip tagging"),
        ("--no-push", "Skip the push"),
    ]
    for sub in (run_parser, arun_parser):
        for arg in run_parser_arguments:
            sub.add_argument(arg[0], type=arg[1], default=arg[2], help=arg[3])
        for flag in run_parser_flags:
            sub.add_argument(flag[0], action="store_true", help=flag[1])

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(args)
        if args.command == "run":
            response = run(config)
        else:
            response = asyncio.run(arun(config))
    except (BaseError, LoadError, ValidationError) as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    print(response.to_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
