from imagebuilder.container_engine import ContainerEngine
from imagebuilder.core._log_helper import info, warn
from imagebuilder.core.exceptions import BadRequestError

from ._models import BuildRequest, PipelineConfig, PipelineResult, Registry


def destination_reference(
    registry: Registry,
    image_name: str,
    image_tag: str,
) -> str:
    return f"{registry.url}/{registry.namespace}/{image_name}:{image_tag}"


def _destination(
    request: BuildRequest,
    registry: Registry | None,
) -> str:
    if registry is None:
        raise BadRequestError(
            f"Registry is required to tag or push {request.reference}."
        )
    return destination_reference(
        registry, request.image_name, request.image_tag
    )


def run_pipeline(
    engine: ContainerEngine,
    request: BuildRequest,
    registry: Registry | None = None,
    should_build: bool = True,
    should_tag: bool = True,
    should_push: bool = True,
) -> PipelineResult:
    """Build, tag and push an image, each stage behind its own gate.

    Stages run in that order and the first failure is raised as is;
    nothing done by an earlier stage is undone.
    """
    result = PipelineResult()
    if should_build:
        info("Building image %s", request.reference)
        engine.build(
            source=request.source,
            name=request.image_name,
            tags=request.tags,
            retention=request.retention,
        )
        result.built = request.reference
    if not (should_tag or should_push):
        return result
    destination = _destination(request, registry)
    if should_tag:
        info("Tagging image %s as %s", request.reference, destination)
        engine.tag(
            source_reference=request.reference,
            destination=destination,
        )
        result.tagged.append(destination)
    if should_push:
        info("Pushing image %s", destination)
        engine.push(
            destination=destination,
            username=registry.username,
            password=registry.password,
            registry_address=registry.url,
        )
        result.pushed.append(destination)
    return result


async def arun_pipeline(
    engine: ContainerEngine,
    request: BuildRequest,
    registry: Registry | None = None,
    should_build: bool = True,
    should_tag: bool = True,
    should_push: bool = True,
) -> PipelineResult:
    result = PipelineResult()
    if should_build:
        info("Building image %s", request.reference)
        await engine.abuild(
            source=request.source,
            name=request.image_name,
            tags=request.tags,
            retention=request.retention,
        )
        result.built = request.reference
    if not (should_tag or should_push):
        return result
    destination = _destination(request, registry)
    if should_tag:
        info("Tagging image %s as %s", request.reference, destination)
        await engine.atag(
            source_reference=request.reference,
            destination=destination,
        )
        result.tagged.append(destination)
    if should_push:
        info("Pushing image %s", destination)
        await engine.apush(
            destination=destination,
            username=registry.username,
            password=registry.password,
            registry_address=registry.url,
        )
        result.pushed.append(destination)
    return result


def build_and_push(
    engine: ContainerEngine,
    config: PipelineConfig,
) -> PipelineResult:
    """Build once, then tag and push to every configured registry.

    Registries are handled in order and the first failure stops the
    run.
    """
    request = config.request
    result = run_pipeline(
        engine,
        request,
        should_build=config.build,
        should_tag=False,
        should_push=False,
    )
    if (config.tag or config.push) and not config.registries:
        warn("No registries configured, skipping tag and push")
        return result
    for registry in config.registries:
        res = run_pipeline(
            engine,
            request,
            registry=registry,
            should_build=False,
            should_tag=config.tag,
            should_push=config.push,
        )
        result.tagged.extend(res.tagged)
        result.pushed.extend(res.pushed)
    return result


async def abuild_and_push(
    engine: ContainerEngine,
    config: PipelineConfig,
) -> PipelineResult:
    request = config.request
    result = await arun_pipeline(
        engine,
        request,
        should_build=config.build,
        should_tag=False,
        should_push=False,
    )
    if (config.tag or config.push) and not config.registries:
        warn("No registries configured, skipping tag and push")
        return result
    for registry in config.registries:
        res = await arun_pipeline(
            engine,
            request,
            registry=registry,
            should_build=False,
            should_tag=config.tag,
            should_push=config.push,
        )
        result.tagged.extend(res.tagged)
        result.pushed.extend(res.pushed)
    return result
