from ._helper import (
    abuild_and_push,
    arun_pipeline,
    build_and_push,
    destination_reference,
    run_pipeline,
)
from ._models import BuildRequest, PipelineConfig, PipelineResult, Registry

__all__ = [
    "BuildRequest",
    "PipelineConfig",
    "PipelineResult",
    "Registry",
    "abuild_and_push",
    "arun_pipeline",
    "build_and_push",
    "destination_reference",
    "run_pipeline",
]
