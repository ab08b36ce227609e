"""WAV conversion for a directory of media files.

This package provides two levels of functionality:
- core: One FFmpeg invocation (ConversionJob, argument building, probing)
- batch: Input discovery and concurrent dispatch of every job
"""

from .core import (
    ConversionJob,
    JobResult,
    build_arguments,
    make_job,
    probe_duration,
    run_job,
)
from .batch import (
    BatchSummary,
    build_jobs,
    iter_input_files,
    run_batch,
)

__all__ = [
    # Single job
    "ConversionJob",
    "JobResult",
    "build_arguments",
    "make_job",
    "probe_duration",
    "run_job",
    # Batch
    "BatchSummary",
    "build_jobs",
    "iter_input_files",
    "run_batch",
]
