"""
This module discovers the files of an input directory and converts all of
them concurrently.

Every direct regular file is converted (no extension filter, hidden files
included) into ``<input_dir>/output/<stem>.wav``. One failing file never
stops the others; the summary reports how many succeeded and failed.
"""
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

import wavify as wavify_module
from wavify.provision import ToolPaths
from wavify.utils import STATUS_FAIL, LogLevel, file_util, logger

from . import core


@dataclass
class BatchSummary:
    results: List[core.JobResult] = field(default_factory=list)
    runtime: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def ok(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return self.total - self.ok


def iter_input_files(input_dir: Path) -> List[Path]:
    """Return the direct regular files of `input_dir`, sorted by name."""
    return sorted((p for p in input_dir.iterdir() if p.is_file()), key=lambda p: p.name)


def build_jobs(input_dir: Path) -> List[core.ConversionJob]:
    """Create one ConversionJob per input file, creating the output folder."""
    output_dir = file_util.output_folder(input_dir)
    return [
        core.make_job(src, file_util.destination_for(src, output_dir))
        for src in iter_input_files(input_dir)
    ]


def _format_runtime(seconds: float) -> str:
    total = int(seconds)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"


def _convert(tools: ToolPaths, job: core.ConversionJob, timeout: Optional[float]) -> core.JobResult:
    """Run one job; any unexpected error becomes a failed result so the batch always finishes."""
    try:
        if wavify_module.DEBUG and tools.prober is not None:
            duration = core.probe_duration(tools, job.source, timeout=timeout)
            logger.log("convert.details", LogLevel.DEBUG, file=job.source.name, duration=duration)
        return core.run_job(tools, job, timeout=timeout)
    except Exception as e:
        logger.log("convert.failed", LogLevel.ERROR, file=job.source.name, reason="error", error=repr(e))
        return core.JobResult(job, STATUS_FAIL, error=repr(e))


def run_batch(input_dir: Path, tools: ToolPaths, workers: Optional[int] = None,
              timeout: Optional[float] = None) -> BatchSummary:
    """
    Convert every file in `input_dir` and wait for all conversions to finish.

    Args:
        input_dir: Directory whose direct files are converted
        tools: Provisioned tool paths
        workers: Maximum simultaneous ffmpeg processes (default: one per file)
        timeout: Per-job timeout in seconds (default: none)

    Returns:
        BatchSummary with one JobResult per file, in input order
    """
    input_dir = Path(input_dir).expanduser().resolve()
    jobs = build_jobs(input_dir)
    start_time = time.time()

    logger.log("batch.start", LogLevel.INFO,
               input=str(input_dir),
               output=str(file_util.output_folder(input_dir)),
               files=len(jobs),
               workers=workers or len(jobs))

    if not jobs:
        logger.log("batch.end", LogLevel.INFO, total=0, ok=0, fail=0, runtime=_format_runtime(0))
        return BatchSummary()

    by_source = {}
    with ThreadPoolExecutor(max_workers=workers or len(jobs)) as executor:
        futs = {executor.submit(_convert, tools, job, timeout): job for job in jobs}
        with tqdm(total=len(jobs), desc="Converting", unit="file") as bar:
            for fut in as_completed(futs):
                result = fut.result()
                by_source[futs[fut].source] = result
                bar.update(1)
                logger.log("batch.progress", LogLevel.DEBUG,
                           completed=len(by_source), total=len(jobs),
                           file=result.job.source.name, status=result.status)

    summary = BatchSummary(
        results=[by_source[job.source] for job in jobs],
        runtime=time.time() - start_time,
    )
    logger.log("batch.end", LogLevel.INFO,
               total=summary.total,
               ok=summary.ok,
               fail=summary.failed,
               runtime=_format_runtime(summary.runtime))
    return summary
