"""
Functions to describe and run a single FFmpeg conversion.

A ConversionJob carries everything one invocation needs. Running it never
raises: spawn errors, timeouts and non-zero exits all come back as a failed
JobResult so that sibling jobs are unaffected.
"""
import json
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from wavify.provision import ToolPaths
from wavify.utils import (
    AUDIO_CHANNELS,
    SAMPLE_FORMAT,
    SAMPLE_RATE,
    STATUS_FAIL,
    STATUS_OK,
    LogLevel,
    logger,
    system_util,
)


@dataclass(frozen=True)
class ConversionJob:
    source: Path
    destination: Path
    arguments: Tuple[str, ...]

    @property
    def argument_string(self) -> str:
        return shlex.join(self.arguments)


@dataclass
class JobResult:
    job: ConversionJob
    status: str
    exit_code: Optional[int] = None
    output: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def build_arguments(src: Path, dst: Path) -> List[str]:
    """Build ffmpeg arguments that turn `src` into mono 8 kHz s16 PCM at `dst`."""
    return [
        "-hide_banner",
        "-hwaccel", "auto",
        "-y",
        "-i", str(src),
        "-ac", str(AUDIO_CHANNELS),
        "-ar", str(SAMPLE_RATE),
        "-sample_fmt", SAMPLE_FORMAT,
        str(dst),
    ]


def make_job(src: Path, dst: Path) -> ConversionJob:
    return ConversionJob(source=src, destination=dst, arguments=tuple(build_arguments(src, dst)))


def run_job(tools: ToolPaths, job: ConversionJob, timeout: Optional[float] = None) -> JobResult:
    """
    Run one conversion to completion.

    Args:
        tools: Provisioned tool paths
        job: The conversion to perform
        timeout: Seconds before the ffmpeg process is killed (default: no limit)

    Returns:
        JobResult; on success `output` holds ffmpeg's stdout followed by stderr
    """
    logger.log("convert.start", LogLevel.INFO, file=job.source.name, dst=job.destination.name)
    logger.log("convert.command", LogLevel.DEBUG, cmd=f"{tools.transcoder} {job.argument_string}")

    try:
        code, out, err = system_util.run_tool(tools.transcoder, job.arguments, timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.log("convert.failed", LogLevel.ERROR, file=job.source.name,
                   reason="timeout", timeout=timeout, cmd=job.argument_string)
        return JobResult(job, STATUS_FAIL, error=f"timed out after {timeout}s")
    except OSError as e:
        logger.log("convert.failed", LogLevel.ERROR, file=job.source.name,
                   reason="spawn", error=str(e), cmd=job.argument_string)
        return JobResult(job, STATUS_FAIL, error=str(e))

    if code != 0:
        logger.log("convert.failed", LogLevel.ERROR,
                   file=job.source.name,
                   exit_code=code,
                   cmd=job.argument_string,
                   error=err.strip())
        return JobResult(job, STATUS_FAIL, exit_code=code, output=out, error=err)

    logger.log("convert.complete", LogLevel.INFO, file=job.source.name, dst=job.destination.name)
    return JobResult(job, STATUS_OK, exit_code=code, output=out + err)


def probe_duration(tools: ToolPaths, path: Path, timeout: Optional[float] = None) -> Optional[float]:
    """Return the container duration of `path` in seconds, or None if unknown."""
    if tools.prober is None:
        return None

    args = [
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "json",
        str(path),
    ]
    try:
        code, out, _ = system_util.run_tool(tools.prober, args, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired):
        return None
    if code != 0:
        return None

    try:
        data = json.loads(out)
        return float(data["format"]["duration"])
    except (ValueError, KeyError, TypeError):
        return None
