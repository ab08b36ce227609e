"""
A module providing constants, utility functions, and logging mechanisms
for the provisioning and conversion stages.

It bundles the runtime configuration, a helper for running external tools
and capturing their output, small path helpers, and the structured logger.
"""

from .constants import (
    AUDIO_CHANNELS,
    FALLBACK_PLATFORM,
    HTTP_TIMEOUT,
    HTTP_TIMEOUT_SETTING,
    JOB_TIMEOUT,
    MANIFEST_URL,
    OUTPUT_EXTENSION,
    OUTPUT_FOLDER,
    PLATFORM_KEYS,
    PROBER_NAME,
    SAMPLE_FORMAT,
    SAMPLE_RATE,
    STATUS_FAIL,
    STATUS_OK,
    TOOL_DIR,
    TRANSCODER_NAME,
    WORKERS,
)
from .logger import LogLevel

__all__ = [
    "TRANSCODER_NAME",
    "PROBER_NAME",
    "TOOL_DIR",
    "MANIFEST_URL",
    "HTTP_TIMEOUT",
    "HTTP_TIMEOUT_SETTING",
    "PLATFORM_KEYS",
    "FALLBACK_PLATFORM",
    "WORKERS",
    "JOB_TIMEOUT",
    "OUTPUT_FOLDER",
    "OUTPUT_EXTENSION",
    "AUDIO_CHANNELS",
    "SAMPLE_RATE",
    "SAMPLE_FORMAT",
    "STATUS_OK",
    "STATUS_FAIL",
    "LogLevel",
]
