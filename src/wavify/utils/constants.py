"""
Constants and configuration settings for tool provisioning and conversion.

Values that users are expected to tune are read from the environment (a local
``.env`` file is loaded first). Everything else describes the fixed conversion
target: mono, 8000 Hz, signed 16-bit PCM WAV.
"""

import os

from dotenv import load_dotenv

load_dotenv()


# Tool names (without platform extension)
TRANSCODER_NAME = "ffmpeg"
PROBER_NAME = "ffprobe"

# Provisioning settings
TOOL_DIR = os.getenv("WAVIFY_TOOL_DIR", "ffmpeg")
MANIFEST_URL = os.getenv("WAVIFY_MANIFEST_URL", "https://ffbinaries.com/api/v1/version/latest")
HTTP_TIMEOUT = 60.0
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# Platform keys published by the version index
PLATFORM_KEYS = [
    "windows-64",
    "linux-32",
    "linux-64",
    "linux-armhf",
    "linux-armel",
    "linux-arm64",
    "osx-64",
]
FALLBACK_PLATFORM = "linux-64"

# Run settings as raw strings; the CLI validates them like the matching flags.
# None means the library default (60s HTTP timeout, one worker per job, no job timeout).
HTTP_TIMEOUT_SETTING = os.getenv("WAVIFY_HTTP_TIMEOUT") or None
WORKERS = os.getenv("WAVIFY_WORKERS") or None
JOB_TIMEOUT = os.getenv("WAVIFY_JOB_TIMEOUT") or None

# Output layout
OUTPUT_FOLDER = "output"
OUTPUT_EXTENSION = ".wav"

# Conversion target
AUDIO_CHANNELS = 1
SAMPLE_RATE = 8000
SAMPLE_FORMAT = "s16"

# Processing status codes
STATUS_OK = "OK"
STATUS_FAIL = "FAIL"
