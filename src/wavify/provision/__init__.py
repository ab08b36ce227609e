"""FFmpeg binary provisioning.

This package provides two levels of functionality:
- manifest: The ffbinaries version index (fetching, parsing, platform keys)
- core: Local lookup, archive download/extraction and the `ensure_tools` entry point
"""

from .errors import ProvisionError
from .manifest import (
    VersionManifest,
    fetch_manifest,
    parse_manifest,
    platform_key,
)
from .core import (
    ToolPaths,
    download_file,
    download_tools,
    ensure_tools,
    extract_tool,
    find_existing_tools,
)

__all__ = [
    "ProvisionError",
    # Manifest
    "VersionManifest",
    "fetch_manifest",
    "parse_manifest",
    "platform_key",
    # Tools
    "ToolPaths",
    "download_file",
    "download_tools",
    "ensure_tools",
    "extract_tool",
    "find_existing_tools",
]
