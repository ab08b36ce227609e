"""
Access to the ffbinaries version index.

The index answers ``GET /api/v1/version/latest`` with a document shaped like::

    {
      "version": "6.1",
      "permalink": "https://ffbinaries.com/api/v1/version/6.1",
      "bin": {
        "linux-64": {"ffmpeg": "https://...zip", "ffprobe": "https://...zip"},
        ...
      }
    }
"""
import platform
from dataclasses import dataclass, field
from typing import Dict, Optional

import requests

from wavify.utils import FALLBACK_PLATFORM, HTTP_TIMEOUT, PLATFORM_KEYS, LogLevel, logger

from .errors import ProvisionError


@dataclass(frozen=True)
class VersionManifest:
    version: str
    permalink: str
    bin: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def urls_for(self, key: str) -> Dict[str, str]:
        """Return the tool -> archive URL map for `key`, falling back to linux-64."""
        if key in self.bin:
            return self.bin[key]
        if FALLBACK_PLATFORM in self.bin:
            logger.log("provision.platform_fallback", LogLevel.WARN,
                       requested=key, using=FALLBACK_PLATFORM)
            return self.bin[FALLBACK_PLATFORM]
        raise ProvisionError(f"Manifest {self.version} has no build for '{key}' or '{FALLBACK_PLATFORM}'")


def parse_manifest(data) -> VersionManifest:
    """Validate a decoded manifest document and build a VersionManifest."""
    if not isinstance(data, dict):
        raise ProvisionError("Manifest is not a JSON object")

    version = data.get("version")
    permalink = data.get("permalink")
    bins = data.get("bin")
    if not isinstance(version, str) or not isinstance(permalink, str):
        raise ProvisionError("Manifest is missing 'version' or 'permalink'")
    if not isinstance(bins, dict):
        raise ProvisionError("Manifest is missing the 'bin' table")

    entries: Dict[str, Dict[str, str]] = {}
    for key, tools in bins.items():
        if not isinstance(tools, dict):
            raise ProvisionError(f"Manifest entry '{key}' is not an object")
        entries[key] = {name: url for name, url in tools.items() if isinstance(url, str)}

    return VersionManifest(version=version, permalink=permalink, bin=entries)


def fetch_manifest(url: str, timeout: float = HTTP_TIMEOUT) -> VersionManifest:
    """Download and parse the latest version manifest."""
    logger.log("provision.manifest", LogLevel.INFO, url=url)
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise ProvisionError(f"Failed to fetch ffmpeg versions from {url}: {e}") from e
    except ValueError as e:
        raise ProvisionError(f"Version index at {url} did not return JSON: {e}") from e

    manifest = parse_manifest(data)
    logger.log("provision.manifest", LogLevel.DEBUG,
               version=manifest.version, platforms=",".join(sorted(manifest.bin)))
    return manifest


def platform_key(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """
    Map an OS name and machine type to a version index platform key.

    Defaults to the running interpreter's platform. Anything unrecognized maps
    to the fallback key.
    """
    system = (system if system is not None else platform.system()).lower()
    machine = (machine if machine is not None else platform.machine()).lower()

    if system == "windows":
        key = "windows-64"
    elif system == "darwin":
        key = "osx-64"
    elif system == "linux":
        if machine in ("aarch64", "arm64"):
            key = "linux-arm64"
        elif machine.startswith("armv7") or machine == "armhf":
            key = "linux-armhf"
        elif machine.startswith("arm"):
            key = "linux-armel"
        elif machine in ("i386", "i486", "i586", "i686", "x86"):
            key = "linux-32"
        else:
            key = "linux-64"
    else:
        key = FALLBACK_PLATFORM

    return key if key in PLATFORM_KEYS else FALLBACK_PLATFORM
