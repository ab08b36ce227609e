"""
Locate or download the FFmpeg executables used by the conversion stage.

The tool directory is checked first. Only when a required executable is
missing is the version index contacted; the archives are then downloaded in
parallel, unpacked one at a time, and deleted.
"""
import shutil
import zipfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import requests
from tqdm import tqdm

from wavify.utils import (
    HTTP_TIMEOUT,
    MANIFEST_URL,
    PROBER_NAME,
    TRANSCODER_NAME,
    LogLevel,
    file_util,
    logger,
    system_util,
)
from wavify.utils.constants import DOWNLOAD_CHUNK_SIZE

from .errors import ProvisionError
from .manifest import fetch_manifest, platform_key


@dataclass(frozen=True)
class ToolPaths:
    transcoder: Path
    prober: Optional[Path] = None
    version: Optional[str] = None


def _required_tools(require_prober: bool) -> List[str]:
    return [TRANSCODER_NAME, PROBER_NAME] if require_prober else [TRANSCODER_NAME]


def _locate(tool_dir: Path, tool: str) -> Optional[Path]:
    """Find `tool` directly in `tool_dir` or in one of its immediate subfolders."""
    name = system_util.executable_name(tool)
    direct = tool_dir / name
    if direct.is_file():
        return direct
    if not tool_dir.is_dir():
        return None
    # Archives that wrap the binary in a folder (e.g. ffmpeg-6.1/ffmpeg) extract one level down
    nested = sorted(p for p in tool_dir.glob(f"*/{name}") if p.is_file())
    return nested[0] if nested else None


def find_existing_tools(tool_dir: Path, require_prober: bool = True) -> Optional[ToolPaths]:
    """Return ToolPaths if every required executable already sits in `tool_dir`."""
    transcoder = _locate(tool_dir, TRANSCODER_NAME)
    prober = _locate(tool_dir, PROBER_NAME)

    if transcoder is None:
        return None
    if require_prober and prober is None:
        return None

    return ToolPaths(transcoder=transcoder, prober=prober)


def download_file(url: str, dest: Path, timeout: float = HTTP_TIMEOUT) -> Path:
    """Stream `url` into `dest` with a byte progress bar."""
    logger.log("provision.download", LogLevel.INFO, url=url, dst=str(dest))
    file_util.ensure_directory(dest.parent)
    try:
        with requests.get(url, stream=True, timeout=timeout) as resp:
            resp.raise_for_status()
            total = int(resp.headers.get("Content-Length") or 0) or None
            with open(dest, "wb") as f, tqdm(
                total=total, unit="B", unit_scale=True, desc=dest.name, leave=False
            ) as bar:
                for chunk in resp.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
                    bar.update(len(chunk))
    except requests.RequestException as e:
        raise ProvisionError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        raise ProvisionError(f"Failed to write {dest}: {e}") from e
    return dest


def extract_tool(archive: Path, tool_name: str, dest_dir: Path) -> Path:
    """
    Extract the first file member whose name contains `tool_name`.

    The member keeps its path relative to the archive root. Scanning stops at
    the first match even if later members also match.

    Raises:
        ProvisionError: The archive is unreadable, has no matching member, or
            the matching member would land outside `dest_dir`.
    """
    logger.log("provision.extract", LogLevel.INFO, archive=archive.name, tool=tool_name, dst=str(dest_dir))
    try:
        with zipfile.ZipFile(archive) as z:
            for info in z.infolist():
                if info.is_dir() or tool_name not in info.filename:
                    continue

                member = file_util.safe_member_path(info.filename)
                if member is None:
                    raise ProvisionError(f"Refusing to extract unsafe member '{info.filename}' from {archive}")

                out_path = dest_dir.joinpath(*member.parts)
                file_util.ensure_directory(out_path.parent)
                with z.open(info) as src, open(out_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                system_util.make_executable(out_path)

                logger.log("provision.extracted", LogLevel.DEBUG, member=info.filename, path=str(out_path))
                return out_path
    except zipfile.BadZipFile as e:
        raise ProvisionError(f"{archive} is not a valid ZIP archive: {e}") from e
    except OSError as e:
        raise ProvisionError(f"Failed to extract {tool_name} from {archive}: {e}") from e

    raise ProvisionError(f"No member matching '{tool_name}' in {archive}")


def download_tools(tool_dir: Path, manifest_url: str = MANIFEST_URL, require_prober: bool = True,
                   timeout: float = HTTP_TIMEOUT) -> ToolPaths:
    """Fetch the manifest, download one archive per required tool and unpack them."""
    key = platform_key()
    logger.log("provision.start", LogLevel.INFO, platform=key, tool_dir=str(tool_dir))

    manifest = fetch_manifest(manifest_url, timeout=timeout)
    urls = manifest.urls_for(key)

    tools = _required_tools(require_prober)
    missing = [tool for tool in tools if tool not in urls]
    if missing:
        raise ProvisionError(f"Manifest {manifest.version} has no download for: {', '.join(missing)}")

    file_util.ensure_directory(tool_dir)

    # Two transfers at most; join both before touching either archive
    with ThreadPoolExecutor(max_workers=len(tools)) as pool:
        futures = {
            tool: pool.submit(download_file, urls[tool], tool_dir / f"{tool}.zip", timeout)
            for tool in tools
        }
        archives: Dict[str, Path] = {tool: fut.result() for tool, fut in futures.items()}

    paths: Dict[str, Path] = {}
    for tool in tools:
        paths[tool] = extract_tool(archives[tool], tool, tool_dir)

    for archive in archives.values():
        try:
            archive.unlink()
        except OSError as e:
            raise ProvisionError(f"Failed to remove {archive}: {e}") from e

    logger.log("provision.complete", LogLevel.INFO, version=manifest.version,
               ffmpeg=str(paths[TRANSCODER_NAME]), ffprobe=str(paths.get(PROBER_NAME)))

    return ToolPaths(
        transcoder=paths[TRANSCODER_NAME],
        prober=paths.get(PROBER_NAME),
        version=manifest.version,
    )


def ensure_tools(tool_dir: Path, manifest_url: str = MANIFEST_URL, require_prober: bool = True,
                 timeout: float = HTTP_TIMEOUT) -> ToolPaths:
    """
    Return usable FFmpeg tool paths, downloading them if `tool_dir` lacks them.

    Args:
        tool_dir: Directory that holds (or will hold) the executables
        manifest_url: Version index endpoint
        require_prober: Also require ffprobe (default: True)
        timeout: Per-request HTTP timeout in seconds

    Returns:
        ToolPaths; `version` is set only when the tools were just downloaded

    Raises:
        ProvisionError: When no working executable can be obtained
    """
    tool_dir = Path(tool_dir).expanduser().resolve()

    existing = find_existing_tools(tool_dir, require_prober=require_prober)
    if existing:
        logger.log("provision.existing", LogLevel.INFO,
                   ffmpeg=str(existing.transcoder),
                   ffprobe=str(existing.prober) if existing.prober else None)
        return existing

    return download_tools(tool_dir, manifest_url=manifest_url, require_prober=require_prober, timeout=timeout)
