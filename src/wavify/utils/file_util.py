"""
Path helpers shared by the provisioning and conversion stages.
"""
from pathlib import Path, PurePosixPath
from typing import Optional

from wavify.utils import OUTPUT_EXTENSION, OUTPUT_FOLDER


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def output_folder(input_dir: Path) -> Path:
    """Return ``<input_dir>/output``, creating it if needed."""
    return ensure_directory(input_dir / OUTPUT_FOLDER)


def destination_for(src: Path, output_dir: Path) -> Path:
    """Map a source file to ``<output_dir>/<stem>.wav`` whatever its extension."""
    return output_dir / f"{src.stem}{OUTPUT_EXTENSION}"


def safe_member_path(name: str) -> Optional[PurePosixPath]:
    """
    Return the relative path of an archive member, or None when the name is
    absolute or climbs out of the extraction directory.
    """
    member = PurePosixPath(name.replace("\\", "/"))
    if not member.parts or member.is_absolute():
        return None
    # Drive letters ("C:") are absolute on Windows hosts
    if ":" in member.parts[0]:
        return None
    if ".." in member.parts:
        return None
    return member
