"""
A batch audio normalization module built around an external FFmpeg binary.

This module provides the pieces needed to turn a directory of arbitrary media
files into uniform mono 8 kHz 16-bit PCM WAV files. All media work is delegated
to FFmpeg; this package only locates (or downloads) the binaries and drives
them concurrently.

The module is organized into several categories:
- Provisioning the FFmpeg/FFprobe executables from the ffbinaries version index.
- Building and dispatching one conversion job per input file.
- Utility functions for configuration, logging and running subprocesses.
"""

__version__ = "1.0.0"

# Debug flag for controlling verbose output
DEBUG: bool = False

__all__ = ["__version__", "DEBUG"]
