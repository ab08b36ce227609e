"""
Wavifier: convert every file in a directory to mono 8 kHz 16-bit WAV.

Finds FFmpeg in the tool directory (downloading it from the ffbinaries
version index when missing), then runs one FFmpeg conversion per input file
concurrently and writes the results to ``<input_dir>/output``.
"""

import argparse
import atexit
import os
import sys
from pathlib import Path

import wavify as wavify_module
from wavify import convert, provision
from wavify.utils import (
    HTTP_TIMEOUT,
    HTTP_TIMEOUT_SETTING,
    JOB_TIMEOUT,
    MANIFEST_URL,
    OUTPUT_FOLDER,
    TOOL_DIR,
    WORKERS,
    LogLevel,
    logger,
)


class _TeeStream:
    def __init__(self, *streams):
        self._streams = streams

    def write(self, data):
        for stream in self._streams:
            stream.write(data)
        return len(data)

    def flush(self):
        for stream in self._streams:
            stream.flush()

    def isatty(self):
        return any(getattr(stream, "isatty", lambda: False)() for stream in self._streams)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavifier",
        description="Convert every file in a directory to mono 8000 Hz signed 16-bit WAV using FFmpeg. "
                    "FFmpeg is downloaded automatically when it is not in the tool directory.",
        epilog="Example: wavifier ~/Recordings",
    )
    parser.add_argument("input", nargs="?", help="Directory whose files are converted into <input>/output")
    parser.add_argument("--tool-dir", default=TOOL_DIR,
                        help="Directory holding ffmpeg/ffprobe (default: ./ffmpeg or $WAVIFY_TOOL_DIR)")
    parser.add_argument("--manifest-url", default=MANIFEST_URL,
                        help="FFmpeg version index URL (default: ffbinaries latest or $WAVIFY_MANIFEST_URL)")
    parser.add_argument("--http-timeout", type=_positive_float, default=HTTP_TIMEOUT_SETTING,
                        help=f"Manifest and download request timeout in seconds "
                             f"(default: {HTTP_TIMEOUT:g} or $WAVIFY_HTTP_TIMEOUT)")
    parser.add_argument("--workers", type=_positive_int, default=WORKERS,
                        help="Maximum concurrent ffmpeg processes (default: one per file or $WAVIFY_WORKERS)")
    parser.add_argument("--timeout", type=_positive_float, default=JOB_TIMEOUT,
                        help="Per-file timeout in seconds (default: none or $WAVIFY_JOB_TIMEOUT)")
    parser.add_argument("--no-probe", action="store_true",
                        help="Do not require or download ffprobe")
    parser.add_argument("--log-file", help="Write console output to a file (in addition to the console)")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {wavify_module.__version__}")
    return parser


def _open_log_file(path: str) -> None:
    log_path = Path(path).expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_file_handle = open(log_path, "a", encoding="utf-8", buffering=1)
    sys.stdout = _TeeStream(sys.stdout, log_file_handle)
    sys.stderr = _TeeStream(sys.stderr, log_file_handle)
    atexit.register(log_file_handle.close)
    print(f"Logging to: {log_path}")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input:
        parser.print_usage(sys.stderr)
        return 1

    if args.log_file:
        _open_log_file(args.log_file)

    wavify_module.DEBUG = args.debug
    logger.set_log_level(LogLevel.DEBUG if args.debug else LogLevel.INFO)

    input_dir = Path(args.input).expanduser().resolve()
    if not input_dir.is_dir():
        logger.log("startup.error", LogLevel.ERROR, msg="Input directory does not exist", input=str(input_dir))
        return 1

    try:
        tools = provision.ensure_tools(
            Path(args.tool_dir),
            manifest_url=args.manifest_url,
            require_prober=not args.no_probe,
            timeout=args.http_timeout or HTTP_TIMEOUT,
        )
    except provision.ProvisionError as e:
        logger.log("provision.failed", LogLevel.ERROR, error=str(e))
        return 1

    if tools.version:
        logger.safe_print(f"Downloaded ffmpeg version {tools.version}")
    logger.safe_print(f"Using ffmpeg at: {tools.transcoder.resolve()}")

    try:
        summary = convert.run_batch(input_dir, tools, workers=args.workers, timeout=args.timeout)
    except (FileExistsError, NotADirectoryError) as e:
        logger.log("startup.error", LogLevel.ERROR, msg="Output folder cannot be created",
                   output=str(input_dir / OUTPUT_FOLDER), error=str(e))
        return 1

    logger.log(
        "wavifier.end",
        LogLevel.INFO,
        pid=os.getpid(),
        output=str(input_dir / OUTPUT_FOLDER),
        total=summary.total,
        ok=summary.ok,
        fail=summary.failed,
    )
    for result in summary.results:
        if not result.ok:
            logger.safe_print(f"FAILED: {result.job.source.name} (exit code {result.exit_code})")

    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
