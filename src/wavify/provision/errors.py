class ProvisionError(RuntimeError):
    """No working ffmpeg/ffprobe could be found or downloaded."""
