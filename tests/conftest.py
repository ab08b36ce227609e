import io
import json
import zipfile
from pathlib import Path

import pytest

from wavify.provision import ToolPaths


class FakeResponse:
    """Minimal stand-in for requests.Response used by the provisioning code."""

    def __init__(self, body: bytes = b"", status_code: int = 200, payload=None):
        self.status_code = status_code
        self._body = body if payload is None else json.dumps(payload).encode()
        self.headers = {"Content-Length": str(len(self._body))}

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return json.loads(self._body.decode())

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self._body), chunk_size):
            yield self._body[i:i + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def make_zip(entries) -> bytes:
    """Build an in-memory ZIP from (name, data) pairs; names ending in '/' are directories."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as z:
        for name, data in entries:
            z.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def fake_tools(tmp_path) -> ToolPaths:
    return ToolPaths(transcoder=tmp_path / "bin" / "ffmpeg", prober=None)


@pytest.fixture
def media_dir(tmp_path) -> Path:
    root = tmp_path / "media"
    root.mkdir()
    for name in ["b.mp3", "a.flac", "clip.MOV", ".hidden.ogg"]:
        (root / name).write_bytes(b"data")
    (root / "nested").mkdir()
    (root / "nested" / "skipped.mp3").write_bytes(b"data")
    return root
