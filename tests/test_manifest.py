import pytest
import requests

from conftest import FakeResponse
from wavify.provision import ProvisionError, VersionManifest, fetch_manifest, parse_manifest, platform_key

MANIFEST = {
    "version": "6.1",
    "permalink": "https://ffbinaries.com/api/v1/version/6.1",
    "bin": {
        "windows-64": {"ffmpeg": "https://example.com/win/ffmpeg.zip", "ffprobe": "https://example.com/win/ffprobe.zip"},
        "linux-64": {"ffmpeg": "https://example.com/lin/ffmpeg.zip", "ffprobe": "https://example.com/lin/ffprobe.zip"},
        "osx-64": {"ffmpeg": "https://example.com/osx/ffmpeg.zip", "ffprobe": "https://example.com/osx/ffprobe.zip"},
    },
}


def test_parse_manifest_reads_version_and_urls():
    manifest = parse_manifest(MANIFEST)
    assert manifest.version == "6.1"
    assert manifest.urls_for("osx-64")["ffprobe"] == "https://example.com/osx/ffprobe.zip"


@pytest.mark.parametrize("data", [
    [],
    {"permalink": "x", "bin": {}},
    {"version": "6.1", "permalink": "x"},
    {"version": "6.1", "permalink": "x", "bin": {"linux-64": "nope"}},
])
def test_parse_manifest_rejects_malformed_documents(data):
    with pytest.raises(ProvisionError):
        parse_manifest(data)


def test_urls_for_unknown_key_falls_back_to_linux_64():
    manifest = parse_manifest(MANIFEST)
    assert manifest.urls_for("linux-armel") == MANIFEST["bin"]["linux-64"]


def test_urls_for_without_fallback_entry_fails():
    manifest = VersionManifest(version="1", permalink="x", bin={"osx-64": {}})
    with pytest.raises(ProvisionError):
        manifest.urls_for("linux-arm64")


@pytest.mark.parametrize("system, machine, expected", [
    ("Windows", "AMD64", "windows-64"),
    ("Darwin", "arm64", "osx-64"),
    ("Linux", "x86_64", "linux-64"),
    ("Linux", "i686", "linux-32"),
    ("Linux", "aarch64", "linux-arm64"),
    ("Linux", "armv7l", "linux-armhf"),
    ("Linux", "armv6l", "linux-armel"),
    ("FreeBSD", "amd64", "linux-64"),
])
def test_platform_key(system, machine, expected):
    assert platform_key(system, machine) == expected


def test_fetch_manifest(monkeypatch):
    calls = []

    def fake_get(url, **kwargs):
        calls.append(url)
        return FakeResponse(payload=MANIFEST)

    monkeypatch.setattr(requests, "get", fake_get)
    manifest = fetch_manifest("https://index.test/latest", timeout=1)
    assert manifest.version == "6.1"
    assert calls == ["https://index.test/latest"]


def test_fetch_manifest_wraps_network_errors(monkeypatch):
    def fake_get(url, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", fake_get)
    with pytest.raises(ProvisionError, match="offline"):
        fetch_manifest("https://index.test/latest")


def test_fetch_manifest_rejects_http_errors_and_non_json(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, **kw: FakeResponse(status_code=503))
    with pytest.raises(ProvisionError):
        fetch_manifest("https://index.test/latest")

    monkeypatch.setattr(requests, "get", lambda url, **kw: FakeResponse(body=b"<html>"))
    with pytest.raises(ProvisionError):
        fetch_manifest("https://index.test/latest")
