"""Shared test fixtures for avcaps test suite."""

import copy
import io
import json
import os
from unittest.mock import patch

import pytest

from avcaps import cpuflags as _cpuflags_mod
from avcaps.lib.log_lib import OutputManager
from avcaps.lib.log_lib import manager as _manager_mod
from avcaps.lib.log_lib import report as _report_mod
from avcaps.registry import (
    CanonicalDescriptor, Category, ListDescriptorDomain, ListRegistry,
    MediaType, RegistryEntry,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: integration tests that touch the filesystem")


# ---------------------------------------------------------------------------
# Global state isolation
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_singletons():
    """Restore the output/report singletons and CPU overrides after each test."""
    saved = (_manager_mod._manager, _report_mod._report,
             _cpuflags_mod._forced_flags, _cpuflags_mod._forced_count)
    yield
    (_manager_mod._manager, _report_mod._report,
     _cpuflags_mod._forced_flags, _cpuflags_mod._forced_count) = saved


@pytest.fixture(autouse=True)
def _no_report_env(monkeypatch):
    """Keep a developer's AVCAPS_REPORT from leaking into tests."""
    monkeypatch.delenv("AVCAPS_REPORT", raising=False)


# ---------------------------------------------------------------------------
# Temporary directory fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def tmp_config_home(tmp_path):
    """Provide a temporary home directory for ~/.avcaps/config.json."""
    home = tmp_path / "home"
    home.mkdir()
    with patch.dict(os.environ, {"HOME": str(home), "USERPROFILE": str(home)}):
        with patch("pathlib.Path.home", return_value=home):
            yield home


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from an empty working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def buf():
    """A StringIO buffer for capturing console diagnostics."""
    return io.StringIO()


@pytest.fixture
def out(buf):
    """An OutputManager at info level writing to a buffer."""
    return OutputManager(file=buf)


# ---------------------------------------------------------------------------
# Registry fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def small_domain():
    """A handful of codec descriptors in deliberately unsorted order."""
    return ListDescriptorDomain([
        CanonicalDescriptor(identity=3, name="opus", media_type=MediaType.AUDIO),
        CanonicalDescriptor(identity=1, name="h264", media_type=MediaType.VIDEO),
        CanonicalDescriptor(identity=4, name="aac", media_type=MediaType.AUDIO),
        CanonicalDescriptor(identity=2, name="av1", media_type=MediaType.VIDEO),
        CanonicalDescriptor(identity=5, name="mp2_deprecated", media_type=MediaType.AUDIO),
        CanonicalDescriptor(identity=6, name="ttf", media_type=MediaType.ATTACHMENT),
    ])


@pytest.fixture
def small_codecs():
    """Encoders and decoders for small_domain."""
    return ListRegistry([
        RegistryEntry(name="libx264", category=Category.ENCODER, codec_id=1),
        RegistryEntry(name="h264", category=Category.DECODER, codec_id=1),
        RegistryEntry(name="libdav1d", category=Category.DECODER, codec_id=2),
        RegistryEntry(name="av1", category=Category.DECODER, codec_id=2),
        RegistryEntry(name="opus", category=Category.DECODER, codec_id=3),
        RegistryEntry(name="opus", category=Category.ENCODER, codec_id=3),
        RegistryEntry(name="aac", category=Category.ENCODER, codec_id=4),
        RegistryEntry(name="mp2float", category=Category.DECODER, codec_id=5),
    ])


SMALL_CATALOG = {
    "version": 1,
    "muxers": [
        {"name": "mp4", "long_name": "MP4"},
        {"name": "alsa", "long_name": "ALSA out", "category": "device_audio_output"},
        {"name": "null", "long_name": "null muxer"},
    ],
    "demuxers": [
        {"name": "mp4", "long_name": "MP4 demuxer"},
        {"name": "alsa", "long_name": "ALSA in", "category": "device_audio_input"},
        {"name": "concat", "long_name": "concat script"},
    ],
    "codecs": [
        {"id": 1, "name": "h264", "type": "video", "props": ["lossy"], "long_name": "H.264"},
        {"id": 2, "name": "flac", "type": "audio", "props": ["intra_only", "lossless"],
         "long_name": "FLAC"},
    ],
    "encoders": [
        {"name": "libx264", "codec": "h264", "caps": ["frame_threads"], "long_name": "x264"},
    ],
    "decoders": [
        {"name": "h264", "codec": "h264", "caps": ["dr1"], "long_name": "H.264 decoder"},
        {"name": "flac", "codec": "flac", "long_name": "FLAC decoder"},
    ],
}


@pytest.fixture
def catalog_file(tmp_path):
    """Write SMALL_CATALOG to disk and return its path."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(SMALL_CATALOG, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def small_catalog():
    """A private copy of SMALL_CATALOG for tests that edit it."""
    return copy.deepcopy(SMALL_CATALOG)
