from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Включает src в path
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from tests.utils import FakeHttp, FakeServer, RecordingProgress  # noqa: E402


@pytest.fixture()
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture()
def fake_http(server: FakeServer) -> FakeHttp:
    return FakeHttp(server)


@pytest.fixture()
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture()
def make_app(tmp_path: Path):
    """Фабрика MirrorConfig: зеркало, служебные файлы и лог внутри tmp_path."""
    from MIRROR_APP.CONFIG.config import MirrorConfig

    def _make(**overrides) -> MirrorConfig:
        data = {
            "local_dir": tmp_path / "mirror",
            "lock_file": tmp_path / "run" / "mirror-lock",
            "error_file": tmp_path / "run" / "mirror-err",
            "logging": {"file": {"path": tmp_path / "log" / "mirror.log"}},
        }
        data.update(overrides)
        return MirrorConfig.model_validate(data)

    return _make


@pytest.fixture()
def make_ctx(make_app):
    """Фабрика RuntimeContext поверх make_app."""
    from MIRROR_APP.APP.dto import RuntimeContext

    def _make(progress=None, **overrides):
        return RuntimeContext(app=make_app(**overrides), progress=progress)

    return _make


@pytest.fixture()
def make_yaml(tmp_path: Path):
    """Helper быстрого создания YAML файла во временной директории."""

    def _make(name: str, text: str) -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _make
