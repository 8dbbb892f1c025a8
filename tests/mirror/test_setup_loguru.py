"""Тесты настройки Loguru: каталог лога, пауза, поле channel и отказ файлового приёмника."""

import builtins

from loguru import logger

import MIRROR_APP.INFRA.setup_loguru as loguru_setup
# noinspection PyProtectedMember
from MIRROR_APP.INFRA.setup_loguru import (
    _add_file_sink,
    _ensure_parent_dir_for_file_sink,
    _pause_until_user_confirms,
    setup_loguru,
)


def test_ensure_parent_dir_creates_missing_parents(tmp_path):
    """Для пути к файлу лога создаются все недостающие родительские каталоги."""
    file_path = tmp_path / "logs" / "nested" / "mirror.log"
    assert not file_path.parent.exists()

    _ensure_parent_dir_for_file_sink(file_path)

    assert file_path.parent.is_dir()
    # Сам файл не создаётся: это делает loguru.
    assert not file_path.exists()


def test_ensure_parent_dir_accepts_str(tmp_path):
    target = tmp_path / "str_dir" / "x.log"
    _ensure_parent_dir_for_file_sink(str(target))
    assert target.parent.is_dir()


def test_ensure_parent_dir_ignores_file_like_objects():
    """Не-пути (например, поток) игнорируются без исключений."""
    _ensure_parent_dir_for_file_sink(object())


def test_pause_skipped_without_tty(monkeypatch):
    """Под cron/systemd stdin не TTY: input() не вызывается."""
    prompts = []
    monkeypatch.setattr("sys.stdin.isatty", lambda: False)
    monkeypatch.setattr(builtins, "input", lambda *a, **kw: prompts.append(a))

    _pause_until_user_confirms("prompt")

    assert prompts == []


def test_pause_waits_for_enter_on_tty(monkeypatch):
    prompts: list[str] = []
    monkeypatch.setattr("sys.stdin.isatty", lambda: True)
    monkeypatch.setattr(builtins, "input", lambda msg: prompts.append(msg) or "")

    _pause_until_user_confirms("Нажмите Enter")

    assert prompts == ["Нажмите Enter"]


def test_pause_tolerates_eof(monkeypatch):
    monkeypatch.setattr("sys.stdin.isatty", lambda: True)

    def raise_eof(msg):
        raise EOFError

    monkeypatch.setattr(builtins, "input", raise_eof)
    _pause_until_user_confirms("x")


def test_setup_loguru_writes_channel_to_file(make_app, tmp_path):
    """Файловый лог получает поле channel: '-' вне задачи и имя канала внутри contextualize."""
    app = make_app()
    log_path = app.logging.file.path

    try:
        setup_loguru(app.logging, pause_on_file_error=False)
        logger.info("вне канала")
        with logger.contextualize(channel="beta"):
            logger.info("внутри канала")
        logger.complete()
    finally:
        logger.remove()

    text = log_path.read_text(encoding="utf-8")
    assert "| - | вне канала" in text
    assert "| beta | внутри канала" in text


def test_setup_loguru_file_sink_error_is_reported(make_app, monkeypatch, tmp_path):
    """Если файловый sink не создан, пишется critical и (при разрешении) ставится пауза."""
    # Родитель лога является обычным файлом, каталог создать нельзя.
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    app = make_app(logging={"file": {"path": blocker / "mirror.log"}})

    pauses = []
    monkeypatch.setattr(loguru_setup, "_pause_until_user_confirms", pauses.append)

    try:
        setup_loguru(app.logging, pause_on_file_error=True)
    finally:
        logger.remove()

    assert len(pauses) == 1
    assert "логирования" in pauses[0]


def test_add_file_sink_reports_failure(make_app, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    app = make_app(logging={"file": {"path": blocker / "sub" / "mirror.log"}})

    try:
        assert _add_file_sink(app.logging.file) is False
    finally:
        logger.remove()


def test_setup_loguru_twice_does_not_duplicate_records(make_app):
    """Повторная настройка заменяет приёмники, а не добавляет ещё один файловый."""
    app = make_app()

    try:
        setup_loguru(app.logging, pause_on_file_error=False)
        setup_loguru(app.logging, pause_on_file_error=False)
        logger.info("одна запись")
        logger.complete()
    finally:
        logger.remove()

    text = app.logging.file.path.read_text(encoding="utf-8")
    assert text.count("одна запись") == 1
