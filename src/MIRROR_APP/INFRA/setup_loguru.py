"""setup_loguru.py

Настройка логирования зеркала через Loguru.

Два приёмника:
- консоль (stderr). Маркеры прогресса идут в stdout, поэтому консольный уровень
  по умолчанию WARNING и строки лога не разрывают строку маркеров;
- подробный файл (аналог --logfile исходного скрипта) с ротацией и сжатием архивов.

Задачи каналов работают в отдельных потоках, поэтому файловый приёмник
регистрируется с enqueue=True: записи из всех потоков проходят через одну очередь.
Поле ``extra[channel]`` равно ``-`` вне задачи канала и имени канала внутри
``logger.contextualize(channel=...)`` (см. ChannelDispatcher).
"""

import sys
from pathlib import Path

from loguru import logger

from GENERAL.config import ConsoleLoggingConfig, FileLoggingConfig, LoggingConfig

NO_CHANNEL = "-"


def _ensure_parent_dir_for_file_sink(path_like: object) -> None:
    """Создаёт каталог файла лога. Не-пути (потоки, callable) пропускаются."""
    if isinstance(path_like, (str, Path)):
        Path(path_like).parent.mkdir(parents=True, exist_ok=True)


def _pause_until_user_confirms(message: str) -> None:
    """Ждёт Enter, только если запуск интерактивный (не cron и не systemd)."""
    if sys.stdin is None or not sys.stdin.isatty():
        return
    try:
        input(message)
    except (EOFError, KeyboardInterrupt):
        # Консоль недоступна или ввод прерван: продолжаем без паузы.
        pass


def _add_console_sink(console: ConsoleLoggingConfig) -> None:
    logger.add(sys.stderr, level=console.level, format=console.format, colorize=True)


def _add_file_sink(file: FileLoggingConfig) -> bool:
    """Регистрирует файловый приёмник; False, если файл лога недоступен."""
    try:
        _ensure_parent_dir_for_file_sink(file.path)
        # fmt: off
        logger.add(
            file.path,
            level               =file.level,
            format              =file.format,
            rotation            =file.rotation,
            retention           =file.retention,
            compression         =file.compression,
            encoding            ="utf-8",
            enqueue             =True,
        )
        # fmt: on
    except (OSError, ValueError, TypeError) as e:
        logger.critical(
            "Не удалось открыть файл лога {path!r}, подробный лог не ведётся\n{e}",
            path=file.path,
            e=e,
        )
        return False
    return True


def setup_loguru(config: LoggingConfig, *, pause_on_file_error: bool = True) -> None:
    """
    Перенастраивает Loguru по разделу logging конфигурации.

    Прежние приёмники удаляются, поэтому повторный вызов не дублирует вывод.
    Ошибка файла лога не прерывает зеркалирование: она пишется в консоль и,
    при интерактивном запуске и pause_on_file_error=True, ждёт подтверждения.
    """
    logger.remove()
    logger.configure(extra={"channel": NO_CHANNEL})

    _add_console_sink(config.console)
    if not _add_file_sink(config.file) and pause_on_file_error:
        _pause_until_user_confirms(
            "Ошибка настройки логирования (см. сообщение выше). "
            "Нажмите Enter, чтобы продолжить зеркалирование..."
        )
