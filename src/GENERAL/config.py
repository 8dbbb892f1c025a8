from platformdirs import user_log_dir
from pathlib import Path
from typing import Self

from pydantic_settings import SettingsConfigDict
from pydantic import (
    model_validator,
    Field,
    BaseModel,
)

APP_NAME = "Release-Mirror"
APP_AUTHOR = "Kinvolk"


def default_log_dir() -> Path:
    """Системная пользовательская директория логов приложения."""
    return Path(user_log_dir(appname=APP_NAME, appauthor=APP_AUTHOR))


# ----------------------------
# Logging config (loguru)
# ----------------------------


class ConsoleLoggingConfig(BaseModel):
    """
    Настройки логирования в консоль (loguru).

    Консольный лог пишется в stderr и не должен забивать маркеры прогресса
    в stdout, поэтому уровень по умолчанию — WARNING.

    Attributes:
        level: Уровень логирования (например, "INFO", "DEBUG").
        format: Формат сообщения для loguru (разметка/плейсхолдеры loguru).
    """

    level: str = "WARNING"
    format: str = (
        "<green>{time:HH:mm:ss}</green> | <level>{level}</level> | "
        "{extra[channel]} | {message}"
    )


class FileLoggingConfig(BaseModel):
    """
    Настройки подробного лога в файл (loguru).

    Attributes:
        level: Уровень логирования для файла.
        path: Путь к файлу лога (относительный или абсолютный).
        name: Имя файла лога в системной директории логов, если path не задан.
        rotation: Правило ротации (например, "1 MB", "1 day" и т.п по правилам loguru).
        format: Формат записи в файл.
        retention: Политика хранения старых логов.
        compression: Сжатие архивов логов.
    """

    level: str = "DEBUG"
    path: Path | None = None
    name: str = "mirror.log"
    rotation: str = "10 MB"
    format: str = (
        "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {thread.name} | "
        "{extra[channel]} | {message}"
    )
    retention: str = "7 days"
    compression: str = "zip"

    @model_validator(mode="after")
    def _finalize(self) -> Self:
        if self.path is None:
            self.path = default_log_dir() / self.name
        return self


class LoggingConfig(BaseModel):
    """
    Группа настроек логирования.

    Attributes:
        console: Настройки консольного логирования.
        file: Настройки файлового логирования.
    """

    console: ConsoleLoggingConfig = Field(default_factory=ConsoleLoggingConfig)
    file: FileLoggingConfig = Field(default_factory=FileLoggingConfig)

    model_config = SettingsConfigDict(
        # Запрещаем неизвестные ключи в YAML, чтобы не “проглатывать” опечатки.
        extra="forbid",
    )


class CommonConfig(BaseModel):
    """
    Общая часть конфигурации приложений.

    Attributes:
        local_dir: Корень локального зеркала (в нём создаётся папка на каждый канал).
        logging: Настройки логирования.
    """

    # fmt: off
    local_dir                       : Path                          = Path(".")
    logging                         : LoggingConfig                 = Field(default_factory=LoggingConfig)
    # fmt: on
