"""
Конфигурация приложения зеркалирования и её валидация.

Содержит основную модель настроек приложения (MirrorConfig) на базе общей
CommonConfig. Загрузка из YAML выполняется GENERAL.loadconfig.load_config().
"""

import re
import tempfile
from pathlib import Path
from typing import Self, cast

from pydantic import (
    model_validator,
    field_validator,
    NonNegativeInt,
    NonNegativeFloat,
    PositiveInt,
    PositiveFloat,
    Field,
)
from pydantic_settings import SettingsConfigDict

from GENERAL.config import CommonConfig

DEFAULT_CHANNELS = ["stable", "beta", "alpha", "edge"]
CHANNEL_NAME = re.compile(r"^[a-z0-9][a-z0-9-]*$")


def grep_to_regex(pattern: str) -> str:
    """Переводит шаблон в стиле grep ('vmware\\|virtualbox') в регулярное выражение Python."""
    return pattern.replace(r"\|", "|")


class MirrorConfig(CommonConfig):
    """
    Конфигурация зеркалирования сервера релизов.

    Примечание:
        not_files и only_files взаимоисключающие: одновременное задание
        отклоняется при валидации.
        lock_file и error_file, если не заданы, размещаются во временном
        каталоге системы (см. _derive_service_files()).
    """

    # fmt: off
    # Каналы и сервер
    channels                        : list[str]                     = Field(default_factory=lambda: list(DEFAULT_CHANNELS))
    channel_url_template            : str                           = "https://{channel}.release.flatcar-linux.net/"

    # Фильтры
    above_version                   : NonNegativeInt | None         = None
    not_files                       : str | None                    = None
    only_files                      : str | None                    = None

    # HTTP
    http_retries                    : NonNegativeInt                = 5
    http_backoff_factor             : NonNegativeFloat              = 1
    http_connect_timeout_sec        : PositiveFloat                 = 10
    http_timeout_sec                : PositiveFloat                 = 60
    http_chunk_size                 : PositiveInt                   = 64 * 1024
    user_agent                      : str                           = "release-mirror/1.0"

    # Служебные файлы
    lock_file                       : Path | None                   = None
    error_file                      : Path | None                   = None
    # fmt: on

    @field_validator("channels")
    @classmethod
    def _check_channels(cls, value: list[str]) -> list[str]:
        channels = [c.strip() for c in value]
        if not channels:
            raise ValueError("Не задан ни один канал")
        for channel in channels:
            if not CHANNEL_NAME.match(channel):
                raise ValueError(f"Недопустимое имя канала: {channel!r}")
        if len(set(channels)) != len(channels):
            raise ValueError(f"Каналы повторяются: {channels}")
        return channels

    @field_validator("channel_url_template")
    @classmethod
    def _check_url_template(cls, value: str) -> str:
        if "{channel}" not in value:
            raise ValueError("channel_url_template должен содержать {channel}")
        if not value.endswith("/"):
            raise ValueError("channel_url_template должен оканчиваться на '/'")
        return value

    @field_validator("not_files", "only_files")
    @classmethod
    def _check_pattern(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        try:
            re.compile(grep_to_regex(value))
        except re.error as e:
            raise ValueError(f"Некорректный шаблон {value!r}: {e}") from e
        return value

    @model_validator(mode="after")
    def _check_filters_exclusive(self) -> Self:
        if self.not_files is not None and self.only_files is not None:
            raise ValueError(
                "Можно задать только один из параметров: not_files или only_files"
            )
        return self

    @model_validator(mode="after")
    def _derive_service_files(self) -> Self:
        """
        Если lock_file/error_file не заданы — размещаем их во временном каталоге.
        """
        tmp = Path(tempfile.gettempdir())
        if self.lock_file is None:
            self.lock_file = tmp / "mirror-lock"
        if self.error_file is None:
            self.error_file = tmp / "mirror-err"
        return self

    @property
    def lock_file_path(self) -> Path:
        return cast(Path, self.lock_file)

    @property
    def error_file_path(self) -> Path:
        return cast(Path, self.error_file)

    def channel_url(self, channel: str) -> str:
        """Базовый URL канала, например https://stable.release.flatcar-linux.net/"""
        return self.channel_url_template.format(channel=channel)

    model_config = SettingsConfigDict(
        # Запрещаем неизвестные ключи в YAML, чтобы не “проглатывать” опечатки.
        extra="forbid",
    )
