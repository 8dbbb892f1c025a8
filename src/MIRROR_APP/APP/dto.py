"""DTO и доменные типы приложения зеркалирования (MIRROR_APP).

В модуле собраны:
— контекст выполнения, общий для всех задач каналов,
— результаты обработки каналов и элементы итогового отчёта,
— входные структуры (Input) для сервисов.

Важно:
— Благодаря `from __future__ import annotations` ниже можно использовать аннотации,
  ссылающиеся на классы, объявленные позднее (forward references).
— Ошибки уровня файла/каталога (`DownloadFileError`, `DownloadDirError`) прерывают
  обход своего канала, но не влияют на остальные каналы: диспетчер превращает их
  в `ChannelResult` с `ok=False`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Event
from typing import TypeAlias, TYPE_CHECKING

from MIRROR_APP.APP.types import StatusReport

if TYPE_CHECKING:
    from MIRROR_APP.CONFIG.config import MirrorConfig
    from MIRROR_APP.APP.ports import ProgressSink

ReportItems: TypeAlias = list["ReportItem"]


# fmt: off
@dataclass(frozen=True)
class RuntimeContext:
    """Контекст выполнения приложения.

    Содержит конфигурацию и общие для всех задач каналов объекты.

    Attributes
    ----------
    app
        Конфигурация приложения (каналы, фильтры, пути, HTTP)
    stop_event
        Событие отмены: после установки обход каналов прекращается
        на ближайшей точке проверки (`UserAbend`)
    progress
        Приёмник маркеров прогресса ("." / "," / "+"); None — маркеры не выводятся.
    """
    app                 : MirrorConfig
    stop_event          : Event                 = field(default_factory=Event)
    progress            : ProgressSink | None   = None


@dataclass(frozen=True)
class ChannelResult:
    """Результат обхода одного канала.

    Attributes
    ----------
    channel
        Имя канала (stable, beta, ...)
    ok
        True, если обход канала завершился без ошибок
    error
        Текст ошибки, прервавшей обход (пусто при успехе).
    """
    channel             : str
    ok                  : bool
    error               : str                   = ""


@dataclass(frozen=True)
class ReportItem:
    """Элемент отчёта о выполнении.

    Attributes
    ----------
    name
        Идентификатор (имя канала), как будет показано в отчёте
    status
        Уровень сообщения (INFO/WARNING/ERROR...)
    comment
        Человеко-читаемое описание результата/ошибки.
    """
    name                : str
    status              : StatusReport
    comment             : str


@dataclass(frozen=True)
class ReportItemInput:
    """Входные данные для формирования итогового отчёта."""
    context             : RuntimeContext
    is_success          : bool
    report              : ReportItems
# fmt: on
