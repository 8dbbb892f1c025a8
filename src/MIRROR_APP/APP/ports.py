# Порты приложения: контракты, через которые контроллер и сервисы
# обращаются к инфраструктуре (HTTP, файлы-маркеры, вывод).

from pathlib import Path
from threading import Event
from typing import Protocol

from MIRROR_APP.APP.types import ExecutionChoice, FetchAction
from MIRROR_APP.APP.dto import ChannelResult, ReportItemInput


# ---------- HTTP transport ----------
class HttpClient(Protocol):
    def get_text(self, url: str) -> str: ...

    def probe(self, url: str, etag: str) -> int: ...

    def download(self, url: str, dest: Path, stop_event: Event | None = None) -> float | None: ...

    def close(self) -> None: ...


# ---------- progress markers ----------
class ProgressSink(Protocol):
    def mark(self, action: FetchAction) -> None: ...

    def newline(self) -> None: ...


# ---------- run coordination ----------
class RunLock(Protocol):
    def acquire(self) -> ExecutionChoice: ...

    def release(self) -> None: ...


class FailureMarker(Protocol):
    def set(self) -> None: ...

    def clear(self) -> None: ...

    def is_set(self) -> bool: ...


# ---------- channel dispatch ----------
class ChannelDispatcher(Protocol):
    def run(self, channels: list[str]) -> list[ChannelResult]: ...

    def cancel(self) -> None: ...


# ---------- Вывод сводного отчёта
class ReportService(Protocol):
    def run(self, data: ReportItemInput) -> None: ...
