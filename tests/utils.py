"""Общие помощники тестов: имитация сервера релизов и приёмник прогресса."""

from __future__ import annotations

import os
from pathlib import Path
from threading import Event

from GENERAL.errors import DownloadDirError, DownloadFileError
from MIRROR_APP.APP.SERVICES.cache_validator import cache_validator


def listing(*hrefs: str) -> str:
    """HTML-листинг в стиле Caddy browse: ссылка на родителя + элементы href="./NAME"."""
    rows = ['<tr><td><a href="../">Go up</a></td></tr>']
    rows += [f'<tr><td><a href="./{h}"><span class="name">{h}</span></a></td></tr>' for h in hrefs]
    return "<html><body><table>\n" + "\n".join(rows) + "\n</table></body></html>"


class FakeServer:
    """Удалённое дерево сервера релизов в памяти.

    pages — текстовые ресурсы (листинги, version.txt), files — файлы (содержимое, mtime),
    failing — URL, обращение к которым завершается сетевой ошибкой.
    """

    def __init__(self) -> None:
        self.pages: dict[str, str] = {}
        self.files: dict[str, tuple[bytes, int]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def add_dir(self, url: str, *hrefs: str) -> None:
        self.pages[url] = listing(*hrefs)

    def add_text(self, url: str, text: str) -> None:
        self.pages[url] = text

    def add_file(self, url: str, content: bytes, mtime: int = 1_600_000_000) -> None:
        self.files[url] = (content, mtime)

    def calls_of(self, method: str) -> list[str]:
        return [url for m, url in self.calls if m == method]


class FakeHttp:
    """HTTP-клиент поверх FakeServer; ETag вычисляется так же, как у Caddy."""

    def __init__(self, server: FakeServer) -> None:
        self.server = server
        self.closed = False

    def get_text(self, url: str) -> str:
        self.server.calls.append(("GET_TEXT", url))
        if url in self.server.failing or url not in self.server.pages:
            raise DownloadDirError(f"Ошибка при чтении {url!r}")
        return self.server.pages[url]

    def probe(self, url: str, etag: str) -> int:
        self.server.calls.append(("HEAD", url))
        if url in self.server.failing or url not in self.server.files:
            raise DownloadFileError(f"Ошибка при получении ETag {url!r}")
        content, mtime = self.server.files[url]
        return 304 if etag == cache_validator(mtime, len(content)) else 200

    def download(self, url: str, dest: Path, stop_event: Event | None = None) -> float | None:
        self.server.calls.append(("GET", url))
        if url in self.server.failing or url not in self.server.files:
            raise DownloadFileError(f"Ошибка при загрузке {url!r}")
        content, mtime = self.server.files[url]
        dest.write_bytes(content)
        return float(mtime)

    def close(self) -> None:
        self.closed = True


def set_mtime(path: Path, mtime: int) -> None:
    os.utime(path, (mtime, mtime))


class RecordingProgress:
    """Приёмник маркеров прогресса для проверок."""

    def __init__(self) -> None:
        self.marks = []
        self.newlines = 0

    def mark(self, action) -> None:
        self.marks.append(action)

    def newline(self) -> None:
        self.newlines += 1