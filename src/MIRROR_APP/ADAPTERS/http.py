"""http.py

Обёртка над requests.Session для обращения к серверу релизов:
- чтение листинга каталога и текстовых файлов (version.txt);
- условный HEAD-запрос с If-None-Match (проверка ETag);
- потоковое скачивание файла в уникальный временный файл с атомарной заменой
  и чтением времени модификации сервера (Last-Modified).

Повторы на временных сбоях выполняет urllib3.Retry, подключённый к сессии
(аналог curl --retry 5). Все сетевые вызовы идут через _http_call(),
который переводит исключения requests в доменные ошибки.
"""

import os
import tempfile
from email.utils import parsedate_to_datetime
from pathlib import Path
from threading import Event
from typing import Callable, Type, TypeVar

import requests
from loguru import logger
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from urllib3.util.retry import Retry

from GENERAL.errors import DownloadDirError, DownloadFileError, UserAbend
from MIRROR_APP.CONFIG.config import MirrorConfig
from MIRROR_APP.INFRA.utils import fs_call

# Статусы, при которых имеет смысл повторить запрос
RETRY_STATUSES = (408, 429, 500, 502, 503, 504)

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


def build_session(app: MirrorConfig) -> requests.Session:
    """Создаёт сессию с политикой повторов и User-Agent из конфигурации."""
    session = requests.Session()
    retry = Retry(
        total=app.http_retries,
        backoff_factor=app.http_backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset({"GET", "HEAD"}),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": app.user_agent})
    return session


def parse_http_date(value: str | None) -> float | None:
    """Переводит заголовок Last-Modified в секунды Unix; None, если заголовка нет или он испорчен."""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value).timestamp()
    except (TypeError, ValueError) as e:
        logger.warning("Некорректный заголовок Last-Modified {!r}: {}", value, e)
        return None


class Http:
    """HTTP-клиент канала.

    Атрибуты:
        app: конфигурация (таймауты, размер блока, повторы).
        session: requests.Session (у каждого канала своя, сессии не разделяются между потоками).

    Примечание:
        Метод _http_call() — центральная точка перевода сетевых ошибок в доменные.
    """

    def __init__(self, app: MirrorConfig, session: requests.Session | None = None) -> None:
        self.app = app
        self.session = session if session is not None else build_session(app)
        # (соединение, чтение): read-таймаут ограничивает паузу между байтами, а не всю загрузку
        self.timeout = (app.http_connect_timeout_sec, app.http_timeout_sec)
        self.chunk_size = app.http_chunk_size
        # Ответ, тело которого сейчас читается; close() из другого потока обрывает чтение
        self._streaming: requests.Response | None = None

    # -------------------------
    # --- _http_call()
    # -------------------------
    def _http_call(self, action: Callable[[], T], *, what: str, err_cls: Type[E]) -> T:
        """Единая обёртка для HTTP-вызовов: классификация ошибок.

        Повторы временных сбоев уже выполнены urllib3.Retry внутри сессии, поэтому
        любое исключение requests здесь окончательное и переводится в `err_cls`.
        Прочие исключения (локальная ФС, отмена) пробрасываются без изменений.

        Parameters
        ----------
        action : Callable[[], T]
            Функция без аргументов, выполняющая один HTTP-запрос.
        what : str
            Человекочитаемое описание операции (для сообщений об ошибках).
        err_cls : type[E]
            Класс доменного исключения.
        """
        try:
            return action()
        except RequestException as e:
            raise err_cls(f"Ошибка при {what}:\n{e}") from e

    # ---------------------------
    # Текстовые ресурсы
    # ---------------------------
    def get_text(self, url: str) -> str:
        """GET текстового ресурса (листинг каталога, version.txt)."""

        def action() -> str:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.content.decode("utf-8", errors="replace")

        return self._http_call(
            action, what=f"чтении {url!r}", err_cls=DownloadDirError
        )

    # ---------------------------
    # Условная проверка
    # ---------------------------
    def probe(self, url: str, etag: str) -> int:
        """HEAD с If-None-Match; возвращает HTTP-статус (304 — файл не изменился)."""

        def action() -> int:
            response = self.session.head(
                url,
                headers={"If-None-Match": etag},
                allow_redirects=True,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.status_code

        return self._http_call(
            action, what=f"получении ETag {url!r}", err_cls=DownloadFileError
        )

    # ---------------------------
    # Скачивание
    # ---------------------------
    def _stream_to(self, url: str, part: Path, stop_event: Event | None) -> str | None:
        """Пишет тело ответа в `part` блоками; проверяет отмену между блоками."""
        with self.session.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            self._streaming = response
            try:
                with fs_call(part, "создание файла", lambda: open(part, "wb")) as f:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if stop_event is not None and stop_event.is_set():
                            raise UserAbend(f"Загрузка {url} прервана")
                        if chunk:
                            fs_call(part, "запись", lambda: f.write(chunk))
            except Exception:
                # Чтение оборвано закрытием клиента при отмене
                if stop_event is not None and stop_event.is_set():
                    raise UserAbend(f"Загрузка {url} прервана") from None
                raise
            finally:
                self._streaming = None
            return response.headers.get("Last-Modified")

    def download(self, url: str, dest: Path, stop_event: Event | None = None) -> float | None:
        """Скачивает `url` в `dest` через временный файл рядом с ним и атомарную замену.

        Временный файл создаётся через mkstemp со скрытым уникальным именем, поэтому
        он не совпадает ни с одним зеркалируемым файлом каталога (например, `X.part`).

        Returns:
            Время модификации файла на сервере (секунды Unix) или None,
            если сервер его не сообщил.

        Raises:
            DownloadFileError: сетевая ошибка или HTTP-статус >= 400.
            LocalFileAccessError: ошибка локальной файловой системы.
            UserAbend: загрузка прервана событием отмены.
        """
        fd, name = fs_call(
            dest.parent,
            "создание временного файла",
            lambda: tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.", suffix=".part"),
        )
        os.close(fd)
        part = Path(name)
        try:
            last_modified = self._http_call(
                lambda: self._stream_to(url, part, stop_event),
                what=f"загрузке {url!r}",
                err_cls=DownloadFileError,
            )
            fs_call(dest, "замена файла", lambda: os.replace(part, dest))
        finally:
            part.unlink(missing_ok=True)

        return parse_http_date(last_modified)

    def close(self) -> None:
        """Закрывает читаемый ответ (если есть), затем сессию и её пул соединений.

        Может вызываться из другого потока (ChannelDispatcher.cancel): закрытие ответа
        обрывает ожидание данных в iter_content().
        """
        response = self._streaming
        if response is not None:
            response.close()
        self.session.close()
