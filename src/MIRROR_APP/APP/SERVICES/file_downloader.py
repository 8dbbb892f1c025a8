"""
file_downloader.py

Условная загрузка одного файла с сервера релизов.

Основной сценарий:
1) Если задан фильтр only_files и имя файла с ним не совпадает — пропустить без сети.
2) Если локального файла нет — скачать.
3) Если файл есть — вычислить его ETag (cache_validator) и спросить сервер HEAD-запросом
   с If-None-Match. На 304 ничего не делать, иначе скачать заново.
4) После скачивания выставить локальному файлу время модификации сервера, чтобы ETag
   при следующем запуске снова совпал с серверным.

Ошибки сети (DownloadFileError) не перехватываются: они прерывают обход каталога
и, в итоге, задачу канала.
"""

import os
from pathlib import Path

from loguru import logger

from MIRROR_APP.APP.dto import RuntimeContext
from MIRROR_APP.APP.ports import HttpClient
from MIRROR_APP.APP.types import FetchAction
from MIRROR_APP.APP.SERVICES.cache_validator import local_cache_validator
from MIRROR_APP.APP.SERVICES.pattern_filter import PatternFilter
from MIRROR_APP.INFRA.utils import fs_call

NOT_MODIFIED = 304


class FileDownloader:
    """
    Загружает файлы канала по одному, используя ETag сервера без локального кэша.

    Особенности:
    - ETag вычисляется только из mtime и размера локального файла.
    - Время модификации берётся с сервера (Last-Modified), а не с момента загрузки.
    """

    def __init__(
            self,
            ctx: RuntimeContext,
            http: HttpClient,
            pattern_filter: PatternFilter | None = None,
    ) -> None:
        self.ctx = ctx
        self.http = http
        self.pattern_filter = pattern_filter or PatternFilter.from_config(ctx.app)

    def fetch(self, url: str, local_path: Path) -> FetchAction:
        """
        Привести локальный файл `local_path` в соответствие с `url`.

        Args:
            url: Полный URL файла на сервере.
            local_path: Путь к локальной копии.

        Returns:
            FetchAction: что было сделано с файлом.

        Raises:
            DownloadFileError: сбой HEAD-запроса или загрузки.
            LocalFileAccessError: сбой локальной файловой системы.
        """
        if self.pattern_filter.excludes_file(local_path.name):
            logger.debug(
                "Пропуск {file}: не подходит под шаблон only_files {pattern!r}",
                file=local_path,
                pattern=self.ctx.app.only_files,
            )
            return FetchAction.FILTERED

        if local_path.is_file():
            etag = local_cache_validator(local_path)
            status = self.http.probe(url, etag)
            if status == NOT_MODIFIED:
                logger.debug("Без изменений {url}", url=url)
                self._mark(FetchAction.UNCHANGED)
                return FetchAction.UNCHANGED
            action = FetchAction.UPDATED
            logger.info("Обновление {url}", url=url)
        else:
            action = FetchAction.DOWNLOADED
            logger.info("Загрузка {url}", url=url)

        self._mark(action)
        remote_mtime = self.http.download(url, local_path, self.ctx.stop_event)
        self._apply_remote_mtime(local_path, remote_mtime)
        return action

    def _apply_remote_mtime(self, local_path: Path, remote_mtime: float | None) -> None:
        """Выставляет файлу время модификации сервера (аналог curl -R)."""
        if remote_mtime is None:
            logger.warning(
                "Сервер не сообщил Last-Modified для {file}: ETag при следующем запуске не совпадёт",
                file=local_path,
            )
            return
        fs_call(
            local_path,
            "установка времени модификации",
            lambda: os.utime(local_path, (remote_mtime, remote_mtime)),
        )

    def _mark(self, action: FetchAction) -> None:
        if self.ctx.progress is not None:
            self.ctx.progress.mark(action)
