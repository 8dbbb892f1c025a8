"""
directory_walker.py

Рекурсивный обход каталога сервера релизов и его зеркалирование в локальный каталог.

Сервер (Caddy, режим browse) отдаёт листинг HTML-страницей, в которой каждый элемент
каталога — ссылка вида href="./NAME". Каталоги оканчиваются на "/".
Псевдокаталог "current/" — ссылка на последний релиз: вместо спуска в него читается
current/version.txt и локально создаётся символическая ссылка current → <версия>.

Обход строго последовательный, в глубину, в порядке листинга. Рабочая директория
процесса не меняется: каждый вызов получает явную пару (URL каталога, локальный путь).
"""

import re
from pathlib import Path
from urllib.parse import unquote

from loguru import logger

from GENERAL.errors import UserAbend, VersionFileError
from MIRROR_APP.APP.dto import RuntimeContext
from MIRROR_APP.APP.ports import HttpClient
from MIRROR_APP.APP.SERVICES.file_downloader import FileDownloader
from MIRROR_APP.APP.SERVICES.pattern_filter import PatternFilter
from MIRROR_APP.APP.SERVICES.version_gate import should_skip
from MIRROR_APP.INFRA.utils import replace_symlink, safe_mkdir

HREF = re.compile(r'href="\./([^"]*)"')
CURRENT = "current/"
VERSION_FILE = "current/version.txt"
VERSION_KEY = "FLATCAR_VERSION="


def parse_listing(html: str) -> list[str]:
    """
    Ссылки листинга вида href="./NAME" в порядке появления (без "./", без повторов).
    """
    return [href for href in dict.fromkeys(HREF.findall(html)) if href]


def parse_version_file(text: str) -> str | None:
    """Значение строки FLATCAR_VERSION=<value> или None, если строки нет или она пустая."""
    for line in text.splitlines():
        line = line.strip()
        if line.startswith(VERSION_KEY):
            return line[len(VERSION_KEY):].strip() or None
    return None


def _is_safe_name(name: str) -> bool:
    """Имя не должно выводить за пределы локального каталога."""
    bare = name.rstrip("/")
    return bool(bare) and "/" not in bare and bare not in (".", "..")


class DirectoryWalker:
    """
    Обходит один канал: листинги, ссылка current, отсечение версий и шаблонов, загрузка файлов.

    Атрибуты:
        ctx: контекст выполнения (конфигурация, событие отмены).
        http: HTTP-клиент канала.
        downloader: загрузчик отдельных файлов.
        pattern_filter: фильтр not_files/only_files.
    """

    def __init__(
            self,
            ctx: RuntimeContext,
            http: HttpClient,
            downloader: FileDownloader | None = None,
            pattern_filter: PatternFilter | None = None,
    ) -> None:
        self.ctx = ctx
        self.http = http
        self.pattern_filter = pattern_filter or PatternFilter.from_config(ctx.app)
        self.downloader = downloader or FileDownloader(ctx, http, self.pattern_filter)

    def walk(self, directory_url: str, local_dir: Path) -> None:
        """
        Зеркалирует каталог `directory_url` (оканчивается на "/") в `local_dir`.

        Raises:
            DownloadDirError: не удалось получить листинг или version.txt.
            VersionFileError: в version.txt нет значения FLATCAR_VERSION.
            DownloadFileError: не удалось загрузить файл.
            LocalFileAccessError: ошибка локальной файловой системы.
            UserAbend: обход прерван событием отмены.
        """
        logger.debug("Вход в каталог {url}", url=directory_url)
        listing = self.http.get_text(directory_url)

        for href in parse_listing(listing):
            self._check_cancelled()
            self._process_entry(directory_url, local_dir, href)

    def _process_entry(self, directory_url: str, local_dir: Path, href: str) -> None:
        name = unquote(href)

        if self.pattern_filter.excludes_entry(name):
            logger.debug("Пропуск по шаблону: {name}", name=name)
            return

        if not _is_safe_name(name):
            logger.warning(
                "Пропуск элемента с недопустимым именем {name!r} в {url}",
                name=name,
                url=directory_url,
            )
            return

        if href == CURRENT:
            self._resolve_current(directory_url, local_dir)
            return

        if href.endswith("/"):
            if should_skip(name, self.ctx.app.above_version):
                logger.debug("Пропуск каталога по версии: {name}", name=name)
                return
            sub_dir = local_dir / name.rstrip("/")
            safe_mkdir(sub_dir)
            self.walk(directory_url + href, sub_dir)
            return

        self.downloader.fetch(directory_url + href, local_dir / name)

    def _resolve_current(self, directory_url: str, local_dir: Path) -> None:
        """Создаёт/заменяет ссылку local_dir/current → версия из current/version.txt."""
        url = directory_url + VERSION_FILE
        version = parse_version_file(self.http.get_text(url))
        if version is None:
            raise VersionFileError(
                f"Не удалось получить версию из {url}: нет строки {VERSION_KEY}<версия>"
            )
        replace_symlink(local_dir / "current", version)
        logger.debug("current → {version}", version=version)

    def _check_cancelled(self) -> None:
        if self.ctx.stop_event.is_set():
            raise UserAbend("Обход прерван")
