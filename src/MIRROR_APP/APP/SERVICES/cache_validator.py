"""
cache_validator.py

Синтез ETag локального файла по схеме сервера релизов (Caddy).

Caddy формирует ETag как конкатенацию времени модификации (секунды Unix)
и размера файла, каждое в системе счисления по основанию 36, в кавычках.
Поэтому, сохранив у локальной копии время модификации сервера, можно получить
тот же ETag без отдельного хранилища метаданных и отправить его в If-None-Match.
"""

from pathlib import Path

from GENERAL.errors import LocalFileAccessError
from MIRROR_APP.INFRA.utils import fs_call

DIGITS36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def base36(value: int) -> str:
    """Запись неотрицательного целого по основанию 36 (0-9, затем a-z), старший разряд первым."""
    if value < 0:
        raise ValueError(f"Ожидалось неотрицательное число, получено {value}")
    if value == 0:
        return "0"

    digits: list[str] = []
    while value:
        value, rest = divmod(value, 36)
        digits.append(DIGITS36[rest])
    return "".join(reversed(digits))


def cache_validator(mtime: int, size: int) -> str:
    """ETag вида '"<mtime36><size36>"' для пары (время модификации, размер)."""
    return f'"{base36(mtime)}{base36(size)}"'


def local_cache_validator(path: Path) -> str:
    """
    ETag локального файла по его stat().

    Raises:
        LocalFileAccessError: если stat() не удался.
    """
    st = fs_call(path, "чтение атрибутов", lambda: path.stat())
    if st.st_mtime < 0:
        raise LocalFileAccessError(f"Отрицательное время модификации у {path}")
    return cache_validator(int(st.st_mtime), st.st_size)
