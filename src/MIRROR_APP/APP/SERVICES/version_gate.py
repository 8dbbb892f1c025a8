"""Отсечение каталогов версий ниже заданного порога (above_version)."""


def version_of(name: str) -> int | None:
    """
    Номер версии каталога: часть имени до первой точки, если это целое число.

    Примеры:
        - '2191.5.0/' → 2191
        - 'current/'  → None
        - 'foo.d/'    → None
    """
    head = name.rstrip("/").partition(".")[0]
    try:
        return int(head)
    except ValueError:
        return None


def should_skip(name: str, floor: int | None) -> bool:
    """True, если порог задан, имя — каталог версии и его номер меньше порога."""
    if floor is None:
        return False
    version = version_of(name)
    return version is not None and version < floor
