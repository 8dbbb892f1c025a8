"""
Утилиты для безопасных операций с файловой системой.

Модуль содержит:
- fs_call(): единая обёртка над файловыми операциями для нормализации исключений.
- safe_mkdir(): создание директории с parents=True, exist_ok=True.
- replace_symlink(): создание/замена символической ссылки.
"""

from typing import TypeVar, Callable
from pathlib import Path

from GENERAL.errors import LocalFileAccessError

T = TypeVar("T")


def fs_call(path: Path, action: str, fn: Callable[[], T]) -> T:
    """Выполняет файловую операцию `fn()` и преобразует ошибки ОС в LocalFileAccessError.

    Args:
        path: Путь, для которого выполняется действие (используется в тексте ошибок).
        action: Короткое описание операции (например, "удаление", "создание", "чтение").
        fn: Функция без аргументов, выполняющая реальную операцию.

    Returns:
        Результат `fn()`.

    Raises:
        LocalFileAccessError: При PermissionError или любом OSError.
    """
    try:
        return fn()
    except LocalFileAccessError:
        raise
    except PermissionError as e:
        raise LocalFileAccessError(f"Нет доступа к {path}") from e
    except OSError as e:
        raise LocalFileAccessError(
            f"Ошибка файловой системы при {action} для {path}:\n{e}"
        ) from e


def safe_mkdir(dir_path: Path) -> None:
    """Создаёт директорию и родителей, если их нет."""
    fs_call(
        dir_path,
        "создание каталога",
        lambda: Path(dir_path).mkdir(parents=True, exist_ok=True),
    )


def replace_symlink(link: Path, target: str) -> None:
    """Создаёт символическую ссылку `link` → `target`, удаляя прежнюю ссылку/файл."""

    def action() -> None:
        link.unlink(missing_ok=True)
        link.symlink_to(target)

    fs_call(link, "создание ссылки", action)
