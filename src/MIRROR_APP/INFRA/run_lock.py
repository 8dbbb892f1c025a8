import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from GENERAL.errors import LocalFileAccessError
from MIRROR_APP.APP.types import ExecutionChoice
from MIRROR_APP.INFRA.utils import fs_call


@dataclass
class FileRunLock:
    """
    Замок единственного запуска: файл-маркер, существующий, пока идёт зеркалирование.

    Назначение:
        Не даёт двум процессам зеркалирования (например, из cron) работать
        одновременно над одним деревом. Если маркер уже есть — текущий запуск
        пропускается: это штатная ситуация, а не ошибка.

    Примечания:
        - Маркер создаётся атомарно (O_CREAT | O_EXCL), поэтому проверка и захват
          не разделены окном гонки.
        - Маркер, оставшийся от аварийно убитого процесса, снимается только вручную.
    """

    path: Path
    _held: bool = False

    def acquire(self) -> ExecutionChoice:
        """
        Пытается захватить замок.

        Returns:
            ExecutionChoice.RUN если замок захвачен,
            ExecutionChoice.SKIP если замок удерживает другой запуск.

        Raises:
            LocalFileAccessError: если маркер не удалось создать по иной причине.
        """
        fs_call(
            self.path.parent,
            "создание каталога",
            lambda: self.path.parent.mkdir(parents=True, exist_ok=True),
        )
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            logger.warning(
                "Файл {path} уже существует от другого процесса зеркалирования.\n"
                "Удалите его вручную, чтобы принудительно запустить зеркалирование",
                path=self.path,
            )
            return ExecutionChoice.SKIP
        except OSError as e:
            raise LocalFileAccessError(
                f"Ошибка файловой системы при создании замка {self.path}:\n{e}"
            ) from e

        with os.fdopen(fd, "w") as f:
            f.write(f"{os.getpid()}\n")
        self._held = True
        return ExecutionChoice.RUN

    def release(self) -> None:
        """Снимает замок, если он был захвачен этим объектом."""
        if not self._held:
            return
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            # Снятие выполняется в finally: не перекрываем исходную причину выхода.
            logger.error("Не удалось удалить файл замка {path}\n{e}", path=self.path, e=e)
        self._held = False


@dataclass(frozen=True)
class FileFailureMarker:
    """
    Маркер неудачного запуска: файл, создаваемый любой упавшей задачей канала.

    Снимается только в начале следующего запуска, чтобы между запусками
    оператор видел, что последний прогон завершился с ошибкой.
    """

    path: Path

    def set(self) -> None:
        def action() -> None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch()

        fs_call(self.path, "создание маркера ошибки", action)

    def clear(self) -> None:
        fs_call(
            self.path, "удаление маркера ошибки", lambda: self.path.unlink(missing_ok=True)
        )

    def is_set(self) -> bool:
        return self.path.exists()
