import sys
from dataclasses import dataclass, field
from threading import Lock
from typing import TextIO

from MIRROR_APP.APP.types import FetchAction

# fmt: off
MARKERS = {
    FetchAction.DOWNLOADED  : ".",
    FetchAction.UNCHANGED   : ",",
    FetchAction.UPDATED     : "+",
}
# fmt: on

LEGEND = '("." — загрузка, "," — без изменений, "+" — обновление)'


@dataclass
class ProgressPrinter:
    """Печатает маркеры прогресса в stdout одной строкой.

    Вызывается из задач всех каналов одновременно, поэтому запись защищена замком.
    Отфильтрованные файлы маркера не получают.
    """

    stream: TextIO = field(default_factory=lambda: sys.stdout)
    _lock: Lock = field(default_factory=Lock)
    _dirty: bool = False

    def mark(self, action: FetchAction) -> None:
        marker = MARKERS.get(action)
        if marker is None:
            return
        with self._lock:
            self.stream.write(marker)
            self.stream.flush()
            self._dirty = True

    def newline(self) -> None:
        """Завершает строку маркеров, если в ней что-то было напечатано."""
        with self._lock:
            if self._dirty:
                self.stream.write("\n")
                self.stream.flush()
                self._dirty = False
