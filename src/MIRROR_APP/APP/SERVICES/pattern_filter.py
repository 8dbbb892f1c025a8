"""
pattern_filter.py

Фильтр имён элементов листинга по шаблону not_files / only_files.

Режимы взаимоисключающие:
— EXCLUDE: элемент листинга (файл или каталог), совпавший с шаблоном, пропускается
  и в каталог не выполняется спуск;
— INCLUDE_ONLY: применяется только к именам файлов в момент загрузки, так как
  при обходе каталогов конечные имена файлов ещё неизвестны.
"""

import re
from dataclasses import dataclass

from MIRROR_APP.APP.types import FilterMode
from MIRROR_APP.CONFIG.config import MirrorConfig, grep_to_regex


@dataclass(frozen=True)
class PatternFilter:
    mode: FilterMode = FilterMode.NONE
    pattern: re.Pattern[str] | None = None

    @classmethod
    def from_config(cls, app: MirrorConfig) -> "PatternFilter":
        if app.not_files is not None:
            return cls(FilterMode.EXCLUDE, re.compile(grep_to_regex(app.not_files)))
        if app.only_files is not None:
            return cls(FilterMode.INCLUDE_ONLY, re.compile(grep_to_regex(app.only_files)))
        return cls()

    def _matches(self, name: str) -> bool:
        return self.pattern is not None and self.pattern.search(name) is not None

    def excludes_entry(self, name: str) -> bool:
        """Пропустить элемент листинга (режим EXCLUDE)."""
        return self.mode is FilterMode.EXCLUDE and self._matches(name)

    def excludes_file(self, name: str) -> bool:
        """Пропустить файл при загрузке (режим INCLUDE_ONLY)."""
        return self.mode is FilterMode.INCLUDE_ONLY and not self._matches(name)
