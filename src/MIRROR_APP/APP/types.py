from enum import Enum, auto


class FetchAction(Enum):
    """Итог обработки одного удалённого файла загрузчиком."""
    DOWNLOADED = auto()
    UPDATED = auto()
    UNCHANGED = auto()
    FILTERED = auto()


class FilterMode(Enum):
    """Режим фильтра имён: без фильтра, исключение или только совпадающие."""
    NONE = auto()
    EXCLUDE = auto()
    INCLUDE_ONLY = auto()


class ExecutionChoice(Enum):
    """Решение `RunLock`: выполнять цикл или пропустить."""
    RUN = auto()
    SKIP = auto()


class RunState(Enum):
    """Состояние координатора запуска."""
    IDLE = auto()
    LOCKED = auto()
    RUNNING = auto()
    CLEANED = auto()


class StatusReport(Enum):
    """Итог запуска в отчёте: успех или отказ хотя бы одного канала."""
    INFO = auto()
    ERROR = auto()
