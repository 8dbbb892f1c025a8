from pathlib import Path
from typing import Type, TypeVar, Any

import yaml
from pydantic import BaseModel, ValidationError

from GENERAL.errors import ConfigLoadError, ConfigError

TConfig = TypeVar("TConfig", bound=BaseModel)


def _read_yaml_file(path: Path) -> dict[str, Any]:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigLoadError(f"Неудачное чтение config файла: {path}\n{e}") from e

    try:
        data = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Нарушена структура YAML файла: {path}\n{e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}\nКорень YAML файла должен быть словарём.")
    return data


def merge_deep(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Рекурсивное слияние словарей.

    Вложенные словари сливаются по ключам, остальные значения из override
    перекрывают base. Аргументы не изменяются.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_deep(current, value)
        else:
            merged[key] = value
    return merged


def _include_list(path: Path, includes: Any) -> list[str]:
    """Значение ключа include в виде списка путей (строка или список строк)."""
    if isinstance(includes, str):
        return [includes]
    if isinstance(includes, list) and all(isinstance(x, str) for x in includes):
        return includes
    raise ConfigError(
        f"{path}\nКлюч include должен быть строкой или списком строк (путей)."
    )


def load_yaml_with_include(path: Path, _stack: tuple[Path, ...] = ()) -> dict[str, Any]:
    """
    Читает YAML-конфиг, подставляя файлы из ключа include.

    Пути в include считаются относительно каталога текущего файла. Подключённые
    файлы сливаются по порядку (merge_deep), значения текущего файла перекрывают их.
    Например, общий base.yaml может задать logging.console, а config.yaml
    переопределить только logging.file.path.

    Raises:
        ConfigError: циклический include, неверный тип include, ошибка YAML.
        ConfigLoadError: подключённый файл не читается.
    """
    path = path.resolve()

    if path in _stack:
        chain = " -> ".join(str(p) for p in _stack + (path,))
        raise ConfigError(f"Циклический include в конфиге:\n{chain}")

    data = _read_yaml_file(path)
    includes = data.pop("include", None)
    if not includes:
        return data

    merged: dict[str, Any] = {}
    for rel in _include_list(path, includes):
        included = load_yaml_with_include(path.parent / rel, _stack=_stack + (path,))
        merged = merge_deep(merged, included)

    return merge_deep(merged, data)


def load_config(
    path: str | Path,
    config_cls: Type[TConfig],
    overrides: dict[str, Any] | None = None,
) -> TConfig:
    """
    Загружает конфигурацию из YAML-файла, накладывает overrides (параметры
    командной строки) и валидирует результат через переданный Pydantic-класс.
    """
    cfg_path = Path(path)

    if cfg_path.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigLoadError(
            f"Ожидался YAML-файл конфигурации (.yaml/.yml), но получен: {cfg_path}"
        )

    if not cfg_path.exists():
        raise ConfigLoadError(f"Config файл не найден: {cfg_path}")

    raw_data = load_yaml_with_include(cfg_path)
    if overrides:
        raw_data = merge_deep(raw_data, overrides)

    try:
        return config_cls.model_validate(raw_data)
    except ValidationError as e:
        raise ConfigLoadError(f"{cfg_path}\n{e}") from e
