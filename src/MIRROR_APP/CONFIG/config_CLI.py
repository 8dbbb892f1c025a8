from pathlib import Path
from typing import Any

import argparse

from GENERAL.errors import ConfigError

DESCRIPTION = (
    "Зеркалирует сервер релизов в локальный каталог: отдельная папка на каждый "
    "канал, файлы только создаются и обновляются, но никогда не удаляются. "
    "Каналы загружаются параллельно, файлы внутри канала — последовательно."
)


def channels_type(s: str) -> list[str]:
    channels = [c.strip() for c in s.split(",") if c.strip()]
    if not channels:
        raise argparse.ArgumentTypeError(f"Пустой список каналов: {s!r}")
    return channels


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="release-mirror", description=DESCRIPTION, exit_on_error=False
    )
    p.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Путь к файлу конфигурации (по умолчанию config.yaml приложения)",
    )
    p.add_argument(
        "--above-version",
        type=int,
        metavar="VERSION",
        help="Пропускать каталоги с версией ниже VERSION (например, 2000)",
    )
    filters = p.add_mutually_exclusive_group()
    filters.add_argument(
        "--not-files",
        metavar="FILTER",
        help="Пропускать файлы/каталоги, подходящие под шаблон (например, 'vmware\\|virtualbox')",
    )
    filters.add_argument(
        "--only-files",
        metavar="FILTER",
        help="Загружать только файлы, подходящие под шаблон (например, 'qemu')",
    )
    p.add_argument(
        "--logfile",
        type=Path,
        metavar="FILE",
        help="Файл подробного лога",
    )
    p.add_argument(
        "--channels",
        type=channels_type,
        metavar="CHANNELS",
        help="Список каналов через запятую (например, stable,beta). По умолчанию — все",
    )
    p.add_argument(
        "--local-dir",
        type=Path,
        metavar="DIR",
        help="Корень локального зеркала",
    )
    try:
        return p.parse_args(argv)
    except argparse.ArgumentError as e:
        raise ConfigError(f"Ошибка параметров запуска:\n{e}") from None


def cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Переводит заданные параметры командной строки в словарь поверх YAML."""
    overrides: dict[str, Any] = {}
    if args.above_version is not None:
        overrides["above_version"] = args.above_version
    if args.not_files is not None:
        overrides["not_files"] = args.not_files
        overrides["only_files"] = None
    if args.only_files is not None:
        overrides["only_files"] = args.only_files
        overrides["not_files"] = None
    if args.channels is not None:
        overrides["channels"] = args.channels
    if args.local_dir is not None:
        overrides["local_dir"] = args.local_dir
    if args.logfile is not None:
        overrides["logging"] = {"file": {"path": args.logfile.resolve()}}
    return overrides
