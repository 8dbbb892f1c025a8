from pathlib import Path
import sys

# Каталог с config.yaml по умолчанию в дереве исходников
_DEV_CONFIG_DIR = Path(__file__).resolve().parents[1] / "MIRROR_APP" / "CONFIG"


def _exe_dir() -> Path:
    return Path(sys.executable).resolve().parent


def get_default_config_path(config_name: str) -> Path:
    """Путь к конфигурации по умолчанию: рядом с exe (frozen) или в MIRROR_APP/CONFIG."""
    if getattr(sys, "frozen", False):
        return _exe_dir() / config_name
    return _DEV_CONFIG_DIR / config_name
