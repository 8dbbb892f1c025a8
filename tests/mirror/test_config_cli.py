from pathlib import Path

import pytest

from GENERAL.errors import ConfigError
from MIRROR_APP.CONFIG.config_CLI import cli_overrides, parse_args


def test_no_arguments():
    args = parse_args([])
    assert args.config is None
    assert cli_overrides(args) == {}


def test_all_arguments(tmp_path):
    log = tmp_path / "mirror.log"
    args = parse_args(
        [
            "cfg.yaml",
            "--above-version",
            "2000",
            "--not-files",
            r"vmware\|virtualbox",
            "--logfile",
            str(log),
            "--channels",
            "stable, beta",
            "--local-dir",
            str(tmp_path),
        ]
    )

    assert args.config == Path("cfg.yaml")
    assert cli_overrides(args) == {
        "above_version": 2000,
        "not_files": r"vmware\|virtualbox",
        "only_files": None,
        "channels": ["stable", "beta"],
        "local_dir": tmp_path,
        "logging": {"file": {"path": log.resolve()}},
    }


def test_only_files_resets_not_files():
    overrides = cli_overrides(parse_args(["--only-files", "qemu"]))
    assert overrides == {"only_files": "qemu", "not_files": None}


def test_filters_are_mutually_exclusive():
    with pytest.raises(ConfigError):
        parse_args(["--not-files", "a", "--only-files", "b"])


def test_above_version_must_be_int():
    with pytest.raises(ConfigError):
        parse_args(["--above-version", "two-thousand"])


def test_empty_channel_list_rejected():
    with pytest.raises(ConfigError):
        parse_args(["--channels", " , "])
