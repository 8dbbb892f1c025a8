import signal
import sys

from loguru import logger

import GENERAL.loadconfig
import MIRROR_APP.APP.controller
import MIRROR_APP.INFRA.setup_loguru
from GENERAL.errors import AppError, ConfigError, ConfigLoadError, UserAbend
from GENERAL.get_default_config_path import get_default_config_path
from MIRROR_APP.ADAPTERS.http import Http
from MIRROR_APP.APP.dto import RuntimeContext
from MIRROR_APP.APP.SERVICES.channel_dispatcher import ChannelDispatcher
from MIRROR_APP.APP.SERVICES.report_service import ReportService
from MIRROR_APP.CONFIG import config_CLI
from MIRROR_APP.CONFIG.config import MirrorConfig
from MIRROR_APP.INFRA.progress import ProgressPrinter
from MIRROR_APP.INFRA.run_lock import FileRunLock, FileFailureMarker


def _terminate(signum, frame) -> None:
    # SIGTERM обрабатывается так же, как Ctrl-C: отмена каналов и снятие замка.
    raise UserAbend(f"Получен сигнал {signal.Signals(signum).name}")


def main(argv: list[str] | None = None) -> int:
    try:
        args = config_CLI.parse_args(argv)
        config_path = args.config or get_default_config_path("config.yaml")
        app = GENERAL.loadconfig.load_config(
            config_path, MirrorConfig, config_CLI.cli_overrides(args)
        )
    except (ConfigLoadError, ConfigError) as e:
        print(f"Ошибка файла конфигурации\n{e}", file=sys.stderr)
        return e.exit_code

    runtime = RuntimeContext(app=app, progress=ProgressPrinter())
    MIRROR_APP.INFRA.setup_loguru.setup_loguru(app.logging)

    failure_marker = FileFailureMarker(app.error_file_path)
    controller = MIRROR_APP.APP.controller.MirrorController(
        runtime_context=runtime,
        run_lock=FileRunLock(app.lock_file_path),
        failure_marker=failure_marker,
        dispatcher=ChannelDispatcher(runtime, failure_marker, http_factory=Http),
        report_service=ReportService(),
    )

    previous = signal.signal(signal.SIGTERM, _terminate)
    try:
        return controller.run()
    except AppError as e:
        logger.error("{}\n{}", e.log_message, e)
        return e.exit_code
    finally:
        signal.signal(signal.SIGTERM, previous)


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
