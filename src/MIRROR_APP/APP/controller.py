"""Координатор запуска зеркалирования (оркестратор приложения).

Модуль содержит `MirrorController` — тонкий слой оркестрации, который связывает порты
приложения: замок единственного запуска, маркер ошибки, диспетчер каналов и отчёт.

Контроллер почти не содержит бизнес-логики:
— принимает зависимости через конструктор,
— захватывает замок и гарантированно снимает его на любом пути выхода,
— агрегирует результаты каналов в код завершения.

Состояния: IDLE → LOCKED → RUNNING → CLEANED. Если замок занят другим запуском,
контроллер остаётся в IDLE и завершает работу с кодом 0, не трогая каналы и маркер ошибки.
"""

from loguru import logger

from GENERAL.errors import UserAbend
from MIRROR_APP.APP.dto import RuntimeContext, ReportItemInput
from MIRROR_APP.APP.ports import (
    RunLock,
    FailureMarker,
    ChannelDispatcher,
    ReportService,
)
from MIRROR_APP.APP.SERVICES.report_service import channel_report
from MIRROR_APP.APP.types import ExecutionChoice, RunState
from MIRROR_APP.INFRA.progress import LEGEND

EXIT_OK = 0
EXIT_FAILED = 1


class MirrorController:
    """Оркестратор запуска зеркалирования.

    Атрибуты:
        runtime_context: контекст выполнения (конфиг + общие объекты каналов).
        run_lock: замок единственного запуска.
        failure_marker: маркер ошибки предыдущего/текущего запуска.
        dispatcher: параллельный обход каналов.
        report_service: вывод итогового отчёта.
        state: текущее состояние координатора (`RunState`).
    """

    def __init__(
            self,
            runtime_context: RuntimeContext,
            run_lock: RunLock,
            failure_marker: FailureMarker,
            dispatcher: ChannelDispatcher,
            report_service: ReportService,
    ):
        self.runtime_context = runtime_context
        self.run_lock = run_lock
        self.failure_marker = failure_marker
        self.dispatcher = dispatcher
        self.report_service = report_service
        self.state = RunState.IDLE

    def run(self) -> int:
        """Выполняет полный цикл зеркалирования.

        Returns
        -------
        int
            0 — успех или пропуск (замок занят), 1 — хотя бы один канал завершился ошибкой.

        Raises
        ------
        UserAbend
            Запуск прерван (Ctrl-C или SIGTERM). Замок к этому моменту уже снят.
        """
        if self.run_lock.acquire() == ExecutionChoice.SKIP:
            print("Зеркалирование уже выполняется другим процессом — запуск пропущен")
            return EXIT_OK

        self.state = RunState.LOCKED
        try:
            # Маркер ошибки снимается только здесь, в начале следующего запуска.
            self.failure_marker.clear()
            self.state = RunState.RUNNING
            return self._mirror()
        finally:
            self.run_lock.release()
            self.state = RunState.CLEANED

    def _mirror(self) -> int:
        app = self.runtime_context.app
        progress = self.runtime_context.progress

        logger.info("Старт: каналы {channels}", channels=", ".join(app.channels))
        print(
            "Зеркалирование началось, дождитесь сообщения "
            "»Зеркалирование успешно завершено«"
        )
        print(LEGEND)

        try:
            results = self.dispatcher.run(app.channels)
        except KeyboardInterrupt as e:
            self.dispatcher.cancel()
            raise UserAbend("Зеркалирование прервано пользователем") from e
        finally:
            if progress is not None:
                progress.newline()

        is_success = all(r.ok for r in results)
        self.report_service.run(
            ReportItemInput(
                context=self.runtime_context,
                is_success=is_success,
                report=channel_report(results),
            )
        )

        if not is_success:
            logger.error("Зеркалирование завершено с ошибками")
            return EXIT_FAILED

        logger.info("Завершено")
        return EXIT_OK
