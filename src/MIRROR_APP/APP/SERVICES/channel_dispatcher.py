"""
channel_dispatcher.py

Параллельный запуск обхода каналов: одна задача (поток) на канал.

Внутри канала всё последовательно (одно соединение с сервером за раз), каналы
между собой независимы и пишут в непересекающиеся каталоги. Ошибка канала
превращается в ChannelResult(ok=False) и ставит маркер ошибки запуска, не затрагивая
остальные каналы.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable

from loguru import logger

from GENERAL.errors import AppError
from MIRROR_APP.APP.dto import ChannelResult, RuntimeContext
from MIRROR_APP.APP.ports import FailureMarker, HttpClient
from MIRROR_APP.APP.SERVICES.directory_walker import DirectoryWalker
from MIRROR_APP.CONFIG.config import MirrorConfig
from MIRROR_APP.INFRA.utils import safe_mkdir

# Фабрика HTTP-клиента канала; конкретный адаптер передаёт точка входа (main.py).
HttpFactory = Callable[[MirrorConfig], HttpClient]


class ChannelDispatcher:
    """
    Запускает DirectoryWalker для каждого канала в отдельном потоке и собирает результаты.

    Атрибуты:
        ctx: контекст выполнения; `ctx.stop_event` используется для отмены.
        failure_marker: маркер ошибки запуска, общий для всех каналов.
        http_factory: создаёт собственный HTTP-клиент для каждого канала.
        _clients: клиенты выполняющихся задач; cancel() закрывает их.
    """

    def __init__(
            self,
            ctx: RuntimeContext,
            failure_marker: FailureMarker,
            http_factory: HttpFactory,
    ) -> None:
        self.ctx = ctx
        self.failure_marker = failure_marker
        self.http_factory = http_factory
        self._clients: list[HttpClient] = []
        self._clients_lock = threading.Lock()

    def run(self, channels: list[str]) -> list[ChannelResult]:
        """
        Обходит все каналы параллельно и ждёт завершения каждого.

        При прерывании ожидания (Ctrl-C, SIGTERM) выставляет событие отмены,
        снимает ещё не начатые задачи и дожидается остановки запущенных.

        Returns:
            Результаты в порядке `channels`.
        """
        executor = ThreadPoolExecutor(
            max_workers=max(len(channels), 1), thread_name_prefix="channel"
        )
        futures = {
            channel: executor.submit(self._run_channel, channel) for channel in channels
        }
        try:
            wait(futures.values())
        except BaseException:
            self.cancel()
            raise
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        return [self._collect(channel, future) for channel, future in futures.items()]

    def cancel(self) -> None:
        """
        Просит все задачи каналов остановиться.

        Кроме события отмены (проверяется между запросами и блоками файла) закрывает
        HTTP-клиенты выполняющихся задач: запрос, ожидающий данных от сервера,
        обрывается сразу, а не по истечении таймаута чтения.
        """
        self.ctx.stop_event.set()
        with self._clients_lock:
            clients = list(self._clients)
        for http in clients:
            http.close()

    def _run_channel(self, channel: str) -> ChannelResult:
        with logger.contextualize(channel=channel):
            local_dir = self.ctx.app.local_dir / channel
            base_url = self.ctx.app.channel_url(channel)
            http = self.http_factory(self.ctx.app)
            with self._clients_lock:
                self._clients.append(http)
            logger.info("Начало зеркалирования {url} в {dir}", url=base_url, dir=local_dir)
            try:
                safe_mkdir(local_dir)
                DirectoryWalker(self.ctx, http).walk(base_url, local_dir)
            except AppError as e:
                logger.error("Зеркалирование канала прервано:\n{e}", e=e)
                self._set_failure_marker()
                return ChannelResult(channel=channel, ok=False, error=str(e) or e.log_message)
            finally:
                with self._clients_lock:
                    self._clients.remove(http)
                http.close()

            logger.info("Канал {channel} зеркалирован", channel=channel)
            return ChannelResult(channel=channel, ok=True)

    def _collect(self, channel: str, future: Future[ChannelResult]) -> ChannelResult:
        """Результат задачи; неожиданные исключения и отмена считаются ошибкой канала."""
        if future.cancelled():
            return ChannelResult(channel=channel, ok=False, error="Задача канала отменена")

        exc = future.exception()
        if exc is None:
            return future.result()

        logger.opt(exception=exc).error(
            "Непредвиденная ошибка в канале {channel}", channel=channel
        )
        self._set_failure_marker()
        return ChannelResult(channel=channel, ok=False, error=repr(exc))

    def _set_failure_marker(self) -> None:
        try:
            self.failure_marker.set()
        except AppError as e:
            logger.error("Не удалось создать маркер ошибки:\n{e}", e=e)
