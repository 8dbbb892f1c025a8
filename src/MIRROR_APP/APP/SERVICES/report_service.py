"""Сервис вывода итогового отчёта о зеркалировании.

`ReportService` отвечает за человеко-читаемый вывод результатов запуска:
— печатает краткое резюме (успешно/есть ошибки),
— при наличии элементов отчёта выводит таблицу по каналам,
— раскрашивает уровни статуса (`StatusReport`) через rich markup.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from MIRROR_APP.APP.dto import (
    ChannelResult,
    ReportItem,
    ReportItems,
    ReportItemInput,
)
from MIRROR_APP.APP.types import StatusReport


def channel_report(results: list[ChannelResult]) -> ReportItems:
    """Строки отчёта по результатам каналов."""
    return [
        ReportItem(
            name=r.channel,
            status=StatusReport.INFO if r.ok else StatusReport.ERROR,
            comment="Зеркалирован" if r.ok else r.error,
        )
        for r in results
    ]


class ReportService:
    """Выводит отчёт зеркалирования в консоль с форматированием Rich."""

    def __init__(self, console: Console | None = None) -> None:
        # Фиксируем ширину консоли, чтобы таблица не "плясала" при разных терминалах.
        self.console = console or Console(width=119)

    def run(self, data: ReportItemInput) -> None:
        """Формирует и выводит резюме + (опционально) таблицу отчёта."""
        self.output_resume(is_success=data.is_success)

        if data.report:
            self.output_report(report=data.report)

    def output_resume(self, is_success: bool) -> None:
        if is_success:
            self.console.print("[green]Зеркалирование успешно завершено[/green]")
            return

        self.console.print("[bright_yellow]Зеркалирование завершено с ошибками[/bright_yellow]")

    def output_report(self, report: ReportItems) -> None:
        table = Table()
        table.add_column("Channel", width=20)
        table.add_column("Status", width=20)
        table.add_column("Comment", width=70)

        for row in report:
            table.add_row(
                escape(row.name), self.get_formatted_status(row.status), escape(row.comment)
            )

        self.console.print(table)

    def get_formatted_status(self, status: StatusReport) -> str:
        """Возвращает строку статуса с rich-разметкой для цвета."""
        colors = {
            StatusReport.INFO: "green",
            StatusReport.ERROR: "red",
        }
        color = colors[status]

        return f"[{color}]{status.name}[/{color}]"
