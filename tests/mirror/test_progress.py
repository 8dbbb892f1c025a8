import io
from concurrent.futures import ThreadPoolExecutor

from MIRROR_APP.APP.types import FetchAction
from MIRROR_APP.INFRA.progress import ProgressPrinter


def test_markers():
    stream = io.StringIO()
    printer = ProgressPrinter(stream)

    for action in (
        FetchAction.DOWNLOADED,
        FetchAction.UNCHANGED,
        FetchAction.UPDATED,
        FetchAction.FILTERED,
    ):
        printer.mark(action)
    printer.newline()

    assert stream.getvalue() == ".,+\n"


def test_newline_only_after_markers():
    stream = io.StringIO()
    printer = ProgressPrinter(stream)

    printer.newline()
    printer.mark(FetchAction.FILTERED)
    printer.newline()

    assert stream.getvalue() == ""


def test_concurrent_marks_are_not_lost():
    stream = io.StringIO()
    printer = ProgressPrinter(stream)

    with ThreadPoolExecutor(max_workers=4) as pool:
        for _ in range(400):
            pool.submit(printer.mark, FetchAction.UNCHANGED)

    assert stream.getvalue() == "," * 400
