from __future__ import annotations

import io

from rich.console import Console

from clonedb.pipeline.errors import DiagnosticOutputError
from clonedb.pipeline.progress import ConsoleProgress


def _console(buffer: io.StringIO) -> Console:
    return Console(file=buffer, force_terminal=False, width=120)


def test_plain_output_shows_terminal_states():
    out, err = io.StringIO(), io.StringIO()
    progress = ConsoleProgress(console=_console(out), err_console=_console(err))

    progress.start("Dump [prod]").succeed("Dump [prod] 1.2s")
    progress.start("Restore").fail()
    progress.error(DiagnosticOutputError(message="ERROR: role missing", command="psql"))
    progress.summary("Done! Total duration: 3.4s")

    assert out.getvalue().splitlines() == [
        "✔ Dump [prod] 1.2s",
        "✖ Restore",
        "Done! Total duration: 3.4s",
    ]
    assert err.getvalue().strip() == "ERROR: role missing"
