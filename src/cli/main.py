"""CLI principal (Typer).

Cada comando ejecuta una única llamada a la API, imprime un resumen y sale:
exit code 0 en éxito, 1 ante cualquier error clasificado.
"""

from __future__ import annotations

import typer

from cli import analytics, auth, doctor, knowledge_base, smoke, telemetry
from core.config import AppSettings
from core.logger import setup_logging

app = typer.Typer(
    no_args_is_help=True,
    help="Example calls against the TRIBE analytics, knowledge-base and telemetry APIs.",
)

app.add_typer(analytics.insights_app, name="insights")
app.add_typer(analytics.events_app, name="events")
app.add_typer(knowledge_base.app, name="kb")
app.add_typer(telemetry.app, name="telemetry")
app.add_typer(auth.app, name="auth")
app.add_typer(doctor.app, name="doctor")
app.command(name="smoke")(smoke.smoke)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(None, "--log-level", help="Override TRIBE_LOG_LEVEL."),
) -> None:
    settings = AppSettings()
    setup_logging(log_level or settings.log_level, settings.log_format)
    ctx.obj = settings


def run() -> None:
    app()


if __name__ == "__main__":
    run()
