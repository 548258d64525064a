"""Command line interface.

Thin layer over `AlexaController`: every command builds a controller from
the global options (falling back to `ALEXA_SMARTPLUG_*` variables), runs one
async operation and prints the result with Rich.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

import httpx
import typer
from rich.console import Console

from alexa_smartplug.cli import doctor
from alexa_smartplug.cli.ui_components import build_devices_table, power_text, print_banner
from alexa_smartplug.core.config import AppSettings
from alexa_smartplug.core.domain.models import Device
from alexa_smartplug.core.errors import AlexaSmartPlugError
from alexa_smartplug.core.services.controller import AlexaController

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="List and switch Alexa smart plugs.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


class Power(str, Enum):
    ON = "on"
    OFF = "off"


@dataclass
class CliOptions:
    cookie: str | None = None
    domain: str | None = None
    alexa_ip: str | None = None
    log: bool = False

    def controller(self) -> AlexaController:
        settings = AppSettings()
        if self.log:
            settings = settings.model_copy(update={"enable_log": True})
        return AlexaController(self.cookie, self.domain, alexa_ip=self.alexa_ip, settings=settings)


def _run(options: CliOptions, operation: Callable[[AlexaController], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with options.controller() as alexa:
            return await operation(alexa)

    try:
        return asyncio.run(runner())
    except AlexaSmartPlugError as exc:
        _err_console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    except httpx.HTTPError as exc:
        _err_console.print(f"[red]Network error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


async def _require_device(alexa: AlexaController, query: str) -> Device:
    device = await alexa.find_device(query)
    if device is None:
        _err_console.print(f"[red]No smart plug matches[/red] {query!r}")
        raise typer.Exit(code=2)
    return device


@app.callback()
def main(
    ctx: typer.Context,
    cookie: Optional[str] = typer.Option(None, "--cookie", help="Session cookie (default: ALEXA_SMARTPLUG_COOKIE)."),
    domain: Optional[str] = typer.Option(
        None, "--domain", help="Amazon domain, e.g. amazon.co.jp (default: ALEXA_SMARTPLUG_AMAZON_DOMAIN)."
    ),
    alexa_ip: Optional[str] = typer.Option(None, "--alexa-ip", help="Resolve alexa.<domain> to this IP."),
    log: bool = typer.Option(False, "--log", help="Dump request/response payloads."),
) -> None:
    ctx.obj = CliOptions(cookie=cookie, domain=domain, alexa_ip=alexa_ip, log=log)


@app.command()
def devices(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """List the smart plugs of the account."""

    found = _run(ctx.obj, lambda alexa: alexa.get_all_devices())
    if as_json:
        payload = [device.model_dump(mode="json") for device in found]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    print_banner(_console)
    _console.print(build_devices_table(found))


@app.command()
def state(
    ctx: typer.Context,
    device: str = typer.Argument(..., help="Entity id or display name."),
    force: bool = typer.Option(False, "--force", help="Refresh the topology before resolving."),
) -> None:
    """Print whether a plug is on or off."""

    async def operation(alexa: AlexaController) -> bool:
        plug = await _require_device(alexa, device)
        return await plug.controller.get_state(force)

    _console.print(power_text(_run(ctx.obj, operation)))


@app.command(name="set")
def set_power(
    ctx: typer.Context,
    device: str = typer.Argument(..., help="Entity id or display name."),
    value: Power = typer.Argument(..., help="on or off"),
    force: bool = typer.Option(False, "--force", help="Refresh the topology before resolving."),
) -> None:
    """Turn a plug on or off."""

    async def operation(alexa: AlexaController) -> None:
        plug = await _require_device(alexa, device)
        await plug.controller.set_state(value is Power.ON, force)

    _run(ctx.obj, operation)
    _console.print(power_text(value is Power.ON))


@app.command()
def check(
    ctx: typer.Context,
    device: Optional[str] = typer.Argument(None, help="Entity id or display name (default: first plug)."),
    delay: float = typer.Option(5.0, "--delay", min=0.0, help="Seconds to wait before switching off."),
) -> None:
    """Live round trip: read, switch on, verify, wait, switch off, verify."""

    async def operation(alexa: AlexaController) -> bool:
        if device is None:
            plugs = await alexa.get_all_devices()
            if not plugs:
                _err_console.print("[red]No smart plugs found[/red]")
                raise typer.Exit(code=2)
            plug = plugs[0]
        else:
            plug = await _require_device(alexa, device)

        controller = plug.controller
        _console.print("now:", power_text(await controller.get_state()))

        _console.print("set to:", power_text(True))
        await controller.set_state(True)
        after_on = await controller.get_state()
        _console.print("now:", power_text(after_on))
        if not after_on:
            return False

        await asyncio.sleep(delay)

        _console.print("set to:", power_text(False))
        await controller.set_state(False)
        after_off = await controller.get_state()
        _console.print("now:", power_text(after_off))
        return not after_off

    if not _run(ctx.obj, operation):
        _err_console.print("[red]check failed[/red]")
        raise typer.Exit(code=1)
    _console.print("[green]All OK![/green]")


def run() -> None:
    app()
