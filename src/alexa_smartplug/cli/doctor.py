"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from alexa_smartplug.adapters.http_client import build_async_client, build_routing_transport
from alexa_smartplug.core.config import AppSettings, Session, write_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings, domain: str) -> tuple[bool, str]:
    session = Session(cookie="", amazon_domain=domain)
    try:
        transport = build_routing_transport(session, alexa_ip=settings.alexa_ip)
        async with build_async_client(settings, transport=transport) as client:
            response = await client.get(f"https://{session.alexa_host}/")
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Show the resolved configuration and check that the Alexa host is reachable."""

    settings = AppSettings()

    table = Table(title="alexa-smartplug Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if settings.cookie is not None:
        table.add_row("Cookie", "OK", f"{len(settings.cookie.get_secret_value())} chars")
    else:
        table.add_row("Cookie", "MISSING", "Set ALEXA_SMARTPLUG_COOKIE or run `doctor setup`")

    if settings.amazon_domain:
        table.add_row("Amazon domain", "OK", settings.amazon_domain)
    else:
        table.add_row("Amazon domain", "MISSING", "Set ALEXA_SMARTPLUG_AMAZON_DOMAIN")

    table.add_row("Alexa IP override", "OK", settings.alexa_ip or "system DNS")
    table.add_row("Payload logging", "OK", "enabled" if settings.enable_log else "disabled")
    table.add_row(
        "State identifiers",
        "OK",
        f"set={settings.set_state_target.value} get={settings.get_state_target.value}",
    )

    if settings.amazon_domain:
        ok_http, detail_http = asyncio.run(_check_http(settings, settings.amazon_domain))
        table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)


@app.command()
def setup() -> None:
    """Interactive setup (stores the cookie and domain in ./.env)."""

    domain = typer.prompt("Amazon domain", default="amazon.com", show_default=True).strip()
    cookie = typer.prompt("Session cookie", hide_input=True).strip()

    if not domain or not cookie:
        raise typer.BadParameter("domain and cookie are required")

    env_path = write_env_vars(
        {
            "ALEXA_SMARTPLUG_AMAZON_DOMAIN": domain,
            "ALEXA_SMARTPLUG_COOKIE": cookie,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
