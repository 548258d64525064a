"""CLI UI components (Rich).

Kept apart from the commands so tables and panels can be reused.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from alexa_smartplug.core.domain.models import Device


def print_banner(console: Console) -> None:
    title = Text("alexa-smartplug", style="bold cyan")
    subtitle = Text("Alexa smart plugs • list • read • switch", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_devices_table(devices: Iterable[Device]) -> Table:
    table = Table(title="Smart Plugs")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Entity ID", style="white")
    table.add_column("Description", style="dim")
    table.add_column("Availability", style="green")
    for device in devices:
        table.add_row(device.name, device.entity_id, device.description, device.availability)
    return table


def power_text(on: bool) -> Text:
    return Text("on", style="bold green") if on else Text("off", style="bold red")
