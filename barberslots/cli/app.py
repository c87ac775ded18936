"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..adapters.api_client import BarbershopApiClient
from ..adapters.json_repository import JsonBarbershopRepository
from ..config import AppConfig, get_default_config_path
from ..domain.availability import AvailabilityEngine
from ..domain.exceptions import BarberSlotsError
from ..domain.models import ClosedDay, WeekDay
from ..domain.schedule_resolver import find_entry_for_weekday, resolve_window
from ..domain.validation import collect_barber_schedule_problems, collect_shop_hours_problems
from ..services.availability_service import AvailabilityService, BarbershopDataSource

app = typer.Typer(
    name="barberslots",
    help="Compute bookable appointment times for barbershops",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
DataOption = Annotated[
    Optional[Path], typer.Option("--data", help="JSON data file (overrides the configured data source)")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """An explicit --config must exist; the default location is optional."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _build_data_source(config: AppConfig, data_file: Optional[Path]) -> BarbershopDataSource:
    if data_file is not None:
        return JsonBarbershopRepository(data_file, timezone=config.timezone)
    if config.api_base_url:
        return BarbershopApiClient(
            config.api_base_url,
            timezone=config.timezone,
            timeout=config.request_timeout_seconds,
        )
    if config.data_file is not None:
        return JsonBarbershopRepository(config.data_file, timezone=config.timezone)

    raise BarberSlotsError("Nenhuma fonte de dados configurada. Use --data ou defina data_file/api_base_url.")


def _fail(message: object) -> None:
    console.print(f"[bold red]Erro:[/bold red] {message}")
    raise typer.Exit(1)


@app.command()
def slots(
    barbershop: Annotated[str, typer.Argument(help="Barbershop id or slug")],
    barber: Annotated[str, typer.Argument(help="Barber id")],
    day: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    service: Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service id (repeatable)")] = None,
    step: Annotated[Optional[int], typer.Option("--step", help="Slot granularity in minutes")] = None,
    now: Annotated[Optional[str], typer.Option("--now", help="Reference 'now' (ISO-8601), for testing")] = None,
    exclude: Annotated[Optional[str], typer.Option("--exclude", help="Appointment id being rescheduled")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    List available start times for a barber on one day.

    Examples:

        barberslots slots shop-1 barber-1 --date 2024-11-25 -s corte -s barba

        barberslots slots navalha barber-1 -s corte --step 10 --data data.json
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone

        try:
            target_day = pendulum.from_format(day, "YYYY-MM-DD", tz=tz).date() if day else pendulum.today(tz).date()
        except ValueError as e:
            _fail(f"Data inválida: {e}")

        try:
            reference_now = pendulum.parse(now, tz=tz).in_timezone(tz) if now else None
        except ValueError as e:
            _fail(f"Horário de referência inválido: {e}")

        if step is not None and step <= 0:
            _fail("--step deve ser maior que zero")

        source = _build_data_source(config, data_file)
        # Overrides are keyed by id; the argument may be a slug.
        shop = asyncio.run(source.get_barbershop(barbershop))

        engine = AvailabilityEngine(
            step_minutes=step or config.step_minutes_for(shop.id),
            timezone=tz,
        )
        service_layer = AvailabilityService(source, engine)

        result = asyncio.run(
            service_layer.available_times(
                barbershop_id=shop.id,
                barber_id=barber,
                day=target_day,
                service_ids=service or [],
                now=reference_now,
                exclude_appointment_id=exclude,
            )
        )
    except (BarberSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(
        f"\n[bold cyan]{WeekDay.from_date(target_day).display_name}, "
        f"{target_day.strftime('%d/%m/%Y')}[/bold cyan] "
        f"[dim](intervalo de {engine.step_minutes} min)[/dim]\n"
    )

    if result.closed is not None:
        console.print(f"[yellow]⚠ {result.closed.message}[/yellow]\n")
        return

    if not result:
        console.print("[yellow]⚠ Nenhum horário disponível para esta data.[/yellow]\n")
        return

    console.print(f"[bold green]✓ {len(result)} horário(s) disponível(is):[/bold green]\n")
    console.print("  " + "  ".join(result.display_times()))
    console.print()


@app.command()
def schedule(
    barbershop: Annotated[str, typer.Argument(help="Barbershop id or slug")],
    barber: Annotated[str, typer.Argument(help="Barber id")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the week: shop hours, barber hours, lunch and the bookable window.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        source = _build_data_source(config, data_file)
        service_layer = AvailabilityService(source, AvailabilityEngine(timezone=config.timezone))

        shop = asyncio.run(source.get_barbershop(barbershop))
        barber_record = asyncio.run(service_layer.get_barber(shop.id, barber))

        shop_hours = shop.hours_to_domain()
        barber_schedule = barber_record.schedule_to_domain()

        table = Table(
            title=f"{shop.name or shop.id} - {barber_record.name or barber_record.id}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Dia", style="bold yellow")
        table.add_column("Barbearia")
        table.add_column("Barbeiro")
        table.add_column("Almoço", style="dim")
        table.add_column("Janela efetiva", style="bold green")

        # Any week works for display; start from a Sunday so rows run Sun..Sat.
        sunday = pendulum.today(config.timezone).date()
        sunday = sunday.subtract(days=WeekDay.from_date(sunday).value)

        for offset in range(7):
            current = sunday.add(days=offset)
            weekday = WeekDay.from_date(current)
            shop_day = find_entry_for_weekday(shop_hours, weekday)
            barber_day = find_entry_for_weekday(barber_schedule, weekday)

            window = resolve_window(current, shop_hours, barber_schedule, tz=config.timezone)
            if isinstance(window, ClosedDay):
                effective = f"[red]{window.message}[/red]"
            else:
                effective = f"{window.effective_open.format('HH:mm')} - {window.effective_close.format('HH:mm')}"

            lunch = barber_day.lunch_time if barber_day else None
            table.add_row(
                weekday.display_name,
                "Fechada" if shop_day is None or shop_day.is_closed else f"{shop_day.open} - {shop_day.close}",
                f"{barber_day.start} - {barber_day.end}" if barber_day else "Folga",
                f"{lunch.start} - {lunch.end}" if lunch else "-",
                effective,
            )
    except (BarberSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()
    console.print(table)
    console.print()


@app.command()
def validate(
    barbershop: Annotated[str, typer.Argument(help="Barbershop id or slug")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Check the shop hours and every barber schedule for inconsistencies.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        source = _build_data_source(config, data_file)
        shop = asyncio.run(source.get_barbershop(barbershop))
        barbers = asyncio.run(source.list_barbers(shop.id))

        problems = [f"Barbearia: {p}" for p in collect_shop_hours_problems(shop.hours_to_domain())]
        for barber_record in barbers:
            label = barber_record.name or barber_record.id
            problems.extend(
                f"{label}: {p}" for p in collect_barber_schedule_problems(barber_record.schedule_to_domain())
            )
    except (BarberSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if problems:
        console.print(f"\n[bold red]✗ {len(problems)} problema(s) encontrado(s):[/bold red]")
        for problem in problems:
            console.print(f"  • {problem}")
        console.print()
        raise typer.Exit(1)

    console.print(f"\n[green]✓ Horários de {shop.name or shop.id} e de {len(barbers)} barbeiro(s) válidos.[/green]\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
