"""Command line interface for searching and comparing flights."""

from __future__ import annotations

import asyncio
import datetime as dt
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import click
import httpx
from pydantic import ValidationError

from airease_client.api import AireaseClient
from airease_client.export.pdf import format_duration, format_stops, render_pdf
from airease_client.export.report import build_comparison_report
from airease_client.services.natural_search_service import (
    NaturalSearchService,
    to_query_params,
)
from airease_client.services.search_service import FlightSearchService
from airease_client.tracking import PreferenceTracker
from airease_core.schemas import (
    CabinClass,
    ComparisonMetric,
    GeoLocation,
    MultiCityLeg,
    PassengerCount,
    Persona,
    SearchRequest,
    SortBy,
)
from airease_ml.errors import AireaseError
from airease_ml.labels import format_score, stage_label

if TYPE_CHECKING:
    from collections.abc import Sequence

    from airease_core.schemas import ScoredFlight

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def _print_results(flights: Sequence[ScoredFlight]) -> None:
    if not flights:
        click.echo("No flights found.")
        return
    click.echo(f"\nFound {len(flights)} flight(s):\n")
    for i, sf in enumerate(flights, 1):
        f = sf.flight
        score = sf.score.overall_score
        click.echo(
            f"  {i}. [{f.id}] {f.airline} {f.flight_number} | {f.route} | "
            f"{f.departure_time:%H:%M} - {f.arrival_time:%H:%M} | "
            f"{format_duration(f.duration_minutes)} | {format_stops(f.stops)} | "
            f"{f.currency} {f.price:,.2f} | "
            f"score {format_score(score)} ({stage_label('overall', score)})"
        )


def _parse_leg(value: str) -> MultiCityLeg:
    try:
        origin, destination, day = value.split(":", 2)
        return MultiCityLeg(
            origin=origin.upper(),
            destination=destination.upper(),
            departure_date=dt.date.fromisoformat(day),
        )
    except ValueError as exc:
        msg = f"Invalid leg {value!r}, expected ORIGIN:DESTINATION:YYYY-MM-DD"
        raise click.BadParameter(msg) from exc


@click.group()
def cli() -> None:
    """AirEase flight search CLI."""


@cli.command("search")
@click.argument("origin")
@click.argument("destination")
@click.argument("departure_date")
@click.option(
    "--cabin",
    type=click.Choice([c.value for c in CabinClass]),
    default=CabinClass.ECONOMY.value,
    help="Cabin class",
)
@click.option(
    "--adults",
    type=click.IntRange(1, 9),
    default=1,
    show_default=True,
    help="Adult passengers",
)
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice([s.value for s in SortBy]),
    default=None,
    help="Sort order (recorded as a preference)",
)
@click.option(
    "--persona",
    type=click.Choice([p.value for p in Persona]),
    default=Persona.DEFAULT.value,
    help="Traveler type used for the overall score",
)
@click.option("--json-output", is_flag=True, help="Output as JSON")
def search(
    origin: str,
    destination: str,
    departure_date: str,
    cabin: str,
    adults: int,
    sort_by: str | None,
    persona: str,
    json_output: bool,
) -> None:
    """Search one-way flights between two airports."""
    try:
        day = dt.date.fromisoformat(departure_date)
    except ValueError as exc:
        msg = f"Invalid date {departure_date!r}, expected YYYY-MM-DD"
        raise click.BadParameter(msg, param_hint="DEPARTURE_DATE") from exc
    try:
        request = SearchRequest(
            origin=origin.upper(),
            destination=destination.upper(),
            departure_date=day,
            cabin_class=CabinClass(cabin),
            passengers=PassengerCount(adults=adults),
            sort_by=SortBy(sort_by or SortBy.SCORE),
            traveler_type=Persona(persona),
        )
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise click.UsageError(f"Invalid search: {field}: {error['msg']}") from exc

    async def _run():  # type: ignore[return]
        client = AireaseClient()
        tracker = PreferenceTracker(client)
        try:
            if sort_by:
                tracker.record_sort_action(sort_by)
            return await FlightSearchService(client).search(request)
        finally:
            await tracker.drain()
            await client.close()

    try:
        response = asyncio.run(_run())
    except httpx.HTTPError as exc:
        raise click.ClickException(f"Search failed: {exc}") from exc

    if json_output:
        click.echo(json.dumps(response.model_dump(mode="json", by_alias=True), indent=2))
    else:
        _print_results(response.flights)


@cli.command("multi-city")
@click.argument("legs", nargs=-1, required=True)
@click.option(
    "--cabin",
    type=click.Choice([c.value for c in CabinClass]),
    default=CabinClass.ECONOMY.value,
    help="Cabin class",
)
def multi_city(legs: tuple[str, ...], cabin: str) -> None:
    """Search several legs at once, e.g. HKG:NRT:2026-11-02 NRT:ICN:2026-11-06."""
    parsed_legs = [_parse_leg(leg) for leg in legs]

    async def _run():  # type: ignore[return]
        client = AireaseClient()
        try:
            return await FlightSearchService(client).search_multi_city(
                parsed_legs, cabin_class=CabinClass(cabin)
            )
        finally:
            await client.close()

    try:
        responses = asyncio.run(_run())
    except httpx.HTTPError as exc:
        raise click.ClickException(f"Multi-city search failed: {exc}") from exc

    for leg, response in zip(parsed_legs, responses, strict=True):
        click.echo(f"\n== {leg.origin} → {leg.destination} on {leg.departure_date} ==")
        _print_results(response.flights)


@cli.command("ask")
@click.argument("query")
@click.option("--lat", type=float, default=None, help="Current latitude")
@click.option("--lng", type=float, default=None, help="Current longitude")
@click.option("--json-output", is_flag=True, help="Output as JSON")
def ask(
    query: str, lat: float | None, lng: float | None, json_output: bool
) -> None:
    """Turn a natural language request into a flight search."""
    location = (
        GeoLocation(lat=lat, lng=lng) if lat is not None and lng is not None else None
    )

    async def _run():  # type: ignore[return]
        client = AireaseClient()
        try:
            return await NaturalSearchService(client).search(query, location)
        finally:
            await client.close()

    result = asyncio.run(_run())
    if json_output:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    if not result.success or result.params is None:
        raise click.ClickException(result.error or "Search could not be completed")
    if not json_output:
        click.echo(result.message)
        click.echo(f"/flights?{urlencode(to_query_params(result.params))}")


@cli.command("compare")
@click.argument("flight_ids", nargs=-1, required=True)
@click.option(
    "--pdf",
    "pdf_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a PDF report to this path",
)
@click.option(
    "--chart",
    "chart_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="PNG chart to embed in the PDF",
)
def compare(
    flight_ids: tuple[str, ...], pdf_path: Path | None, chart_path: Path | None
) -> None:
    """Compare 2-3 flights side by side."""

    async def _run():  # type: ignore[return]
        client = AireaseClient()
        try:
            service = FlightSearchService(client)
            flights = await service.fetch_for_comparison(flight_ids)
            return flights, service.compare(flights)
        finally:
            await client.close()

    try:
        flights, result = asyncio.run(_run())
    except (AireaseError, httpx.HTTPError) as exc:
        raise click.ClickException(str(exc)) from exc

    _print_results(flights)
    click.echo("")
    for metric in ComparisonMetric:
        winners = sorted(result.best.get(metric, frozenset()))
        click.echo(f"  best {metric.value:<14} {', '.join(winners) or '-'}")
    overall = ", ".join(sorted(result.best_overall)) or "none"
    click.echo(f"  best overall (cheapest and top score): {overall}")

    click.echo("\n  relative to this set (price / duration / stops / efficiency):")
    for sf in flights:
        rel = result.relative[sf.flight.id]
        click.echo(
            f"  {sf.flight.id:<10} {format_score(rel.price_score)} / "
            f"{format_score(rel.duration_score)} / {format_score(rel.stops_score)} / "
            f"{format_score(rel.efficiency_score)}"
        )

    if pdf_path is not None:
        report = build_comparison_report(result, flights)
        chart = chart_path.read_bytes() if chart_path else None
        pdf_path.write_bytes(render_pdf(report, chart))
        click.echo(f"\nSaved {pdf_path}")


if __name__ == "__main__":
    cli()
