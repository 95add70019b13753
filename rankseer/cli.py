"""Typer CLI for Rankseer.

Provides commands to check keyword rankings, list supported platforms
and countries, show configuration status, and edit the .env file.
"""

import json
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

logger = logging.getLogger(__name__)

console = Console()
app = typer.Typer(
    name="rankseer",
    help="Rankseer -- keyword ranking checks with related-keyword estimates.",
    add_completion=False,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Edit credentials and settings in the .env file.", no_args_is_help=True)
app.add_typer(config_app, name="config")


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging level and format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _apply_log_level(verbose: bool, level: str) -> None:
    """Lower or raise the root level to the configured one unless --verbose."""
    if not verbose:
        logging.getLogger().setLevel(getattr(logging, level, logging.INFO))


def _get_app(config: str):
    """Lazy-import and return an initialised RankseerApp."""
    from rankseer.app import RankseerApp
    rankseer_app = RankseerApp(config_path=config)
    rankseer_app.initialize()
    return rankseer_app


def _print_analysis(analysis) -> None:
    """Pretty-print rankings and related keywords using Rich."""
    table = Table(title="Keyword Rankings", show_header=True, header_style="bold magenta")
    table.add_column("Keyword", style="cyan", min_width=20)
    table.add_column("Ranking", min_width=8)
    table.add_column("Ranked URL", max_width=50)
    table.add_column("Search Result Page", max_width=60)

    for row in analysis.original_keyword_rankings:
        ranking = "[green]" + str(row.ranking) + "[/green]" if row.found else "[yellow]Not Found[/yellow]"
        table.add_row(row.keyword, ranking, row.ranked_url or "-", row.search_result_page)
    console.print(table)

    if analysis.related_keyword_suggestions:
        related = Table(title="Related Keywords", show_header=True, header_style="bold magenta")
        related.add_column("Related Keyword", style="cyan")
        related.add_column("Competition")
        related.add_column("Search Volume")
        related.add_column("Last 30 Days")
        related.add_column("Last 24 Hours")
        for m in analysis.related_keyword_suggestions:
            related.add_row(
                m.related_keyword,
                m.competition.value,
                m.search_volume,
                m.last_30_days_searches,
                m.last_24_hours_searches,
            )
        console.print(related)


# ------------------------------------------------------------------
# check
# ------------------------------------------------------------------
@app.command()
def check(
    keywords: str = typer.Argument(..., help="Comma-separated keywords to check."),
    platform: str = typer.Option("google", "--platform", "-p", help="Search platform."),
    country: str = typer.Option("US", "--country", "-c", help="ISO 3166-1 alpha-2 country code."),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Target URL to find in the results."),
    no_related: bool = typer.Option(False, "--no-related", help="Skip related-keyword estimates."),
    as_json: bool = typer.Option(False, "--json", help="Print only the result as JSON on stdout."),
    config: str = typer.Option("config/settings.yaml", "--config", help="Settings file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Check search rankings for a list of keywords."""
    from rankseer.utils.validators import is_known_country, validate_country

    _setup_logging(verbose)
    rankseer_app = _get_app(config)
    _apply_log_level(verbose, rankseer_app.log_level)

    ok, err = validate_country(country)
    if not ok:
        warning = err
    elif not is_known_country(country):
        warning = "Country " + country.upper() + " is not in the supported list."
    else:
        warning = None
    if warning:
        # stdout carries nothing but the JSON document in --json mode
        if as_json:
            logger.warning(warning)
        else:
            console.print("[yellow]⚠[/yellow] " + warning)

    if not as_json:
        console.print(Panel("[bold cyan]Rank Check: " + keywords + " (" + platform + "/" + country + ")[/bold cyan]"))

    try:
        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
                      console=console, transient=True, disable=as_json) as progress:
            progress.add_task(description="Checking rankings...", total=None)
            analysis = rankseer_app.check_keyword_ranking(
                keywords,
                platform=platform,
                country=country,
                url=url,
                include_related=not no_related,
            )
    except ValueError as exc:
        if as_json:
            logger.error(str(exc))
        else:
            console.print("[red]✘[/red] " + str(exc))
        raise typer.Exit(code=1)
    finally:
        rankseer_app.close()

    if as_json:
        typer.echo(json.dumps(analysis.to_dict(), indent=2))
        return

    if analysis.is_empty:
        console.print("[yellow]No ranking information found for the given keywords.[/yellow]")
        return

    _print_analysis(analysis)
    console.print("[green]✔[/green] Keyword ranking check completed.")


# ------------------------------------------------------------------
# platforms
# ------------------------------------------------------------------
@app.command()
def platforms() -> None:
    """List supported platforms and countries."""
    from rankseer.constants import COUNTRIES, LIVE_PLATFORM, PLATFORMS

    table = Table(title="Platforms", show_header=True, header_style="bold magenta")
    table.add_column("Value", style="cyan")
    table.add_column("Label")
    table.add_column("Mode")
    for p in PLATFORMS:
        mode = "[green]live[/green]" if p["value"] == LIVE_PLATFORM else "[yellow]placeholder[/yellow]"
        table.add_row(p["value"], p["label"], mode)
    console.print(table)

    countries = Table(title="Countries", show_header=True, header_style="bold magenta")
    countries.add_column("Code", style="cyan")
    countries.add_column("Name")
    for c in COUNTRIES:
        countries.add_row(c["value"], c["label"])
    console.print(countries)


# ------------------------------------------------------------------
# status
# ------------------------------------------------------------------
@app.command()
def status(
    config: str = typer.Option("config/settings.yaml", "--config", help="Settings file."),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path of the .env file to inspect."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show configuration and credential status."""
    from rankseer.utils.env_manager import EnvManager

    _setup_logging(verbose)
    rankseer_app = _get_app(config)
    _apply_log_level(verbose, rankseer_app.log_level)
    console.print(Panel("[bold cyan]System Status[/bold cyan]"))

    table = Table(title="Component Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", min_width=15)
    table.add_column("Status", min_width=10)
    table.add_column("Details", max_width=60)
    for name, info in rankseer_app.get_status().items():
        if info["status"] == "ok":
            display = "[green]✔ OK[/green]"
        else:
            display = "[yellow]⚠ Warning[/yellow]"
        table.add_row(name.title(), display, info["details"])
    console.print(table)

    keys = Table(title="Environment", show_header=True, header_style="bold magenta")
    keys.add_column("Key", style="cyan")
    keys.add_column("Configured")
    keys.add_column("Value")
    for key, info in EnvManager(env_file).get_status().items():
        configured = "[green]yes[/green]" if info["configured"] else "[red]no[/red]"
        keys.add_row(key, configured, info["masked_value"] or "-")
    console.print(keys)


# ------------------------------------------------------------------
# config set
# ------------------------------------------------------------------
@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Variable name, e.g. GOOGLE_SEARCH_API_KEY."),
    value: str = typer.Argument(..., help="Value to store."),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path of the .env file to write."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Store a credential or setting in the .env file."""
    from rankseer.utils.env_manager import EnvManager

    _setup_logging(verbose)
    manager = EnvManager(env_file)
    key = key.strip().upper()
    if key not in manager.API_KEY_REGISTRY:
        console.print("[red]✘[/red] Unknown key " + key + ". Known keys: "
                      + ", ".join(manager.API_KEY_REGISTRY))
        raise typer.Exit(code=1)

    manager.set_key(key, value)
    info = manager.get_status()[key]
    console.print("[green]✔[/green] " + key + " saved to " + str(manager.env_path)
                  + " (" + (info["masked_value"] or "empty") + ")")
    if not info["configured"]:
        console.print("[yellow]⚠[/yellow] " + key + " is still empty or a placeholder value.")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
