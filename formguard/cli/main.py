"""
FormGuard CLI - Fill and probe forms from the command line.
"""

import logging

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from formguard import __version__

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _outcome_table(outcomes) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Operation", style="green")
    table.add_column("Target", style="yellow", max_width=40)
    table.add_column("Strategies")
    table.add_column("Result", justify="center")

    for outcome in outcomes:
        tried = " → ".join(
            f"{s.name}{'✓' if s.succeeded else '✗'}" for s in outcome.strategies
        )
        result = (
            f"[green]{outcome.winner}[/green]" if outcome.succeeded else "[red]not reached[/red]"
        )
        table.add_row(outcome.operation, outcome.target, tried, result)
    return table


@click.group()
@click.version_option(version=__version__, prog_name="formguard")
def cli():
    """🛡️ FormGuard - Resilient form-field resolution for UI tests."""
    pass


@cli.command()
@click.argument('url')
@click.option('--first-name', default=None, help='Value for the first name field')
@click.option('--last-name', default=None, help='Value for the last name field')
@click.option('--gender', default=None, help='Gender radio to select (e.g. Male)')
@click.option('--state', default=None, help='State option to select (e.g. India)')
@click.option('--hobby', multiple=True, help='Hobby checkbox to tick (repeatable)')
@click.option('--shadow', is_flag=True, help='Fill the shadow-DOM copy of the form instead')
@click.option('--headless/--headed', default=True, help='Run browser in headless mode')
@click.option('--timeout', default=None, type=float, help='Seconds to wait for each field')
@click.option('--screenshot-dir', default='./formguard_reports', help='Screenshot output directory')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def fill(url, first_name, last_name, gender, state, hobby, shadow, headless, timeout,
         screenshot_dir, verbose):
    """
    Fill a form at URL and report what was resolved.

    \b
    Examples:

        formguard fill "https://app.cloudqa.io/home/AutomationPracticeForm" --first-name Jane --state India

        formguard fill "file:///tmp/form.html" --first-name Jane --gender Female --shadow
    """
    _setup_logging(verbose)

    from formguard import FormFieldController, FormGuardConfig
    from formguard.core.driver_factory import driver_session
    from formguard.core.exceptions import FormGuardError
    from formguard.reporters import DiagnosticsRecorder

    config = FormGuardConfig.from_env().with_overrides(timeout=timeout, screenshot_dir=screenshot_dir)
    recorder = DiagnosticsRecorder(output_dir=config.screenshot_dir)

    console.print(Panel.fit(
        f"[bold blue]🛡️ FormGuard[/bold blue]\n[dim]{url}[/dim]",
        border_style="blue"
    ))

    with driver_session(headless=headless, page_load_timeout=config.page_load_timeout) as driver:
        form = FormFieldController(driver, config, recorder=recorder).navigate_to(url)

        if shadow:
            ignored = []
            if last_name is not None:
                ignored.append('--last-name')
            if hobby:
                ignored.append('--hobby')
            if ignored:
                console.print(
                    f"[yellow]⚠️  {', '.join(ignored)} not available on the shadow form; ignored[/yellow]"
                )
            outcomes = []
            if first_name is not None:
                outcomes.append(form.enter_first_name_in_shadow(first_name))
            if gender:
                outcomes.append(form.select_gender_in_shadow(gender))
            if state:
                outcomes.append(form.select_state_in_shadow(state))
            console.print(_outcome_table(outcomes))
        else:
            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("Field", style="green")
            table.add_column("Requested", style="yellow")
            table.add_column("Read back")
            try:
                if first_name is not None:
                    form.enter_first_name(first_name)
                    table.add_row("first name", first_name, form.get_first_name_value())
                if last_name is not None:
                    form.enter_last_name(last_name)
                    table.add_row("last name", last_name, form.get_last_name_value())
                if gender:
                    form.select_gender(gender)
                    table.add_row("gender", gender, str(form.is_gender_selected(gender)))
                for name in hobby:
                    form.select_hobby(name)
                    table.add_row("hobby", name, str(form.is_hobby_selected(name)))
                if state:
                    form.select_state(state)
                    table.add_row("state", state, form.get_selected_state())
            except FormGuardError as e:
                form.take_screenshot("fill_failure")
                recorder.log_error("Fill failed", e)
                console.print(table)
                console.print(f"[red]❌ {e}[/red]")
                recorder.save()
                raise SystemExit(1)
            console.print(table)

        path = form.take_screenshot("fill_final")
        if path:
            console.print(f"[dim]Screenshot: {path}[/dim]")
        record = recorder.save()
        if record:
            console.print(f"[dim]Diagnostics: {record}[/dim]")


@cli.command()
@click.argument('url')
@click.argument('target')
@click.option('--host', default=None, help='CSS selector of the shadow host (default: every host)')
@click.option('--max-depth', default=None, type=int, help='Deepest shadow root to enter')
@click.option('--headless/--headed', default=True, help='Run browser in headless mode')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def probe(url, target, host, max_depth, headless, verbose):
    """
    Look for TARGET inside the shadow roots of URL.

    TARGET is a CSS selector, or a full path such as
    "nestedshadow-form >> shadow-form >> #fname".

    \b
    Example:

        formguard probe "file:///tmp/form.html" "#fname" --host shadow-form
    """
    _setup_logging(verbose)

    from formguard import FormFieldController, FormGuardConfig, ShadowPath
    from formguard.core.driver_factory import driver_session

    config = FormGuardConfig.from_env()

    with driver_session(headless=headless, page_load_timeout=config.page_load_timeout) as driver:
        form = FormFieldController(driver, config).navigate_to(url)
        with form.form_scope():
            census = form.describe_shadow_structure()
            if ">>" in target:
                element = form.piercer.find_at_path(ShadowPath.parse(target))
                found, detail = element is not None, "exact path"
            else:
                lookup = form.piercer.locate_in_shadow(host, target, max_depth)
                found = lookup.found
                detail = (
                    f"route={lookup.route} depth={lookup.depth} "
                    f"hosts={lookup.visited_hosts} closed={lookup.closed_hosts}"
                )

        table = Table(show_header=False, box=None)
        table.add_row("[bold]Elements:[/bold]", str(census.total_elements))
        table.add_row("[bold]Known hosts:[/bold]", str(census.custom_hosts))
        table.add_row("[bold]Inputs:[/bold]", str(census.inputs))
        table.add_row("[bold]Open roots:[/bold]", ", ".join(census.open_hosts) or "none")
        console.print(table)
        console.print()

        if found:
            console.print(f"[bold green]✅ Found {target}[/bold green] [dim]({detail})[/dim]")
        else:
            console.print(f"[bold red]❌ {target} not reachable[/bold red] [dim]({detail})[/dim]")
            raise SystemExit(1)


@cli.command()
def doctor():
    """
    Check that the browser stack is importable.
    """
    console.print(Panel.fit(
        "[bold cyan]🩺 FormGuard Doctor[/bold cyan]\n[dim]System Health Check[/dim]",
        border_style="cyan"
    ))
    console.print()

    dependencies = [
        ("selenium", "Core - WebDriver"),
        ("click", "CLI"),
        ("rich", "CLI - Output"),
    ]

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Package", style="blue")
    table.add_column("Role", style="dim")
    table.add_column("Status", justify="center")

    all_good = True
    for package, role in dependencies:
        try:
            __import__(package)
            status = "[green]✅ Installed[/green]"
        except ImportError:
            status = "[red]❌ Missing[/red]"
            all_good = False
        table.add_row(package, role, status)

    console.print(table)
    console.print()

    if all_good:
        console.print("[bold green]✅ All dependencies installed.[/bold green]")
    else:
        console.print("[red]Some dependencies are missing. Try: pip install formguard[/red]")
        raise SystemExit(1)


@cli.command()
def version():
    """Show version information."""
    console.print(f"FormGuard v{__version__}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
