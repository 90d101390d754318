# src/viteplate/cli.py
from __future__ import annotations
import functools
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .builder import TemplateBuilder
from .config import ConfigManager, UserConfig
from .exceptions import ConfigurationError, ViteplateError
from .generator import ProjectGenerator, StepReporter, default_template_dir
from .harness import TEST_PROJECT_NAME, run_cli_test
from .models import (
    GenerationConfig,
    GenerationReport,
    GenerationStep,
    PackageManager,
    StepOutcome,
    StepStatus,
    TemplateVariant,
)
from .resolver import InteractiveResolver, StaticResolver, resolve_generation_config
from .templates import DOCS, FEATURES

app = typer.Typer(name="viteplate", help="Build and check the React Vite Boilerplate template")
create_app = typer.Typer(name="create-viteplate", help="Create a new React Vite Boilerplate project")
console = Console()
logger = logging.getLogger(__name__)

# Boilerplate working tree in a source checkout
DEFAULT_SOURCE_DIR = Path(__file__).resolve().parents[2] / "boilerplate"

AVAILABLE_SCRIPTS = {
    "dev": "Start development server",
    "build": "Build for production",
    "test": "Run unit tests",
    "test-e2e": "Run E2E tests",
    "storybook": "Start Storybook",
    "generate": "Generate components",
}

STATUS_ICONS = {
    StepStatus.DONE: "[green]✓[/green]",
    StepStatus.SKIPPED: "[dim]-[/dim]",
    StepStatus.WARNING: "[yellow]⚠[/yellow]",
    StepStatus.FAILED: "[red]✗[/red]",
}


def setup_logging(level: int = logging.WARNING) -> None:
    """Route log records through Rich on the shared console."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def handle_errors(func):
    """Decorator to handle common errors gracefully."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ViteplateError as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except Exception as e:
            logger.debug("Unexpected error", exc_info=True)
            console.print(f"[red]Unexpected error: {e}[/red]")
            console.print("[dim]Run with --verbose for more details[/dim]")
            sys.exit(1)

    return wrapper


class RichStepReporter(StepReporter):
    """Spinner while a step runs, one status line when it ends."""

    def __init__(self, console: Console):
        self.console = console
        self._status = None

    def start(self, step: GenerationStep) -> None:
        self._status = self.console.status(f"[blue]{step.description}...")
        self._status.start()

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def finish(self, step: GenerationStep, outcome: StepOutcome) -> None:
        message = outcome.message or step.description
        self.console.print(f"{STATUS_ICONS[outcome.status]} {message}")
        if outcome.remedy:
            self.console.print("[yellow]You can do this manually by running:[/yellow]")
            self.console.print(f"  [cyan]{outcome.remedy}[/cyan]")


def print_summary(config: GenerationConfig, report: GenerationReport, brief: bool = False) -> None:
    """Print next steps; brief stops there and skips scripts, docs and features."""
    pm = config.package_manager

    console.print("\n[green]✅ Project created successfully![/green]")
    if report.warnings:
        console.print(f"[yellow]{len(report.warnings)} optional step(s) need attention (see above)[/yellow]")

    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  [cyan]cd {config.project_name}[/cyan]")
    if not config.install_dependencies:
        console.print(f"  [cyan]{pm.value} install[/cyan]")
    console.print(f"  [cyan]{pm.run_command('dev')}[/cyan]")
    if brief:
        console.print()
        return

    table = Table(title="Available scripts", show_header=False, box=None)
    table.add_column("Command", style="cyan")
    table.add_column("Description")
    for script, description in AVAILABLE_SCRIPTS.items():
        table.add_row(pm.run_command(script), description)
    console.print()
    console.print(table)

    console.print("\n[bold]Documentation:[/bold]")
    for title, path, _description in DOCS:
        console.print(f"  📚 {title}: [cyan]{path}[/cyan]")

    console.print("\n[bold]Features included:[/bold]")
    for feature in FEATURES:
        console.print(f"  [green]✓[/green] {feature}")

    console.print("\n[blue]🎉 Happy coding![/blue]\n")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"create-viteplate {__version__}")
        raise typer.Exit()


@create_app.command()
@handle_errors
def create(
    project_name: Optional[str] = typer.Argument(None, help="Name of the project"),
    template: TemplateVariant = typer.Option(TemplateVariant.FULL, "-t", "--template", help="Template to use"),
    package_manager: Optional[PackageManager] = typer.Option(
        None, "-p", "--package-manager", help="Package manager to use (prompted if omitted)"
    ),
    skip_install: bool = typer.Option(False, "--skip-install", help="Skip installing dependencies"),
    skip_git: bool = typer.Option(False, "--skip-git", help="Skip git initialization"),
    skip_env: bool = typer.Option(False, "--skip-env", help="Skip creating .env from .env.example"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Accept the default answer for every prompt"),
    force: bool = typer.Option(False, "-f", "--force", help="Overwrite an existing directory without asking"),
    template_dir: Optional[Path] = typer.Option(None, "--template-dir", hidden=True),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show detailed output"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Create a new React Vite Boilerplate project."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        user_config = UserConfig.load()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        console.print("[dim]Fix your config file or run 'viteplate config --init'[/dim]")
        sys.exit(1)

    resolver = StaticResolver(project_name=project_name) if yes else InteractiveResolver(console)
    config = resolve_generation_config(
        project_name,
        resolver,
        package_manager=package_manager,
        skip_install=skip_install,
        skip_git=skip_git,
        skip_env=skip_env,
        template_variant=template,
        user_config=user_config,
    )

    template_path = template_dir or user_config.template_dir or default_template_dir(config.template_variant)
    generator = ProjectGenerator(config, template_dir=template_path, reporter=RichStepReporter(console))

    console.print("\n[blue]🚀 Creating your React Vite Boilerplate project...[/blue]\n")
    confirm_overwrite = (lambda _path: True) if force else resolver.confirm_overwrite
    report = generator.run(confirm_overwrite)

    if report.cancelled:
        console.print("[yellow]Project creation cancelled.[/yellow]")
        return

    print_summary(config, report, brief=user_config.quiet_mode)


@app.command("build-template")
@handle_errors
def build_template_command(
    source: Path = typer.Option(DEFAULT_SOURCE_DIR, "--source", help="Boilerplate working tree"),
    output: Path = typer.Option(default_template_dir(), "--output", help="Where to write the template"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Don't log each copied file"),
) -> None:
    """Build the distributable template from the boilerplate source."""
    quiet = quiet or UserConfig.load().quiet_mode
    setup_logging(logging.WARNING if quiet else logging.INFO)

    console.print("🏗️  Building template...")
    result = TemplateBuilder(source, output).build()

    summary = result.get_summary()
    console.print(
        Panel.fit(
            f"[bold]Files copied:[/bold] {summary['files']}\n"
            f"[bold]Directories:[/bold] {summary['directories']}\n"
            f"[bold]Excluded:[/bold] {summary['excluded']}\n"
            f"[bold]Location:[/bold] {summary['output']}",
            title="✅ Template built",
            border_style="green",
        )
    )


@app.command("test-cli")
@handle_errors
def test_cli_command(
    source: Path = typer.Option(DEFAULT_SOURCE_DIR, "--source", help="Boilerplate working tree"),
    template_dir: Path = typer.Option(default_template_dir(), "--template-dir", help="Template output directory"),
    workspace: Path = typer.Option(Path("."), "--workspace", help="Where to create the test project"),
    name: str = typer.Option(TEST_PROJECT_NAME, "--name", help="Test project name"),
    with_install: Optional[bool] = typer.Option(
        None, "--with-install/--without-install", help="Also run a real install and build (default: $TEST_INSTALL)"
    ),
    keep: bool = typer.Option(True, "--keep/--clean", help="Keep the test project after a successful run"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show detailed output"),
) -> None:
    """Generate a throwaway project and check the result."""
    setup_logging(logging.INFO if verbose else logging.WARNING)

    console.print("🧪 Testing CLI...\n")
    exit_code = run_cli_test(
        source_root=source,
        template_dir=template_dir,
        workspace=workspace.resolve(),
        project_name=name,
        with_install=with_install,
        keep=keep,
        console=console,
    )
    if exit_code:
        sys.exit(exit_code)


@app.command()
@handle_errors
def config(
    show: bool = typer.Option(False, "--show", help="Show current config"),
    init: bool = typer.Option(False, "--init", help="Initialize config file"),
    set_key: Optional[str] = typer.Option(None, "--set", help="Set config key=value"),
    path: Optional[Path] = typer.Option(None, "--path", help="Config file path"),
) -> None:
    """Manage viteplate configuration."""

    if init:
        try:
            config_path = ConfigManager.initialize_config(path, overwrite=False)
            console.print(f"[green]✅ Config initialized at {config_path}[/green]")
            console.print("[dim]Edit the file to customize your defaults[/dim]")
        except ConfigurationError as e:
            if "already exists" in str(e):
                console.print(f"[yellow]{e}[/yellow]")
            else:
                raise
        return

    if show:
        info = ConfigManager.show_config_info()

        console.print(
            Panel(
                f"[bold]Config file:[/bold] {info['config_file']}\n\n" + json.dumps(info["config"], indent=2),
                title="Current Configuration",
                border_style="blue",
            )
        )

        console.print("\n[dim]Search paths:[/dim]")
        for i, search_path in enumerate(info["search_paths"], 1):
            console.print(f"  {i}. {search_path}")

        return

    if set_key:
        if "=" not in set_key:
            console.print("[red]Error: Format should be --set key=value[/red]")
            sys.exit(1)

        key, value = set_key.split("=", 1)

        user_config = UserConfig.load()
        user_config.update_setting(key, value)
        config_path = user_config.save(path)
        console.print(f"[green]✅ Set {key} = {value}[/green]")
        console.print(f"[dim]Saved to {config_path}[/dim]")
        return

    # Default: show help
    console.print("Use --show to view config, --init to create, or --set key=value to modify")


if __name__ == "__main__":
    app()
