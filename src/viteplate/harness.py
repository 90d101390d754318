# src/viteplate/harness.py
"""End-to-end check of the build and generate pipeline."""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from rich.console import Console

from .builder import TemplateBuilder
from .exceptions import ViteplateError
from .generator import ProjectGenerator
from .manifest import MANIFEST_FILENAME, Manifest
from .models import PackageManager
from .resolver import StaticResolver, resolve_generation_config

logger = logging.getLogger(__name__)

TEST_PROJECT_NAME = "test-cli-project"

ESSENTIAL_FILES = [
    "package.json",
    "src/main.tsx",
    "src/app/app.tsx",
    "index.html",
    "vite.config.ts",
    "tailwind.config.cjs",
    ".env.example",
    "docs/README.md",
]


class HarnessFailure(ViteplateError):
    """A post-condition of the generated project did not hold."""
    pass


def install_requested() -> bool:
    return os.getenv("TEST_INSTALL", "").lower() in ("1", "true", "yes")


def remove_tree(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)


@contextmanager
def cleanup_on_signal(path: Path, console: Console) -> Iterator[None]:
    """Remove path if SIGINT or SIGTERM arrives inside the block."""

    def handler(signum, frame):
        console.print("\n[yellow]Cleaning up test project...[/yellow]")
        remove_tree(path)
        raise SystemExit(128 + signum)

    previous = {sig: signal.signal(sig, handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)


def verify_project(project_path: Path, project_name: str, essential_files: List[str] = ESSENTIAL_FILES) -> List[str]:
    """Assert the generated project looks right; return the checks that passed."""
    if not project_path.is_dir():
        raise HarnessFailure("Test project was not created")

    passed = []
    for rel_path in essential_files:
        if not (project_path / rel_path).exists():
            raise HarnessFailure(f"Essential file missing: {rel_path}")
        passed.append(rel_path)

    manifest = Manifest.load(project_path / MANIFEST_FILENAME)
    if manifest.name != project_name:
        raise HarnessFailure(f"Package name not updated. Expected: {project_name}, Got: {manifest.name}")
    passed.append(f"{MANIFEST_FILENAME} name updated to: {manifest.name}")

    if "bin" in manifest or "files" in manifest:
        raise HarnessFailure(f"CLI-specific fields not removed from {MANIFEST_FILENAME}")
    passed.append("CLI-specific fields removed")

    return passed


def run_install_and_build(project_path: Path, package_manager: PackageManager = PackageManager.NPM) -> None:
    """Run a real install and production build in the test project."""
    subprocess.run(package_manager.install_command, cwd=project_path, check=True)
    subprocess.run(package_manager.run_command("build").split(), cwd=project_path, check=True)


def run_cli_test(
    source_root: Path,
    template_dir: Path,
    workspace: Path,
    project_name: str = TEST_PROJECT_NAME,
    with_install: Optional[bool] = None,
    keep: bool = True,
    console: Optional[Console] = None,
) -> int:
    """Build, generate and verify a throwaway project. Returns an exit code."""
    console = console or Console()
    with_install = install_requested() if with_install is None else with_install
    project_path = Path(workspace) / project_name

    with cleanup_on_signal(project_path, console):
        try:
            if project_path.exists():
                console.print("Cleaning up existing test project...")
                remove_tree(project_path)

            console.print("Building template...")
            TemplateBuilder(source_root, template_dir).build()

            console.print("Generating project with minimal options...")
            resolver = StaticResolver(project_name=project_name, setup_environment=True)
            config = resolve_generation_config(project_name, resolver, skip_install=True, skip_git=True)
            generator = ProjectGenerator(config, template_dir=template_dir, cwd=workspace)
            report = generator.run(resolver.confirm_overwrite)
            if not report.succeeded:
                raise HarnessFailure("Project generation did not complete")

            console.print("[green]Project created successfully[/green]")
            console.print("Verifying essential files...")
            for check in verify_project(project_path, project_name):
                console.print(f"  [green]✓[/green] {check}")

            if with_install:
                console.print("Testing dependency installation and build...")
                run_install_and_build(project_path)
                console.print("[green]Dependencies installed and build completed[/green]")

        except (ViteplateError, subprocess.CalledProcessError, OSError) as e:
            console.print(f"\n[red]CLI test failed: {e}[/red]")
            remove_tree(project_path)
            return 1

    console.print("\n[green]CLI test completed successfully![/green]")
    if not keep:
        remove_tree(project_path)
        console.print("Test project removed")
        return 0

    console.print(f"Test project created at: {project_path}")
    console.print("\nTo test manually:")
    console.print(f"   cd {project_name}")
    console.print("   npm install")
    console.print("   npm run dev")
    return 0
