# src/viteplate/generator.py
"""Instantiate the pre-built template as a new project."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from .exceptions import GenerationError, ViteplateError
from .manifest import MANIFEST_FILENAME, Manifest
from .models import (
    GenerationConfig,
    GenerationReport,
    GenerationStep,
    StepOutcome,
    StepStatus,
    TemplateVariant,
)
from .templates import PROJECT_NAME_PLACEHOLDER
from .validation import TemplateValidator

logger = logging.getLogger(__name__)

STEP_COPY_TEMPLATE = "copy-template"
STEP_RENAME_MANIFEST = "rename-manifest"
STEP_PERSONALIZE_README = "personalize-readme"
STEP_SETUP_ENVIRONMENT = "setup-environment"
STEP_INITIALIZE_GIT = "initialize-git"
STEP_INSTALL_DEPENDENCIES = "install-dependencies"

ENV_EXAMPLE_FILENAME = ".env.example"
ENV_FILENAME = ".env"
README_FILENAME = "README.md"

CommandRunner = Callable[..., subprocess.CompletedProcess]


def default_template_dir(variant: TemplateVariant = TemplateVariant.FULL) -> Path:
    """Template shipped inside the installed package."""
    return Path(__file__).parent / variant.directory_name


def _describe_error(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        stderr = (error.stderr or "").strip() if isinstance(error.stderr, str) else ""
        last_line = stderr.splitlines()[-1] if stderr else ""
        cmd = " ".join(error.cmd) if isinstance(error.cmd, (list, tuple)) else str(error.cmd)
        detail = f"'{cmd}' exited with status {error.returncode}"
        return f"{detail}: {last_line}" if last_line else detail
    if isinstance(error, FileNotFoundError) and error.filename:
        return f"command not found: {error.filename}"
    return str(error)


class StepReporter:
    """Receives step progress. The default implementation ignores it."""

    def start(self, step: GenerationStep) -> None:
        pass

    def finish(self, step: GenerationStep, outcome: StepOutcome) -> None:
        pass

    def stop(self) -> None:
        """Called whenever a step action returns or raises. May be called twice."""


class ProjectGenerator:
    """Copies the template to cwd/<project_name> and runs the setup steps."""

    def __init__(
        self,
        config: GenerationConfig,
        template_dir: Optional[Path] = None,
        cwd: Optional[Path] = None,
        runner: Optional[CommandRunner] = None,
        reporter: Optional[StepReporter] = None,
    ):
        self.config = config
        self.template_dir = Path(template_dir) if template_dir else default_template_dir(config.template_variant)
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.runner = runner or subprocess.run
        self.reporter = reporter or StepReporter()

    @property
    def target_path(self) -> Path:
        return (self.cwd / self.config.project_name).absolute()

    def check_target(self, confirm_overwrite: Callable[[Path], bool]) -> bool:
        """Make sure the target is free; False means the user cancelled."""
        TemplateValidator.validate_template(self.template_dir)

        target = self.target_path
        if not (target.exists() or target.is_symlink()):
            return True

        if not confirm_overwrite(target):
            logger.info("Overwrite of %s declined", target)
            return False

        logger.info("Removing existing %s", target)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        return True

    def plan(self) -> List[GenerationStep]:
        """Steps for this run, in execution order."""
        steps = [
            GenerationStep(
                name=STEP_COPY_TEMPLATE,
                description="Copying template files",
                action=self.copy_template,
                required=True,
            ),
            GenerationStep(
                name=STEP_RENAME_MANIFEST,
                description="Updating package.json",
                action=self.rename_manifest,
                required=True,
            ),
            GenerationStep(
                name=STEP_PERSONALIZE_README,
                description="Personalizing README",
                action=self.personalize_readme,
            ),
        ]

        if self.config.setup_environment:
            steps.append(
                GenerationStep(
                    name=STEP_SETUP_ENVIRONMENT,
                    description="Setting up environment variables",
                    action=self.setup_environment,
                )
            )
        if self.config.initialize_git:
            steps.append(
                GenerationStep(
                    name=STEP_INITIALIZE_GIT,
                    description="Initializing git repository",
                    action=self.initialize_git,
                )
            )
        if self.config.install_dependencies:
            steps.append(
                GenerationStep(
                    name=STEP_INSTALL_DEPENDENCIES,
                    description=f"Installing dependencies with {self.config.package_manager.value}",
                    action=self.install_dependencies,
                )
            )
        return steps

    def run(self, confirm_overwrite: Callable[[Path], bool]) -> GenerationReport:
        """Run every step in order.

        Raises GenerationError if a required step fails. Optional steps
        report warnings and never stop the run.
        """
        report = GenerationReport(project_path=self.target_path)

        if not self.check_target(confirm_overwrite):
            report.cancelled = True
            return report

        for step in self.plan():
            self.reporter.start(step)
            try:
                outcome = self._run_step(step, report)
            finally:
                self.reporter.stop()
            report.outcomes.append(outcome)
            self.reporter.finish(step, outcome)

        return report

    def _run_step(self, step: GenerationStep, report: GenerationReport) -> StepOutcome:
        try:
            outcome = step.action()
        except (OSError, ViteplateError) as e:
            if not step.required:
                raise
            outcome = StepOutcome(
                name=step.name,
                status=StepStatus.FAILED,
                message=f"{step.description} failed: {e}",
                required=True,
            )
            report.outcomes.append(outcome)
            self.reporter.stop()
            self.reporter.finish(step, outcome)
            raise GenerationError(outcome.message, step=step.name, original_error=e) from e

        if outcome is None:
            outcome = StepOutcome(name=step.name, status=StepStatus.DONE, message=step.description)
        outcome.required = step.required
        return outcome

    # Steps

    def copy_template(self) -> None:
        logger.debug("Copying %s to %s", self.template_dir, self.target_path)
        shutil.copytree(self.template_dir, self.target_path, symlinks=True)

    def rename_manifest(self) -> Optional[StepOutcome]:
        manifest = Manifest.load_optional(self.target_path / MANIFEST_FILENAME)
        if manifest is None:
            return StepOutcome(
                name=STEP_RENAME_MANIFEST,
                status=StepStatus.SKIPPED,
                message=f"No {MANIFEST_FILENAME} in template; project name not written",
            )

        manifest.name = self.config.project_name
        manifest.save()
        return None

    def personalize_readme(self) -> Optional[StepOutcome]:
        readme = self.target_path / README_FILENAME
        if not readme.is_file():
            return StepOutcome(name=STEP_PERSONALIZE_README, status=StepStatus.SKIPPED, message="No README.md")

        try:
            content = readme.read_text(encoding="utf-8")
            if PROJECT_NAME_PLACEHOLDER not in content:
                return StepOutcome(
                    name=STEP_PERSONALIZE_README,
                    status=StepStatus.SKIPPED,
                    message="README.md has no project name placeholder",
                )
            readme.write_text(content.replace(PROJECT_NAME_PLACEHOLDER, self.config.project_name), encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return StepOutcome(
                name=STEP_PERSONALIZE_README,
                status=StepStatus.WARNING,
                message=f"Could not personalize README.md: {e}",
            )
        return None

    def setup_environment(self) -> Optional[StepOutcome]:
        example = self.target_path / ENV_EXAMPLE_FILENAME
        if not example.is_file():
            return StepOutcome(
                name=STEP_SETUP_ENVIRONMENT,
                status=StepStatus.WARNING,
                message=f"No {ENV_EXAMPLE_FILENAME} found; environment file not created",
            )

        try:
            shutil.copyfile(example, self.target_path / ENV_FILENAME)
        except OSError as e:
            return StepOutcome(
                name=STEP_SETUP_ENVIRONMENT,
                status=StepStatus.WARNING,
                message=f"Could not set up environment variables: {e}",
                remedy=f"cd {self.config.project_name} && cp {ENV_EXAMPLE_FILENAME} {ENV_FILENAME}",
            )
        return None

    def initialize_git(self) -> Optional[StepOutcome]:
        commands = [
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", self.config.commit_message],
        ]
        try:
            for command in commands:
                self._run(command)
        except (subprocess.CalledProcessError, OSError) as e:
            return StepOutcome(
                name=STEP_INITIALIZE_GIT,
                status=StepStatus.WARNING,
                message=f"Could not initialize git repository ({_describe_error(e)})",
                remedy=f"cd {self.config.project_name} && git init",
            )
        return None

    def install_dependencies(self) -> Optional[StepOutcome]:
        package_manager = self.config.package_manager
        try:
            self._run(package_manager.install_command)
        except (subprocess.CalledProcessError, OSError) as e:
            return StepOutcome(
                name=STEP_INSTALL_DEPENDENCIES,
                status=StepStatus.WARNING,
                message=f"Failed to install dependencies ({_describe_error(e)})",
                remedy=f"cd {self.config.project_name} && {package_manager.value} install",
            )
        return None

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        logger.debug("Running %s in %s", " ".join(command), self.target_path)
        return self.runner(command, cwd=self.target_path, check=True, capture_output=True, text=True)
