# src/viteplate/resolver.py
"""Turn flags and answers into a GenerationConfig."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .config import UserConfig
from .exceptions import ConfigurationError, InvalidProjectNameError
from .models import GenerationConfig, PackageManager, TemplateVariant
from .validation import ProjectValidator

DEFAULT_PROJECT_NAME = "my-react-app"


class ConfigResolver(ABC):
    """Answers the questions asked while configuring a run."""

    interactive: bool = True

    @abstractmethod
    def ask_project_name(self, default: str) -> str: ...

    @abstractmethod
    def ask_package_manager(self, default: PackageManager) -> PackageManager: ...

    @abstractmethod
    def confirm_install(self, default: bool) -> bool: ...

    @abstractmethod
    def confirm_git(self, default: bool) -> bool: ...

    @abstractmethod
    def confirm_environment(self, default: bool) -> bool: ...

    @abstractmethod
    def confirm_overwrite(self, path: Path) -> bool: ...

    def report_invalid(self, message: str) -> None:
        """Tell the user why an answer was rejected."""


class InteractiveResolver(ConfigResolver):
    """Asks on the terminal with Rich prompts."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def ask_project_name(self, default: str) -> str:
        return Prompt.ask("What is your project name?", default=default, console=self.console)

    def ask_package_manager(self, default: PackageManager) -> PackageManager:
        answer = Prompt.ask(
            "Which package manager would you like to use?",
            choices=[pm.value for pm in PackageManager],
            default=default.value,
            console=self.console,
        )
        return PackageManager(answer)

    def confirm_install(self, default: bool) -> bool:
        return Confirm.ask("Install dependencies?", default=default, console=self.console)

    def confirm_git(self, default: bool) -> bool:
        return Confirm.ask("Initialize git repository?", default=default, console=self.console)

    def confirm_environment(self, default: bool) -> bool:
        return Confirm.ask("Set up environment variables?", default=default, console=self.console)

    def confirm_overwrite(self, path: Path) -> bool:
        return Confirm.ask(f"Directory {path.name} already exists. Overwrite?", default=False, console=self.console)

    def report_invalid(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")


class StaticResolver(ConfigResolver):
    """Fixed answers, for automation and tests.

    Unset answers fall back to the default offered by the caller.
    """

    interactive = False

    def __init__(
        self,
        project_name: Optional[str] = None,
        package_manager: Optional[PackageManager] = None,
        install_dependencies: Optional[bool] = None,
        initialize_git: Optional[bool] = None,
        setup_environment: Optional[bool] = None,
        overwrite: bool = False,
    ):
        self.project_name = project_name
        self.package_manager = package_manager
        self.install_dependencies = install_dependencies
        self.initialize_git = initialize_git
        self.setup_environment = setup_environment
        self.overwrite = overwrite

    def ask_project_name(self, default: str) -> str:
        if self.project_name is None:
            raise ConfigurationError("A project name is required when running non-interactively")
        return self.project_name

    def ask_package_manager(self, default: PackageManager) -> PackageManager:
        return self.package_manager or default

    def confirm_install(self, default: bool) -> bool:
        return default if self.install_dependencies is None else self.install_dependencies

    def confirm_git(self, default: bool) -> bool:
        return default if self.initialize_git is None else self.initialize_git

    def confirm_environment(self, default: bool) -> bool:
        return default if self.setup_environment is None else self.setup_environment

    def confirm_overwrite(self, path: Path) -> bool:
        return self.overwrite


def resolve_project_name(
    name: Optional[str], resolver: ConfigResolver, default: str = DEFAULT_PROJECT_NAME
) -> str:
    """Validate name, re-asking until a valid one is given.

    Only interactive resolvers are asked again; otherwise the first invalid
    name raises InvalidProjectNameError.
    """
    candidate = name
    while True:
        if candidate is None:
            candidate = resolver.ask_project_name(default)
        try:
            return ProjectValidator.validate_project_name(candidate)
        except InvalidProjectNameError as e:
            if not resolver.interactive:
                raise
            resolver.report_invalid(str(e))
            candidate = None


def resolve_generation_config(
    project_name: Optional[str],
    resolver: ConfigResolver,
    *,
    package_manager: Optional[PackageManager] = None,
    skip_install: bool = False,
    skip_git: bool = False,
    skip_env: bool = False,
    template_variant: TemplateVariant = TemplateVariant.FULL,
    user_config: Optional[UserConfig] = None,
) -> GenerationConfig:
    """Merge flags with answers; flags win, then answers, then defaults."""
    user_config = user_config or UserConfig()

    name = resolve_project_name(project_name, resolver)

    if package_manager is None:
        package_manager = resolver.ask_package_manager(user_config.default_package_manager)

    install = False if skip_install else resolver.confirm_install(user_config.install_dependencies)
    git = False if skip_git else resolver.confirm_git(user_config.initialize_git)
    env = False if skip_env else resolver.confirm_environment(user_config.setup_environment)

    return GenerationConfig(
        project_name=name,
        package_manager=package_manager,
        install_dependencies=install,
        initialize_git=git,
        setup_environment=env,
        template_variant=template_variant,
        commit_message=user_config.commit_message,
    )
