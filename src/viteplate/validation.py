# src/viteplate/validation.py
from __future__ import annotations
import re
from pathlib import Path

from .exceptions import InvalidProjectNameError, TemplateNotFoundError


class TemplateValidator:
    """Validates a pre-built template directory."""

    @classmethod
    def validate_template(cls, template_path: Path) -> None:
        """Validate template exists and is a readable directory."""
        if not template_path.exists():
            raise TemplateNotFoundError(template_path)

        if not template_path.is_dir():
            raise TemplateNotFoundError(f"{template_path} (not a directory)")

        if not any(template_path.iterdir()):
            raise TemplateNotFoundError(f"{template_path} (empty; run 'viteplate build-template' first)")


class ProjectValidator:
    """Validates project names."""

    NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

    @classmethod
    def validate_project_name(cls, name: str | None) -> str:
        """Validate a project name and return it trimmed."""
        if name is None or not name.strip():
            raise InvalidProjectNameError("Project name is required")

        name = name.strip()
        if not cls.NAME_PATTERN.fullmatch(name):
            raise InvalidProjectNameError(
                "Project name can only contain letters, numbers, hyphens, and underscores"
            )

        return name
