# src/viteplate/exceptions.py
from __future__ import annotations
from pathlib import Path


class ViteplateError(Exception):
    """Base exception for viteplate errors."""
    pass


class TemplateNotFoundError(ViteplateError):
    """Template not found or inaccessible."""
    def __init__(self, template_path: str | Path):
        self.template_path = template_path
        super().__init__(f"Template not found: {template_path}")


class TemplateBuildError(ViteplateError):
    """Template could not be assembled from the source tree."""
    pass


class UnsupportedEntryError(TemplateBuildError):
    """Source tree contains a symlink or special file."""
    def __init__(self, path: str | Path):
        self.path = path
        super().__init__(f"Unsupported file type (not a regular file or directory): {path}")


class ManifestError(ViteplateError):
    """Manifest is missing or cannot be parsed."""
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest {path}: {reason}")


class InvalidProjectNameError(ViteplateError):
    """Project name is invalid."""
    pass


class ConfigurationError(ViteplateError):
    """Configuration file is invalid or corrupted."""
    pass


class GenerationError(ViteplateError):
    """A required generation step failed."""
    def __init__(self, message: str, step: str | None = None, original_error: Exception | None = None):
        self.step = step
        self.original_error = original_error
        super().__init__(message)
