# src/viteplate/__init__.py
from __future__ import annotations

__version__ = "0.2.0"

from .models import GenerationConfig, GenerationReport, PackageManager, TemplateVariant
from .config import UserConfig, ConfigManager
from .builder import TemplateBuilder, build_template, rewrite_manifest, write_auxiliary_files
from .generator import ProjectGenerator
from .exceptions import (
    ViteplateError,
    TemplateNotFoundError,
    TemplateBuildError,
    UnsupportedEntryError,
    ManifestError,
    InvalidProjectNameError,
    ConfigurationError,
    GenerationError,
)

__all__ = [
    "__version__",
    "GenerationConfig",
    "GenerationReport",
    "PackageManager",
    "TemplateVariant",
    "UserConfig",
    "ConfigManager",
    "TemplateBuilder",
    "build_template",
    "rewrite_manifest",
    "write_auxiliary_files",
    "ProjectGenerator",
    "ViteplateError",
    "TemplateNotFoundError",
    "TemplateBuildError",
    "UnsupportedEntryError",
    "ManifestError",
    "InvalidProjectNameError",
    "ConfigurationError",
    "GenerationError",
]
