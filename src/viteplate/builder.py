# src/viteplate/builder.py
"""Assemble the distributable template from the boilerplate working tree."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .exceptions import TemplateBuildError, UnsupportedEntryError
from .manifest import MANIFEST_FILENAME, Manifest
from .models import BuildResult, ExclusionRule, ExclusionRules, FileTreeNode, NodeKind
from .templates import TEMPLATE_REGISTRY, TemplateRegistry

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_PATTERNS = (
    "node_modules",
    "dist",
    "build",
    ".git",
    ".env",
    ".env.local",
    ".env.development.local",
    ".env.test.local",
    ".env.production.local",
    "yarn.lock",
    "package-lock.json",
    "pnpm-lock.yaml",
    ".DS_Store",
    "Thumbs.db",
    "npm-debug.log",
    "yarn-debug.log",
    "yarn-error.log",
    "lerna-debug.log",
    "coverage",
    ".nyc_output",
    "playwright-report",
    "test-results",
    "storybook-static",
    ".storybook/manager-head.html",
    "bin",
    "scripts",
    "template",
)

DEFAULT_EXCLUSION_RULES = ExclusionRules.from_patterns(DEFAULT_EXCLUDE_PATTERNS)

# Only used by the scaffolding tool itself, never by a generated project
TOOL_ONLY_DEV_DEPENDENCIES = ("chalk", "commander", "fs-extra", "inquirer", "ora")
TOOL_ONLY_SCRIPTS = ("prepublishOnly", "build-template", "test-cli")

PLACEHOLDER_NAME = "my-react-app"
PLACEHOLDER_VERSION = "0.1.0"


def walk_tree(
    source_root: Path, rules: ExclusionRules
) -> Iterator[Tuple[FileTreeNode, Optional[ExclusionRule]]]:
    """Yield every entry under source_root with the rule excluding it, if any.

    Excluded directories are yielded once and never descended into. A
    directory that cannot be listed raises TemplateBuildError.
    """

    def on_error(err: OSError) -> None:
        raise TemplateBuildError(f"Cannot read {err.filename}: {err}") from err

    for dirpath, dirnames, filenames in os.walk(source_root, topdown=True, onerror=on_error):
        current = Path(dirpath)
        kept_dirs = []

        for name in sorted(dirnames):
            rel = (current / name).relative_to(source_root).as_posix()
            rule = rules.match(rel)
            yield FileTreeNode(path=rel, kind=NodeKind.DIRECTORY), rule
            if rule is None:
                kept_dirs.append(name)

        # Prune in place so os.walk skips excluded subtrees
        dirnames[:] = kept_dirs

        for name in sorted(filenames):
            rel = (current / name).relative_to(source_root).as_posix()
            yield FileTreeNode(path=rel, kind=NodeKind.FILE), rules.match(rel)


def _check_entry(path: Path) -> None:
    mode = path.lstat().st_mode
    if stat.S_ISLNK(mode) or not (stat.S_ISREG(mode) or stat.S_ISDIR(mode)):
        raise UnsupportedEntryError(path)


def build_template(
    source_root: Path,
    output_root: Path,
    rules: ExclusionRules = DEFAULT_EXCLUSION_RULES,
) -> BuildResult:
    """Copy source_root into a fresh output_root, leaving out excluded entries."""
    source_root = Path(source_root).resolve()
    output_root = Path(output_root).resolve()

    if not source_root.is_dir():
        raise TemplateBuildError(f"Source directory does not exist: {source_root}")

    if output_root == source_root or source_root.is_relative_to(output_root):
        raise TemplateBuildError(f"Output directory {output_root} would overwrite the source tree")

    if output_root.is_relative_to(source_root):
        rules = rules.with_pattern(output_root.relative_to(source_root).as_posix())

    if output_root.exists():
        shutil.rmtree(output_root)
        logger.info("Removed existing template directory %s", output_root)

    output_root.mkdir(parents=True)
    result = BuildResult(source_root=source_root, output_root=output_root)

    for node, rule in walk_tree(source_root, rules):
        if rule is not None:
            logger.info("Excluding: %s (rule %r)", node.path, rule.pattern)
            result.excluded.append(node)
            continue

        src = source_root / node.path
        dest = output_root / node.path
        _check_entry(src)

        if node.is_dir:
            dest.mkdir(exist_ok=True)
            logger.info("Created directory: %s", node.path)
        else:
            shutil.copy2(src, dest)
            logger.info("Copied: %s", node.path)
        result.copied.append(node)

    return result


def rewrite_manifest(output_root: Path) -> Manifest:
    """Strip tool-specific fields from the template's package.json."""
    manifest = Manifest.load(Path(output_root) / MANIFEST_FILENAME)

    manifest.remove_publishing_fields()
    manifest.name = PLACEHOLDER_NAME
    manifest.version = PLACEHOLDER_VERSION
    manifest.private = True

    removed_deps = manifest.remove_dev_dependencies(TOOL_ONLY_DEV_DEPENDENCIES)
    removed_scripts = manifest.remove_scripts(TOOL_ONLY_SCRIPTS)
    if removed_deps:
        logger.debug("Removed devDependencies: %s", ", ".join(removed_deps))
    if removed_scripts:
        logger.debug("Removed scripts: %s", ", ".join(removed_scripts))

    manifest.save()
    logger.info("Processed: %s", MANIFEST_FILENAME)
    return manifest


def write_auxiliary_files(output_root: Path, registry: TemplateRegistry = TEMPLATE_REGISTRY) -> list[str]:
    """Overwrite .gitignore and README.md with generic project content."""
    context = registry.default_context()
    written = []

    for template_name in (".gitignore.j2", "README.md.j2"):
        output_name = template_name.removesuffix(".j2")
        content = registry.render_template(template_name, context)
        (Path(output_root) / output_name).write_text(content, encoding="utf-8")
        logger.info("Created: %s", output_name)
        written.append(output_name)

    return written


class TemplateBuilder:
    """Builds the template directory the generator copies from."""

    def __init__(
        self,
        source_root: Path,
        output_root: Path,
        rules: ExclusionRules = DEFAULT_EXCLUSION_RULES,
        registry: TemplateRegistry = TEMPLATE_REGISTRY,
    ):
        self.source_root = Path(source_root)
        self.output_root = Path(output_root)
        self.rules = rules
        self.registry = registry

    def build(self) -> BuildResult:
        logger.info("Building template from %s", self.source_root)
        result = build_template(self.source_root, self.output_root, self.rules)
        rewrite_manifest(self.output_root)
        write_auxiliary_files(self.output_root, self.registry)
        logger.info("Template built at %s", self.output_root)
        return result
