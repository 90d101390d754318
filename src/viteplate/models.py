# src/viteplate/models.py
from __future__ import annotations
import fnmatch
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .validation import ProjectValidator

DEFAULT_COMMIT_MESSAGE = "Initial commit from React Vite Boilerplate"

_GLOB_CHARS = ("*", "?", "[")


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class FileTreeNode(BaseModel):
    """A filesystem entry seen while walking a tree."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: NodeKind

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


class ExclusionRule(BaseModel):
    """A pattern naming paths to leave out of the template.

    Rules containing a "/" are anchored to the tree root and match the exact
    relative path or anything below it. Rules without a "/" float: they match
    an entry whose name (or any ancestor's name) equals the rule, at any depth.
    Both kinds accept fnmatch wildcards.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str

    @field_validator("pattern")
    @classmethod
    def normalize_pattern(cls, v: str) -> str:
        v = v.strip().replace("\\", "/").strip("/")
        if not v:
            raise ValueError("Exclusion pattern cannot be empty")
        return v

    @property
    def anchored(self) -> bool:
        return "/" in self.pattern

    @property
    def is_glob(self) -> bool:
        return any(ch in self.pattern for ch in _GLOB_CHARS)

    def _match_one(self, candidate: str) -> bool:
        if self.is_glob:
            return fnmatch.fnmatchcase(candidate, self.pattern)
        return candidate == self.pattern

    def matches(self, rel_path: str | Path) -> bool:
        """Test a path relative to the tree root."""
        rel = Path(rel_path).as_posix().strip("/")
        if not rel or rel == ".":
            return False

        parts = rel.split("/")
        if self.anchored:
            # Exact path, or any ancestor prefix of it
            return any(self._match_one("/".join(parts[:i])) for i in range(1, len(parts) + 1))
        return any(self._match_one(part) for part in parts)


class ExclusionRules(BaseModel):
    """Immutable, ordered set of exclusion rules."""

    model_config = ConfigDict(frozen=True)

    rules: Tuple[ExclusionRule, ...] = ()

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> ExclusionRules:
        return cls(rules=tuple(ExclusionRule(pattern=p) for p in patterns))

    def match(self, rel_path: str | Path) -> Optional[ExclusionRule]:
        """Return the first rule that excludes rel_path, if any."""
        for rule in self.rules:
            if rule.matches(rel_path):
                return rule
        return None

    def is_excluded(self, rel_path: str | Path) -> bool:
        return self.match(rel_path) is not None

    def with_pattern(self, pattern: str) -> ExclusionRules:
        rule = ExclusionRule(pattern=pattern)
        if rule in self.rules:
            return self
        return ExclusionRules(rules=self.rules + (rule,))

    @property
    def patterns(self) -> List[str]:
        return [rule.pattern for rule in self.rules]


class BuildResult(BaseModel):
    """Entries copied and excluded by a template build."""

    source_root: Path
    output_root: Path
    copied: List[FileTreeNode] = Field(default_factory=list)
    excluded: List[FileTreeNode] = Field(default_factory=list)

    @property
    def copied_files(self) -> List[str]:
        return [node.path for node in self.copied if not node.is_dir]

    def get_summary(self) -> dict:
        return {
            "files": len(self.copied_files),
            "directories": len([node for node in self.copied if node.is_dir]),
            "excluded": len(self.excluded),
            "output": str(self.output_root),
        }


class PackageManager(str, Enum):
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"

    @property
    def install_command(self) -> List[str]:
        return [self.value, "install"]

    def run_command(self, script: str) -> str:
        """Shell command that runs a package script."""
        if self is PackageManager.NPM:
            return f"npm run {script}"
        return f"{self.value} {script}"


class TemplateVariant(str, Enum):
    FULL = "full"

    @property
    def directory_name(self) -> str:
        return "template"


class GenerationConfig(BaseModel):
    """Resolved configuration for one project-generation run."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    package_manager: PackageManager = PackageManager.NPM
    install_dependencies: bool = True
    initialize_git: bool = True
    setup_environment: bool = True
    template_variant: TemplateVariant = TemplateVariant.FULL
    commit_message: str = DEFAULT_COMMIT_MESSAGE

    @field_validator("project_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return ProjectValidator.validate_project_name(v)


class StepStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    WARNING = "warning"
    FAILED = "failed"


class StepOutcome(BaseModel):
    """What happened when a generation step ran."""

    name: str
    status: StepStatus
    message: str = ""
    remedy: Optional[str] = None
    required: bool = False


class GenerationStep(BaseModel):
    """One unit of generation work.

    The action returns a StepOutcome for anything other than plain success
    (skips, warnings) and None when the step simply completed.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    action: Callable[[], Optional[StepOutcome]]
    required: bool = False


class GenerationReport(BaseModel):
    """Per-step outcomes of a generation run."""

    project_path: Path
    outcomes: List[StepOutcome] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.cancelled and not any(
            o.required and o.status is StepStatus.FAILED for o in self.outcomes
        )

    @property
    def warnings(self) -> List[StepOutcome]:
        return [o for o in self.outcomes if o.status is StepStatus.WARNING]

    def outcome(self, name: str) -> Optional[StepOutcome]:
        for o in self.outcomes:
            if o.name == name:
                return o
        return None
