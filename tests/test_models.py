# tests/test_models.py
from __future__ import annotations
import pytest
from pathlib import Path
from pydantic import ValidationError

from viteplate.models import (
    ExclusionRule,
    ExclusionRules,
    GenerationConfig,
    GenerationReport,
    PackageManager,
    StepOutcome,
    StepStatus,
    TemplateVariant,
)
from viteplate.exceptions import InvalidProjectNameError


class TestExclusionRule:
    """Test exclusion rule matching."""

    def test_floating_rule_matches_top_level(self):
        rule = ExclusionRule(pattern="node_modules")
        assert rule.matches("node_modules")
        assert rule.matches("node_modules/react/index.js")

    def test_floating_rule_matches_nested_basename(self):
        rule = ExclusionRule(pattern="node_modules")
        assert rule.matches("packages/ui/node_modules")
        assert rule.matches("packages/ui/node_modules/lib/a.js")

    def test_floating_rule_is_not_a_substring_match(self):
        rule = ExclusionRule(pattern=".env")
        assert not rule.matches(".env.example")
        assert not rule.matches("src/my-node_modules-helper.ts")

    def test_anchored_rule_matches_exact_and_below(self):
        rule = ExclusionRule(pattern=".storybook/manager-head.html")
        assert rule.anchored
        assert rule.matches(".storybook/manager-head.html")
        assert not rule.matches(".storybook/main.ts")
        assert not rule.matches("nested/.storybook/manager-head.html")

    def test_anchored_directory_prefix(self):
        rule = ExclusionRule(pattern="src/generated")
        assert rule.matches("src/generated")
        assert rule.matches("src/generated/api.ts")
        assert not rule.matches("src/generated-types.ts")

    def test_floating_glob(self):
        rule = ExclusionRule(pattern="*.log")
        assert rule.is_glob
        assert rule.matches("npm-debug.log")
        assert rule.matches("logs/server.log")
        assert not rule.matches("logs/server.log.txt")

    def test_anchored_glob(self):
        rule = ExclusionRule(pattern="public/*.map")
        assert rule.matches("public/app.js.map")
        assert not rule.matches("src/public/app.js.map")

    def test_pattern_normalized(self):
        rule = ExclusionRule(pattern="  dist/ ")
        assert rule.pattern == "dist"
        assert not rule.anchored

    def test_empty_pattern_rejected(self):
        with pytest.raises(ValidationError):
            ExclusionRule(pattern=" / ")

    def test_accepts_path_objects(self):
        rule = ExclusionRule(pattern="coverage")
        assert rule.matches(Path("coverage") / "lcov.info")


class TestExclusionRules:
    """Test the ordered rule set."""

    def test_first_matching_rule_reported(self):
        rules = ExclusionRules.from_patterns(["build", "*.ts", "src/app"])
        assert rules.match("src/app/app.ts").pattern == "*.ts"
        assert rules.match("src/app/app.tsx").pattern == "src/app"
        assert rules.match("src/main.tsx") is None

    def test_top_level_file_sharing_directory_name(self):
        """A floating rule excludes files and directories alike."""
        rules = ExclusionRules.from_patterns(["build"])
        assert rules.is_excluded("build")
        assert rules.is_excluded("tools/build")

    def test_with_pattern_returns_new_set(self):
        rules = ExclusionRules.from_patterns(["dist"])
        extended = rules.with_pattern("out/template")

        assert extended.patterns == ["dist", "out/template"]
        assert rules.patterns == ["dist"]
        assert extended.with_pattern("dist") is extended

    def test_rules_are_immutable(self):
        rules = ExclusionRules.from_patterns(["dist"])
        with pytest.raises(ValidationError):
            rules.rules = ()


class TestPackageManager:
    """Test package manager commands."""

    def test_install_command(self):
        assert PackageManager.NPM.install_command == ["npm", "install"]
        assert PackageManager.PNPM.install_command == ["pnpm", "install"]

    def test_run_command(self):
        assert PackageManager.NPM.run_command("dev") == "npm run dev"
        assert PackageManager.YARN.run_command("dev") == "yarn dev"
        assert PackageManager.PNPM.run_command("build") == "pnpm build"

    def test_template_variant_directory(self):
        assert TemplateVariant("full").directory_name == "template"


class TestGenerationConfig:
    """Test GenerationConfig validation and defaults."""

    def test_defaults(self):
        config = GenerationConfig(project_name="my-app")

        assert config.package_manager is PackageManager.NPM
        assert config.install_dependencies is True
        assert config.initialize_git is True
        assert config.setup_environment is True
        assert config.template_variant is TemplateVariant.FULL

    def test_name_trimmed(self):
        config = GenerationConfig(project_name="  my_app  ")
        assert config.project_name == "my_app"

    @pytest.mark.parametrize("name", ["", "   ", "my app", "my/app", "app!"])
    def test_invalid_names_rejected(self, name):
        with pytest.raises(InvalidProjectNameError):
            GenerationConfig(project_name=name)

    def test_frozen(self):
        config = GenerationConfig(project_name="my-app")
        with pytest.raises(ValidationError):
            config.project_name = "other"

    def test_package_manager_from_string(self):
        config = GenerationConfig(project_name="my-app", package_manager="pnpm")
        assert config.package_manager is PackageManager.PNPM


class TestGenerationReport:
    """Test report helpers."""

    def test_succeeded_with_warnings(self, tmp_path):
        report = GenerationReport(
            project_path=tmp_path,
            outcomes=[
                StepOutcome(name="copy-template", status=StepStatus.DONE, required=True),
                StepOutcome(name="install-dependencies", status=StepStatus.WARNING),
            ],
        )

        assert report.succeeded
        assert [o.name for o in report.warnings] == ["install-dependencies"]
        assert report.outcome("copy-template").status is StepStatus.DONE
        assert report.outcome("missing") is None

    def test_required_failure(self, tmp_path):
        report = GenerationReport(
            project_path=tmp_path,
            outcomes=[StepOutcome(name="copy-template", status=StepStatus.FAILED, required=True)],
        )
        assert not report.succeeded

    def test_cancelled_is_not_success(self, tmp_path):
        report = GenerationReport(project_path=tmp_path, cancelled=True)
        assert not report.succeeded
