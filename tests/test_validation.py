# tests/test_validation.py
from __future__ import annotations
import pytest

from viteplate.validation import TemplateValidator, ProjectValidator
from viteplate.exceptions import TemplateNotFoundError, InvalidProjectNameError


class TestTemplateValidator:
    """Test template directory validation."""

    def test_validate_valid_template(self, built_template):
        TemplateValidator.validate_template(built_template)

    def test_validate_template_nonexistent(self, tmp_path):
        with pytest.raises(TemplateNotFoundError, match="Template not found"):
            TemplateValidator.validate_template(tmp_path / "does-not-exist")

    def test_validate_template_file_not_dir(self, tmp_path):
        template_file = tmp_path / "template.txt"
        template_file.write_text("not a directory")

        with pytest.raises(TemplateNotFoundError, match="not a directory"):
            TemplateValidator.validate_template(template_file)

    def test_validate_template_empty(self, tmp_path):
        empty = tmp_path / "template"
        empty.mkdir()

        with pytest.raises(TemplateNotFoundError, match="build-template"):
            TemplateValidator.validate_template(empty)


class TestProjectValidator:
    """Test project name validation."""

    @pytest.mark.parametrize("name", ["my-app", "my_app", "MyApp", "app2", "2fast", "a", "test-cli-project"])
    def test_valid_names(self, name):
        assert ProjectValidator.validate_project_name(name) == name

    def test_surrounding_whitespace_trimmed(self):
        assert ProjectValidator.validate_project_name("  my-app\n") == "my-app"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_names(self, name):
        with pytest.raises(InvalidProjectNameError, match="required"):
            ProjectValidator.validate_project_name(name)

    @pytest.mark.parametrize("name", ["my app", "my.app", "../escape", "app/name", "naïve"])
    def test_invalid_characters(self, name):
        with pytest.raises(InvalidProjectNameError, match="letters, numbers, hyphens, and underscores"):
            ProjectValidator.validate_project_name(name)
