# tests/conftest.py
from __future__ import annotations
import json
import subprocess
import pytest
from pathlib import Path
from typing import List, Optional

from viteplate.builder import TemplateBuilder
from viteplate.models import GenerationConfig, PackageManager
from viteplate.resolver import ConfigResolver


TOOL_MANIFEST = {
    "name": "create-react-vite-boilerplate",
    "version": "1.4.2",
    "description": "React Vite Boilerplate",
    "type": "module",
    "bin": {"create-react-vite-boilerplate": "./bin/cli.js"},
    "files": ["bin", "template"],
    "scripts": {
        "dev": "vite",
        "build": "tsc && vite build",
        "build-template": "node scripts/build-template.js",
        "test-cli": "node scripts/test-cli.js",
        "prepublishOnly": "npm run build-template",
    },
    "dependencies": {"react": "^18.2.0"},
    "devDependencies": {
        "chalk": "^5.3.0",
        "commander": "^11.1.0",
        "fs-extra": "^11.1.1",
        "inquirer": "^9.2.12",
        "ora": "^7.0.1",
        "vite": "^5.0.0",
    },
}


@pytest.fixture
def boilerplate_source(tmp_path):
    """Create a boilerplate working tree with tool-only and ignorable content."""
    root = tmp_path / "boilerplate"
    root.mkdir()

    (root / "package.json").write_text(json.dumps(TOOL_MANIFEST, indent=2))
    (root / "index.html").write_text("<div id='root'></div>")
    (root / "vite.config.ts").write_text("export default {};\n")
    (root / "tailwind.config.cjs").write_text("module.exports = {};\n")
    (root / ".env.example").write_text("VITE_APP_API_URL=http://localhost:8080/api\n")
    (root / ".env").write_text("SECRET=do-not-ship\n")
    (root / "README.md").write_text("# create-react-vite-boilerplate\n\nTool notes.\n")
    (root / ".gitignore").write_text("node_modules/\n")
    (root / "package-lock.json").write_text("{}")

    (root / "src" / "app").mkdir(parents=True)
    (root / "src" / "main.tsx").write_text("import { App } from './app/app';\n")
    (root / "src" / "app" / "app.tsx").write_text("export const App = () => null;\n")
    (root / "src" / "assets").mkdir()
    (root / "src" / "assets" / "logo.bin").write_bytes(bytes(range(256)))

    (root / "docs").mkdir()
    (root / "docs" / "README.md").write_text("# Architecture\n")

    # Tool-only and generated content that must never reach the template
    (root / "bin").mkdir()
    (root / "bin" / "cli.js").write_text("#!/usr/bin/env node\n")
    (root / "scripts").mkdir()
    (root / "scripts" / "build-template.js").write_text("// build\n")
    (root / "node_modules" / "react").mkdir(parents=True)
    (root / "node_modules" / "react" / "index.js").write_text("module.exports = {};\n")
    (root / "src" / "node_modules").mkdir()
    (root / "src" / "node_modules" / "nested.js").write_text("// nested cache\n")
    (root / "dist").mkdir()
    (root / "dist" / "index.js").write_text("// built\n")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / ".storybook").mkdir()
    (root / ".storybook" / "main.ts").write_text("export default {};\n")
    (root / ".storybook" / "manager-head.html").write_text("<style></style>\n")

    return root


@pytest.fixture
def built_template(boilerplate_source, tmp_path):
    """Template built from the boilerplate fixture."""
    output = tmp_path / "template"
    TemplateBuilder(boilerplate_source, output).build()
    return output


@pytest.fixture
def workspace(tmp_path):
    """Directory new projects are created in."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def minimal_config():
    """Config with every optional step disabled."""
    return GenerationConfig(
        project_name="test-cli-project",
        package_manager=PackageManager.NPM,
        install_dependencies=False,
        initialize_git=False,
        setup_environment=False,
    )


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Isolate configuration to a temporary directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("VITEPLATE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    return config_dir


class ScriptedResolver(ConfigResolver):
    """Interactive resolver that replays queued answers."""

    interactive = True

    def __init__(self, names: Optional[List[str]] = None, overwrite: bool = False, **answers):
        self.names = list(names or [])
        self.overwrite = overwrite
        self.answers = answers
        self.asked: List[str] = []
        self.invalid_messages: List[str] = []

    def ask_project_name(self, default):
        self.asked.append("project_name")
        return self.names.pop(0)

    def ask_package_manager(self, default):
        self.asked.append("package_manager")
        return self.answers.get("package_manager", default)

    def confirm_install(self, default):
        self.asked.append("install")
        return self.answers.get("install", default)

    def confirm_git(self, default):
        self.asked.append("git")
        return self.answers.get("git", default)

    def confirm_environment(self, default):
        self.asked.append("env")
        return self.answers.get("env", default)

    def confirm_overwrite(self, path):
        self.asked.append("overwrite")
        return self.overwrite

    def report_invalid(self, message):
        self.invalid_messages.append(message)


class FakeRunner:
    """Stands in for subprocess.run and records every command."""

    def __init__(self, fail_on: Optional[str] = None, missing: Optional[str] = None):
        self.calls: List[dict] = []
        self.fail_on = fail_on
        self.missing = missing

    def __call__(self, cmd, **kwargs):
        self.calls.append({"cmd": list(cmd), **kwargs})
        if self.missing and cmd[0] == self.missing:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        if self.fail_on and " ".join(cmd).startswith(self.fail_on):
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="npm ERR! broken manifest\n")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    @property
    def commands(self) -> List[str]:
        return [" ".join(call["cmd"]) for call in self.calls]


@pytest.fixture
def scripted_resolver():
    return ScriptedResolver


@pytest.fixture
def fake_runner():
    return FakeRunner
