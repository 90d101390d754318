# src/viteplate/templates.py
"""Generic files written into the built template."""

from __future__ import annotations

from typing import Any, Dict

from jinja2 import DictLoader, Environment, StrictUndefined

from .models import PackageManager

PROJECT_NAME_PLACEHOLDER = "{{PROJECT_NAME}}"

GITIGNORE_TEMPLATE = '''# Dependencies
node_modules/
.pnp
.pnp.js

# Testing
coverage/
.nyc_output/
playwright-report/
test-results/

# Production
build/
dist/

# Environment variables
{% for name in env_files %}
{{ name }}
{% endfor %}

# Logs
npm-debug.log*
yarn-debug.log*
yarn-error.log*
lerna-debug.log*

# Runtime data
pids
*.pid
*.seed
*.pid.lock

# IDE
.vscode/
.idea/
*.swp
*.swo

# OS
.DS_Store
.DS_Store?
._*
.Spotlight-V100
.Trashes
ehthumbs.db
Thumbs.db

# Storybook
storybook-static/

# MSW
public/mockServiceWorker.js

# Husky
.husky/_/
'''

README_TEMPLATE = '''# {{ project_placeholder }}

A modern, production-ready React application built with React, TypeScript and Vite.

## Getting Started

### Prerequisites

- **Node.js** 20+
- **{{ package_managers | join("/") }}** (latest version)

### Installation

1. **Install dependencies**
   ```bash
{% for pm in package_managers %}
   {{ pm }} install
{% if not loop.last %}
   # or
{% endif %}
{% endfor %}
   ```

2. **Set up environment variables**
   ```bash
   cp .env.example .env
   ```

3. **Start development server**
   ```bash
   npm run dev
   ```

4. **Open your browser**
   Navigate to [http://localhost:3000](http://localhost:3000)

## Available Scripts

{% for group, scripts in script_groups.items() %}
### {{ group }}
{% for script, description in scripts.items() %}
- `npm run {{ script }}` - {{ description }}
{% endfor %}

{% endfor %}
## Documentation

{% for title, path, description in docs %}
- **[{{ title }}](./{{ path }})** - {{ description }}
{% endfor %}

## Features

{% for feature in features %}
- {{ feature }}
{% endfor %}

## Project Structure

```
src/
├── app/                    # App configuration and routing
├── components/             # Reusable UI components
├── features/               # Feature-based modules
├── hooks/                  # Custom React hooks
├── lib/                    # Utility libraries
├── testing/                # Testing utilities
├── types/                  # TypeScript type definitions
└── utils/                  # Utility functions
```

## Contributing

1. Fork the repository
2. Create your feature branch (`git checkout -b feature/amazing-feature`)
3. Commit your changes (`git commit -m 'Add amazing feature'`)
4. Push to the branch (`git push origin feature/amazing-feature`)
5. Open a Pull Request

## License

This project is licensed under the MIT License.
'''

ENV_FILES = [
    ".env",
    ".env.local",
    ".env.development.local",
    ".env.test.local",
    ".env.production.local",
]

SCRIPT_GROUPS = {
    "Development": {
        "dev": "Start development server",
        "build": "Build for production",
        "preview": "Preview production build",
        "generate": "Generate new components",
    },
    "Testing": {
        "test": "Run unit tests",
        "test-e2e": "Run E2E tests",
        "storybook": "Start Storybook",
    },
    "Code Quality": {
        "lint": "Run ESLint",
        "check-types": "Type checking",
    },
}

DOCS = [
    ("Architecture Documentation", "docs/README.md", "Comprehensive architecture guide"),
    ("Security Guide", "docs/SECURITY.md", "Security implementation details"),
    ("Development Guide", "docs/DEVELOPMENT.md", "Development workflow and tools"),
    ("Deployment Guide", "docs/DEPLOYMENT.md", "Build and deployment strategies"),
]

FEATURES = [
    "React 18 + TypeScript + Vite",
    "Authentication & Authorization",
    "TailwindCSS + Radix UI",
    "TanStack Query + Zustand",
    "Testing (Vitest + Playwright)",
    "Storybook + Component Generation",
    "ESLint + Prettier + Husky",
    "Comprehensive Documentation",
]

TEMPLATES = {
    ".gitignore.j2": GITIGNORE_TEMPLATE,
    "README.md.j2": README_TEMPLATE,
}


class TemplateRegistry:
    """Renders the auxiliary file templates with Jinja2."""

    def __init__(self, templates: Dict[str, str] | None = None):
        self.templates = dict(TEMPLATES if templates is None else templates)
        self.env = Environment(
            loader=DictLoader(self.templates),
            keep_trailing_newline=True,
            trim_blocks=True,
            undefined=StrictUndefined,
            autoescape=False,
        )

    def render_template(self, name: str, context: Dict[str, Any]) -> str:
        return self.env.get_template(name).render(**context)

    def default_context(self) -> Dict[str, Any]:
        return {
            "project_placeholder": PROJECT_NAME_PLACEHOLDER,
            "package_managers": [pm.value for pm in PackageManager],
            "env_files": ENV_FILES,
            "script_groups": SCRIPT_GROUPS,
            "docs": DOCS,
            "features": FEATURES,
        }


TEMPLATE_REGISTRY = TemplateRegistry()
