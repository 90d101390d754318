# src/viteplate/manifest.py
"""Typed view over a package.json document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ManifestError

MANIFEST_FILENAME = "package.json"


class Manifest:
    """Named accessors for the package.json fields viteplate touches.

    Everything else in the document is carried through as-is, and key order
    is kept when the manifest is written back.
    """

    def __init__(self, data: Dict[str, Any], path: Optional[Path] = None):
        self.data = data
        self.path = path

    @classmethod
    def load(cls, path: Path) -> Manifest:
        if not path.is_file():
            raise ManifestError(path, "file not found")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(path, f"cannot read file: {e}") from e
        except json.JSONDecodeError as e:
            raise ManifestError(path, f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(path, "top-level value must be an object")

        return cls(data, path)

    @classmethod
    def load_optional(cls, path: Path) -> Optional[Manifest]:
        """Load the manifest, or return None when the file does not exist."""
        if not path.exists():
            return None
        return cls.load(path)

    def to_json(self) -> str:
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"

    def save(self, path: Optional[Path] = None) -> Path:
        target = path or self.path
        if target is None:
            raise ManifestError(Path(MANIFEST_FILENAME), "no path to save to")

        target.write_text(self.to_json(), encoding="utf-8")
        self.path = target
        return target

    # Scalar fields

    @property
    def name(self) -> Optional[str]:
        return self.data.get("name")

    @name.setter
    def name(self, value: str) -> None:
        self.data["name"] = value

    @property
    def version(self) -> Optional[str]:
        return self.data.get("version")

    @version.setter
    def version(self, value: str) -> None:
        self.data["version"] = value

    @property
    def private(self) -> bool:
        return bool(self.data.get("private", False))

    @private.setter
    def private(self, value: bool) -> None:
        self.data["private"] = value

    # Publishing fields, only meaningful for the tool's own package

    @property
    def bin(self) -> Optional[Dict[str, str]]:
        return self.data.get("bin")

    @property
    def files(self) -> Optional[List[str]]:
        return self.data.get("files")

    def remove_publishing_fields(self) -> List[str]:
        """Drop bin and files; return the keys that were present."""
        removed = []
        for key in ("bin", "files"):
            if key in self.data:
                del self.data[key]
                removed.append(key)
        return removed

    # Mappings

    @property
    def scripts(self) -> Dict[str, str]:
        return self.data.get("scripts") or {}

    @property
    def dependencies(self) -> Dict[str, str]:
        return self.data.get("dependencies") or {}

    @property
    def dev_dependencies(self) -> Dict[str, str]:
        return self.data.get("devDependencies") or {}

    def remove_scripts(self, names: Iterable[str]) -> List[str]:
        return self._remove_entries("scripts", names)

    def remove_dev_dependencies(self, names: Iterable[str]) -> List[str]:
        return self._remove_entries("devDependencies", names)

    def _remove_entries(self, section: str, names: Iterable[str]) -> List[str]:
        mapping = self.data.get(section)
        if not isinstance(mapping, dict):
            return []

        removed = []
        for name in names:
            if name in mapping:
                del mapping[name]
                removed.append(name)
        return removed

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def __repr__(self) -> str:
        return f"Manifest(name={self.name!r}, path={self.path!s})"
