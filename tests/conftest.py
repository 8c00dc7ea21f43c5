"""Shared test fixtures for module-inventory tests."""

import re
import shutil
from pathlib import Path

import pytest

from module_inventory.exceptions import SourceSyntaxError

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_REQUIRE = re.compile(r'require\("([^"]+)"\)')


class FakeExtractor:
    """Returns every require("...") name; text containing SYNTAX ERROR fails."""

    def __init__(self):
        self.calls = 0

    def extract(self, text: str) -> list[str]:
        self.calls += 1
        if "SYNTAX ERROR" in text:
            raise SourceSyntaxError("unexpected token", line=1)
        return _REQUIRE.findall(text)


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create files (relative path -> content) below root."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def fake_extractor():
    """Extractor that understands only require("...")."""
    return FakeExtractor()


@pytest.fixture
def scenario_tree(tmp_path):
    """a.js and sub/b.js reference fs; node_modules/c.js must be ignored."""
    return write_tree(
        tmp_path,
        {
            "a.js": 'const fs = require("fs");\n',
            "sub/b.js": 'const fs = require("fs");\nconst a = require("./a");\n',
            "node_modules/c.js": 'module.exports = require("lodash");\n',
        },
    )


@pytest.fixture
def js_project(tmp_path):
    """Copy of fixtures/js_project plus a .git directory holding a .js file."""
    root = tmp_path / "js_project"
    shutil.copytree(FIXTURES_DIR / "js_project", root)
    write_tree(root, {".git/hooks/pre-commit.js": 'require("also-hidden");\n'})
    return root


@pytest.fixture
def js_project_index():
    """Index expected for js_project with the tree-sitter extractor."""
    return {
        "path": ["index.js", "lib/render.mjs"],
        "fs": ["index.js", "lib/render.mjs"],
        "./lib/server": ["index.js"],
        "he": ["lib/escape.mjs"],
        "util": ["lib/render.mjs", "lib/server.js"],
        "./escape.mjs": ["lib/render.mjs"],
        "lodash": ["lib/render.mjs"],
        "http": ["lib/server.js"],
        "./render": ["lib/server.js"],
        "underscore": ["lib/amd/template.js"],
        "jquery": ["lib/amd/widget.js"],
        "./template": ["lib/amd/widget.js"],
    }
