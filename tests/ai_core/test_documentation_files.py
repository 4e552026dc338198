"""
Unit Tests for the documentation file taxonomy and change kind detection.
"""

import pytest

from devonboard.ai_core.classification import (
    detect_change_kind,
    filter_documentation_files,
    is_documentation_file,
    should_sync,
)
from devonboard.models.changes import ChangeKind


@pytest.mark.parametrize(
    "path",
    [
        "README.md",
        "docs/guide.rst",
        "packages/api/docs/openapi.yaml",
        "Docs/intro.html",
        "CHANGELOG.markdown",
        "notes.txt",
        "readme",
        "INSTALL",
        "Onboarding.rst",
        "contributing.adoc",
        "services/web/SETUP",
    ],
)
def test_documentation_files(path):
    assert is_documentation_file(path) is True


@pytest.mark.parametrize(
    "path",
    [
        "",
        "src/index.ts",
        "setup.py",
        "install.sh",
        "docs",  # A file named docs, not a directory
        "src/docsify/config.js",
        "package.json",
    ],
)
def test_non_documentation_files(path):
    assert is_documentation_file(path) is False


def test_windows_separators():
    assert is_documentation_file("docs\\windows\\setup.ps1") is True


def test_filter_documentation_files_keeps_order():
    files = ["src/app.py", "docs/b.md", "README.md", "setup.py"]
    assert filter_documentation_files(files) == ["docs/b.md", "README.md"]


def test_should_sync():
    assert should_sync(["src/app.py", "README.md"]) is True
    assert should_sync(["src/app.py", "setup.py"]) is False
    assert should_sync([]) is False


def test_detect_change_kind_content():
    old = "# Setup\n\nRun `npm install`"
    new = "# Setup\n\nRun `npm install` then `npm run bootstrap`"
    assert detect_change_kind(old, new) == ChangeKind.CONTENT


def test_detect_change_kind_structure():
    old = "# Setup\n\nRun `npm install`"
    new = "# Setup\n\nRun `npm install`\n\n## Bootstrap\n\nRun `npm run bootstrap`"
    assert detect_change_kind(old, new) == ChangeKind.STRUCTURE


def test_detect_change_kind_deletion():
    assert detect_change_kind("# Setup\n\nsteps", "   \n") == ChangeKind.DELETION


def test_detect_change_kind_new_file_without_headings():
    assert detect_change_kind("", "plain text notes") == ChangeKind.CONTENT


def test_indented_shebang_is_not_a_heading():
    old = "Run:\n\n    #!/bin/bash\n"
    new = "Run:\n\n    #!/bin/sh\n"
    assert detect_change_kind(old, new) == ChangeKind.CONTENT


def test_comments_in_fenced_code_are_not_headings():
    """Test shell comments inside code fences do not count as structure."""
    old = "# Setup\n\n```bash\n# install deps\nnpm install\n```\n\n## Next\n"
    new = "# Setup\n\n```bash\n# install all deps\nnpm install\n```\n\n## Next\n"
    assert detect_change_kind(old, new) == ChangeKind.CONTENT


def test_headings_after_fenced_code_still_count():
    old = "# Setup\n\n~~~\n# comment\n~~~\n"
    new = "# Setup\n\n~~~\n# comment\n~~~\n\n## Troubleshooting\n"
    assert detect_change_kind(old, new) == ChangeKind.STRUCTURE
