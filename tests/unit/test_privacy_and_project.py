"""Unit tests for privacy tag handling and project identification."""

import subprocess
from unittest.mock import patch

from supermemory_claude.privacy import PRIVATE_PLACEHOLDER, is_fully_private, strip_private_content
from supermemory_claude.project import get_container_tag, get_project_name, get_project_root, sha256_short


def test_strip_private_content():
    text = "keep <private>secret</private> and <PRIVATE>multi\nline</PRIVATE> end"

    assert strip_private_content(text) == f"keep {PRIVATE_PLACEHOLDER} and {PRIVATE_PLACEHOLDER} end"


def test_strip_private_content_is_non_greedy():
    assert strip_private_content("<private>a</private>b<private>c</private>") == "[PRIVATE]b[PRIVATE]"


def test_is_fully_private():
    assert is_fully_private("")
    assert is_fully_private("<private>all of it</private>")
    assert is_fully_private(" <private>a</private><private>b</private> ")
    assert not is_fully_private("visible <private>hidden</private>")


def test_container_tag_uses_git_root():
    with patch("supermemory_claude.project.subprocess.check_output", return_value="/work/repo\n"):
        assert get_container_tag("/work/repo/sub") == f"claudecode_project_{sha256_short('/work/repo')}"
        assert get_project_name("/work/repo/sub") == "repo"


def test_container_tag_outside_git_uses_cwd():
    error = subprocess.CalledProcessError(128, ["git"])
    with patch("supermemory_claude.project.subprocess.check_output", side_effect=error):
        assert get_container_tag("/tmp/scratch") == f"claudecode_project_{sha256_short('/tmp/scratch')}"
        assert get_project_name("/tmp/scratch/") == "scratch"
        assert str(get_project_root("/tmp/scratch")) == "/tmp/scratch"


def test_sha256_short_length():
    assert len(sha256_short("x")) == 16
