"""End-to-end tests for the prompt generation pipeline."""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest

from todoctx.errors import GitError, InstructionNotFoundError
from todoctx.generator import PromptGenerator
from todoctx.markers import CTA_INSTRUCTION, count_marker_lines
from todoctx.schemas.config import PromptConfig


def _write(path, content, mtime=1_000):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def project(tmp_path):
    screen = _write(
        tmp_path / "App" / "Screen.swift",
        "struct Screen {\n    // TODO: - render the Model\n    let model: Model\n}\n",
        mtime=2_000,
    )
    model = _write(
        tmp_path / "App" / "Model.swift",
        "struct Model {\n    // TODO: - stale note\n    let id: Int\n}\n",
    )
    _write(tmp_path / "App" / "Other.swift", "struct Other {}\n")
    return tmp_path, screen, model


class TestPromptGenerator:
    def test_default_run(self, project):
        root, screen, model = project
        prompt = PromptGenerator(PromptConfig(git_root=str(root))).generate()

        assert prompt.instruction == "// TODO: - render the Model"
        assert prompt.instruction_file == str(screen)
        assert prompt.search_root == str(root)
        assert prompt.files == sorted([str(screen.resolve()), str(model.resolve())])
        assert prompt.marker_count == 2
        assert prompt.diff_enabled is False

        # The stray marker in Model.swift is scrubbed, the primary and CTA stay.
        assert "stale note" not in prompt.text
        assert "    // TODO: - render the Model" in prompt.text
        assert prompt.text.endswith(CTA_INSTRUCTION)
        assert "The contents of Model.swift is as follows:" in prompt.text

    def test_singular(self, project):
        root, screen, _ = project
        prompt = PromptGenerator(PromptConfig(git_root=str(root), singular=True)).generate()
        assert prompt.files == [str(screen.resolve())]
        assert count_marker_lines(prompt.text) == 2

    def test_instruction_file_override(self, project):
        root, _, model = project
        cfg = PromptConfig(git_root=str(root), instruction_file=str(model), singular=True)
        prompt = PromptGenerator(cfg).generate()
        assert prompt.instruction == "// TODO: - stale note"
        assert "The contents of Model.swift" in prompt.text

    def test_package_bounds_search_root(self, tmp_path):
        pkg = tmp_path / "Pkg"
        _write(pkg / "Package.swift", "// manifest\n")
        todo = _write(pkg / "Sources" / "Feature.swift", "// TODO: - use Shared\nlet s: Shared\n")
        _write(tmp_path / "App" / "Shared.swift", "struct Shared {}\n")

        prompt = PromptGenerator(PromptConfig(git_root=str(tmp_path))).generate()
        assert prompt.search_root == str(pkg)
        assert prompt.files == [str(todo.resolve())]

    def test_force_global_uses_git_root(self, tmp_path):
        pkg = tmp_path / "Pkg"
        _write(pkg / "Package.swift", "// manifest\n")
        todo = _write(pkg / "Sources" / "Feature.swift", "// TODO: - use Shared\nlet s: Shared\n")
        shared = _write(tmp_path / "App" / "Shared.swift", "struct Shared {}\n")

        cfg = PromptConfig(git_root=str(tmp_path), force_global=True)
        prompt = PromptGenerator(cfg).generate()
        assert prompt.search_root == str(tmp_path)
        assert prompt.files == sorted([str(todo.resolve()), str(shared.resolve())])

    def test_diff_mode(self, project):
        root, screen, _ = project
        git = MagicMock()
        git.diff_file.side_effect = (
            lambda path, branch: "+    // TODO: - render the Model" if path.name == "Screen.swift" else None
        )
        cfg = PromptConfig(git_root=str(root), singular=True, diff_branch="main")
        prompt = PromptGenerator(cfg, git=git).generate()

        git.verify_branch.assert_called_once_with("main")
        assert prompt.diff_enabled is True
        assert prompt.marker_count == 3
        assert "(against branch main)" in prompt.text

    def test_missing_branch(self, project):
        root, _, _ = project
        git = MagicMock()
        git.verify_branch.side_effect = GitError("Branch 'nope' does not exist.")
        cfg = PromptConfig(git_root=str(root), diff_branch="nope")
        with pytest.raises(GitError, match="does not exist"):
            PromptGenerator(cfg, git=git).generate()

    def test_no_instruction(self, tmp_path):
        _write(tmp_path / "A.swift", "struct A {}\n")
        with pytest.raises(InstructionNotFoundError):
            PromptGenerator(PromptConfig(git_root=str(tmp_path))).generate()

    def test_git_root_discovered(self, project):
        root, _, _ = project
        git = MagicMock()
        git.toplevel.return_value = root
        prompt = PromptGenerator(PromptConfig(singular=True), git=git).generate()
        git.toplevel.assert_called_once()
        assert prompt.search_root == str(root)
