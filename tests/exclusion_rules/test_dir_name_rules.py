import os

import pytest

from dir2report.exclusion_rules.dir_name_rules import DirectoryNameExclusionRules


@pytest.fixture
def project(tmp_path):
    deep = tmp_path / "NODE_MODULES" / "pkg" / "lib"
    deep.mkdir(parents=True)
    (deep / "index.js").write_text("module.exports = {}")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.js").write_text("main()")
    (tmp_path / "src" / "node_modules_notes.txt").write_text("not a directory")
    return tmp_path


def test_file_three_levels_below_excluded_directory(project):
    rules = DirectoryNameExclusionRules(["node_modules"])
    assert rules.exclude(str(project / "NODE_MODULES" / "pkg" / "lib" / "index.js")) is True


def test_sibling_outside_excluded_subtree(project):
    rules = DirectoryNameExclusionRules(["node_modules"])
    assert rules.exclude(str(project / "src" / "main.js")) is False


def test_directory_matches_itself(project):
    rules = DirectoryNameExclusionRules(["node_modules"])
    assert rules.exclude(str(project / "NODE_MODULES")) is True


def test_file_name_is_not_a_directory_name(tmp_path):
    (tmp_path / "build").write_text("a file named like an excluded directory")
    rules = DirectoryNameExclusionRules(["build"])
    assert rules.exclude(str(tmp_path / "build")) is False


def test_partial_names_do_not_match(project):
    rules = DirectoryNameExclusionRules(["node"])
    assert rules.exclude(str(project / "src" / "node_modules_notes.txt")) is False
    assert rules.exclude(str(project / "NODE_MODULES" / "pkg")) is False


def test_walk_includes_ancestors_above_the_scanned_root(project):
    rules = DirectoryNameExclusionRules([project.name])
    assert rules.exclude(str(project / "src" / "main.js")) is True


def test_walk_terminates_at_filesystem_root():
    rules = DirectoryNameExclusionRules(["definitely-not-present"])
    assert rules.exclude(os.path.abspath(os.sep)) is False


def test_empty_rules_exclude_nothing(project):
    rules = DirectoryNameExclusionRules([])
    assert rules.has_rules() is False
    assert rules.exclude(str(project / "NODE_MODULES" / "pkg" / "lib" / "index.js")) is False


def test_names_are_normalized():
    rules = DirectoryNameExclusionRules([" .Git ", "", "  "])
    assert rules.names == frozenset({".git"})
    assert rules.has_rules() is True
