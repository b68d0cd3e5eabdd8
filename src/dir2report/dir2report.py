"""Directory to Markdown report generation.

This module ties the scanner, the extractors and the output strategy together.
One ReportGenerator serves one request: it validates the root, renders the tree
section (through the native utility or the internal renderer), collects the
eligible files in a deterministic order, extracts each one and assembles the
final report. Failures are returned as data in a ReportResult; nothing raised by
the scan or by a single file crosses :meth:`ReportGenerator.generate`.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dir2report.config import ReportConfig
from dir2report.encoding.text_decoder import TextDecoder
from dir2report.exceptions import ExternalToolError, ExtractionError
from dir2report.exclusion_rules.base_rules import BaseExclusionRules
from dir2report.exclusion_rules.composite_rules import CompositeExclusionRules
from dir2report.exclusion_rules.dir_name_rules import DirectoryNameExclusionRules
from dir2report.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dir2report.extractors.dispatcher import ExtractorDispatcher
from dir2report.file_system_tree.file_entry import FileEntry
from dir2report.file_system_tree.file_system_tree import FileSystemTree
from dir2report.output_strategies.base_strategy import OutputStrategy
from dir2report.output_strategies.markdown_strategy import MarkdownOutputStrategy
from dir2report.tools.archive_expander import (
    ArchiveExpander,
    CommandArchiveExpander,
    FallbackArchiveExpander,
    ZipfileArchiveExpander,
)
from dir2report.tools.native_tree import NativeTreeLister

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportResult:
    """Outcome of one report request.

    Exactly one of three shapes is produced: a report without messages, a report
    with a non-fatal warning, or an empty report with a fatal error.

    Attributes:
        text: The report, or an empty string when error is set.
        warning: Non-fatal message, e.g. the native tree utility failed and the
            internal renderer was used instead.
        error: Fatal message; the report could not be produced.
        file_count: Number of file blocks in the report.
        directory_count: Number of directories in the tree, the root excluded.
        symlink_count: Number of symbolic links and junctions in the tree.

    Example:
        >>> ReportResult("", error="No root directory specified.").ok
        False
    """

    text: str
    warning: Optional[str] = None
    error: Optional[str] = None
    file_count: int = 0
    directory_count: int = 0
    symlink_count: int = 0

    @property
    def ok(self) -> bool:
        """True unless the request failed fatally."""
        return self.error is None


def _path_sort_key(entry: FileEntry) -> Tuple[str, str]:
    path = str(entry.path)
    return (path.lower(), path)


class ReportGenerator:
    """Generate a directory report for one configuration.

    Collaborators can be replaced for testing or embedding: a tree lister other
    than the native ``tree`` wrapper, an extractor dispatcher with fake tools, or a
    different output strategy.

    Attributes:
        config (ReportConfig): The request being served.
        strategy (OutputStrategy): Report format.
        dispatcher (ExtractorDispatcher): Per-format content extraction.
        directory_rules (DirectoryNameExclusionRules): Name-based exclusion.
        exclusion_rules (BaseExclusionRules): All rules applied while scanning.

    Example:
        >>> result = ReportGenerator(ReportConfig("/path/that/does/not/exist")).generate()
        >>> result.text, result.ok
        ('', False)
    """

    def __init__(
        self,
        config: ReportConfig,
        *,
        tree_lister: Optional[NativeTreeLister] = None,
        dispatcher: Optional[ExtractorDispatcher] = None,
        strategy: Optional[OutputStrategy] = None,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Report configuration.
            tree_lister: Native tree wrapper, used only when config.use_external_tree
                is set. Defaults to a NativeTreeLister for the current platform.
            dispatcher: Extractor dispatcher. Defaults to one built from config.
            strategy: Output strategy. Defaults to Markdown.
        """
        self.config = config
        self.strategy = strategy or MarkdownOutputStrategy()
        self.dispatcher = dispatcher or self._build_dispatcher(config)
        self._tree_lister = tree_lister
        self.directory_rules = DirectoryNameExclusionRules(config.exclude_dir_names)
        self.exclusion_rules = self._build_exclusion_rules()

    @staticmethod
    def _build_dispatcher(config: ReportConfig) -> ExtractorDispatcher:
        expander: ArchiveExpander
        if config.use_external_unzip:
            expander = FallbackArchiveExpander(CommandArchiveExpander())
        else:
            expander = ZipfileArchiveExpander()
        return ExtractorDispatcher(
            decoder=TextDecoder(config.no_bom_text_mode, config.legacy_encoding),
            archive_expander=expander,
            max_output_chars=config.max_output_chars,
        )

    def _build_exclusion_rules(self) -> BaseExclusionRules:
        if not self.config.ignore_patterns:
            return self.directory_rules
        patterns = GitIgnoreExclusionRules(self.config.ignore_patterns, base_dir=self.config.root_path)
        return CompositeExclusionRules([self.directory_rules, patterns])

    @property
    def tree_lister(self) -> NativeTreeLister:
        if self._tree_lister is None:
            self._tree_lister = NativeTreeLister()
        return self._tree_lister

    def _validate_root(self) -> Optional[str]:
        root = self.config.root_path
        if not root:
            return "No root directory specified."
        if not os.path.exists(root):
            return f"Directory not found: {root}"
        if not os.path.isdir(root):
            return f"Not a directory: {root}"
        return None

    def generate(self) -> ReportResult:
        """Produce the report.

        Returns:
            ReportResult holding the report text and any warning, or an empty text
            and a fatal error when the root is missing, empty or not a directory.
        """
        error = self._validate_root()
        if error is not None:
            logger.error(error)
            return ReportResult("", error=error)

        root = str(self.config.root_path)
        tree = FileSystemTree(root, self.exclusion_rules)
        warning: Optional[str] = None
        root_excluded = self.directory_rules.exclude(root)
        lines: List[str] = self.strategy.format_title(root)

        try:
            if root_excluded:
                logger.info("Root %s lies in an excluded directory; the report will be empty", root)
                tree_lines: List[str] = []
                directory_count = symlink_count = 0
            else:
                tree_lines, warning = self._tree_lines(tree)
                directory_count, symlink_count = tree.get_directory_count(), tree.get_symlink_count()
            lines += self.strategy.format_tree_section(tree_lines)

            if self.config.tree_only:
                return ReportResult(
                    "\n".join(lines),
                    warning=warning,
                    directory_count=directory_count,
                    symlink_count=symlink_count,
                )

            lines += self.strategy.format_contents_header(self.config.max_file_bytes)
            files = [] if root_excluded else sorted(tree.collect_files(self.config.accepts), key=_path_sort_key)
        except (FileNotFoundError, NotADirectoryError) as e:
            # The root disappeared after validation.
            logger.error("%s", e)
            return ReportResult("", error=str(e))

        for entry in files:
            content, read_error = self._extract(entry)
            lines += self.strategy.format_file(entry.relative_path, entry.size, content, read_error)

        logger.info("Report for %s covers %d file(s)", root, len(files))
        return ReportResult(
            "\n".join(lines),
            warning=warning,
            file_count=len(files),
            directory_count=directory_count,
            symlink_count=symlink_count,
        )

    def _tree_lines(self, tree: FileSystemTree) -> Tuple[List[str], Optional[str]]:
        """Render the tree, preferring the native utility when configured."""
        warning = None
        if self.config.use_external_tree:
            try:
                return self.tree_lister.list_tree(tree.root_path, self.config.exclude_dir_names), None
            except ExternalToolError as e:
                warning = f"Native tree listing failed ({e}); the built-in tree was used instead."
                logger.warning(warning)
        return tree.render_tree(), warning

    def _extract(self, entry: FileEntry) -> Tuple[Optional[str], Optional[str]]:
        """Extract one file, turning per-file failures into an error message."""
        try:
            return self.dispatcher.extract(entry), None
        except ExtractionError as e:
            message = str(e)
        except OSError as e:
            message = e.strerror or str(e)
        logger.warning("Could not read %s: %s", entry.relative_path, message)
        return None, message


def generate_report(config: ReportConfig, **kwargs) -> ReportResult:
    """Generate a report in one call.

    Keyword arguments are passed to ReportGenerator.

    Example:
        >>> result = generate_report(ReportConfig("/data/project"))  # doctest: +SKIP
        >>> print(result.text)  # doctest: +SKIP
    """
    return ReportGenerator(config, **kwargs).generate()
