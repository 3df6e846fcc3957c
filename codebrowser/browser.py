"""Run orchestration: reports in, annotated source pages out.

Steps:
    1. Resolve the adapters (unknown names fail before anything is touched)
    2. Clear and create the output directory
    3. Load the report directory into one document
    4. Build the issue store
    5. Merge, render and write every file in a worker pool
    6. Write the index page and copy resources
"""

import logging
import os
import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from codebrowser.adapters import resolve
from codebrowser.config import Config
from codebrowser.document import ReportDocument
from codebrowser.merger import merge
from codebrowser.models import count_by_severity
from codebrowser.store import IssueStore
from codebrowser.view import RenderUnavailable, render_file
from codebrowser.writer import IndexEntry, ReviewContext, ReviewWriter

_log = logging.getLogger(__name__)


@dataclass
class RunResult:
    rendered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    issues: int = 0


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def common_path_prefix(paths) -> str:
    """Longest directory prefix shared by *paths*, with a trailing separator.

    Returns an empty string when there is none (or mixed absolute/relative).
    """
    directories = [os.path.dirname(p) for p in paths]
    if not directories:
        return ""
    try:
        prefix = os.path.commonpath(directories)
    except ValueError:
        return ""
    if not prefix:
        return ""
    return prefix if prefix.endswith(os.sep) else prefix + os.sep


def source_files(source_dir: str | Path) -> list[str]:
    """Every regular file below *source_dir*, absolute and sorted."""
    root = Path(source_dir).resolve()
    return sorted(str(p) for p in root.rglob("*") if p.is_file())


# ---------------------------------------------------------------------------
# Per-file processing
# ---------------------------------------------------------------------------

def process_file(
    file_path: str,
    report_path: str,
    display_path: str,
    store: IssueStore,
    writer: ReviewWriter,
    logger: logging.Logger,
) -> IndexEntry:
    """Merge, render and write one file. Failures are logged, not raised.

    *file_path* is read from disk; *report_path* is the key the reports use.
    """
    issues = store.issues_for(report_path)
    counts = count_by_severity(issues)
    started = time.perf_counter()
    logger.debug("Generating source view for [...%s]", display_path)

    try:
        lines = render_file(file_path, merge(issues))
        page = writer.write_review(ReviewContext(display_path, lines, counts))
    except RenderUnavailable as exc:
        logger.warning("%s", exc)
        return IndexEntry(display_path, counts)
    except OSError as exc:
        logger.error("Cannot write review page for '%s': %s", display_path, exc)
        return IndexEntry(display_path, counts)

    logger.debug("completed in %.3fs", time.perf_counter() - started)
    return IndexEntry(display_path, counts, page)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run(config: Config, logger: logging.Logger | None = None) -> RunResult:
    """Generate the code browser for a validated *config*.

    Raises:
        UnknownAdapterError: if *config.adapters* names an unregistered adapter.
        ReportLoadError:     if the log directory cannot be read.
    """
    logger = logger or _log
    adapters = resolve(config.adapters)

    output = Path(config.output_dir)
    if output.exists():
        shutil.rmtree(output)
    output.mkdir(parents=True)

    logger.debug("Load XML files from '%s'", config.log_dir)
    document = ReportDocument.from_directory(config.log_dir, logger)

    logger.debug("Load adapters: %s", ", ".join(a.name for a in adapters))
    store = IssueStore(adapters, document, logger)
    files = store.files_with_issues()
    logger.info("Found %d files with issues.", len(files))

    # (path on disk, path used by the reports)
    if config.source_dir is not None:
        by_real = {os.path.realpath(f): f for f in files}
        targets = [(p, by_real.get(p, p)) for p in source_files(config.source_dir)]
    else:
        targets = [(f, f) for f in sorted(files)]

    prefix = common_path_prefix(path for path, _ in targets)
    writer = ReviewWriter(output, logger=logger)

    with ThreadPoolExecutor(
        max_workers=config.workers,
        thread_name_prefix="codebrowser",
    ) as pool:
        futures = [
            pool.submit(
                process_file, path, key, path[len(prefix):], store, writer, logger
            )
            for path, key in targets
        ]
        entries = [future.result() for future in futures]

    writer.write_index(entries)
    writer.copy_resources()

    result = RunResult(issues=store.total())
    for entry in entries:
        (result.rendered if entry.page else result.failed).append(entry.file_path)
    return result
