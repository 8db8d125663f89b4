"""Processor — runs the per-file pipeline and fans a batch out over files.

Pipeline for one file:

    bytes -> [unused-import filter] -> backend -> strip(policy) -> render

The import filter runs on the raw source, before parsing, so the tree never
contains imports the analyzer proved dead. One file's failure never stops a
batch; the batch only counts as failed when no file succeeded.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from distiller.backends.base import BackendRegistry, default_backends
from distiller.errors import DistillerError
from distiller.importfilter.registry import FilterRegistry, filter_imports
from distiller.ir.models import IRFile
from distiller.ir.render import render_many, render_text, to_dict
from distiller.stripper import StripPolicy, strip
from distiller.utils.file_scanner import classify_file

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


@dataclass
class ProcessOptions:
    """What to do with each file."""

    policy: StripPolicy = field(default_factory=StripPolicy)
    filter_unused_imports: bool = False
    verbosity: int = 0
    output_format: str = "text"


@dataclass
class ProcessedFile:
    path: str
    language: str
    tree: IRFile
    output: str
    removed_imports: list[str] = field(default_factory=list)
    filter_error: str | None = None


@dataclass
class FileFailure:
    path: str
    error: str
    error_type: str


@dataclass
class BatchResult:
    files: list[ProcessedFile] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """False only when there were files to process and none succeeded."""
        return bool(self.files) or not self.failures

    def render(self, output_format: str = "text") -> str:
        if output_format == "json":
            return json.dumps([to_dict(f.tree) for f in self.files], indent=2)
        return render_many([f.tree for f in self.files])


def process_source(
    source: bytes | str,
    filename: str,
    language: str | None = None,
    options: ProcessOptions | None = None,
    backends: BackendRegistry | None = None,
    filters: FilterRegistry | None = None,
) -> ProcessedFile:
    """Distill one in-memory source file.

    Raises:
        UnsupportedLanguageError: No backend for the file's language.
        BackendUnavailableError: The backend cannot run in this build.
    """
    options = options or ProcessOptions()
    if options.output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {options.output_format}")

    language = language or classify_file(Path(filename))
    backend = (backends or default_backends()).get(language, filename)

    text = source.decode("utf-8", errors="replace") if isinstance(source, bytes) else source

    removed: list[str] = []
    filter_error = None
    if options.filter_unused_imports:
        result = filter_imports(text, backend.language, options.verbosity, registry=filters)
        text, removed, filter_error = result.code, result.removed, result.error
        if removed:
            logger.info("%s: removed %d unused import(s)", filename, len(removed))

    tree = backend.process(text.encode("utf-8"), filename)
    if tree.has_errors:
        logger.warning("%s: %d parse error(s), output is partial", filename, len(tree.errors))

    stripped = strip(tree, options.policy)
    if options.output_format == "json":
        output = json.dumps(to_dict(stripped), indent=2)
    else:
        output = render_text(stripped)

    return ProcessedFile(
        path=filename,
        language=backend.language,
        tree=stripped,
        output=output,
        removed_imports=removed,
        filter_error=filter_error,
    )


def process_file(
    path: str | Path,
    options: ProcessOptions | None = None,
    backends: BackendRegistry | None = None,
    filters: FilterRegistry | None = None,
) -> ProcessedFile:
    """Read and distill one file. I/O errors propagate."""
    path = Path(path)
    return process_source(
        path.read_bytes(), str(path), options=options, backends=backends, filters=filters
    )


def process_batch(
    paths: list[str | Path],
    options: ProcessOptions | None = None,
    workers: int = 1,
    backends: BackendRegistry | None = None,
    filters: FilterRegistry | None = None,
) -> BatchResult:
    """Distill many files, recording per-file failures instead of raising.

    With ``workers > 1`` files are processed on a thread pool; results keep
    the input order either way.
    """

    def run(path: str | Path) -> ProcessedFile | FileFailure:
        try:
            return process_file(path, options, backends, filters)
        except (DistillerError, OSError) as e:
            logger.warning("Skipping %s: %s", path, e)
            return FileFailure(path=str(path), error=str(e), error_type=type(e).__name__)

    if workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(run, paths))
    else:
        outcomes = [run(path) for path in paths]

    result = BatchResult()
    for outcome in outcomes:
        if isinstance(outcome, FileFailure):
            result.failures.append(outcome)
        else:
            result.files.append(outcome)

    logger.info("Processed %d file(s), %d failed", len(result.files), len(result.failures))
    return result
