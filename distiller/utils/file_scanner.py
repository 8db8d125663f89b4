"""File scanner — discover source files and tag them with a language."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path

# Directories to always skip
SKIP_DIRS = {
    ".git", "__pycache__", "node_modules", ".venv", "venv", ".env",
    "dist", "build", ".tox", ".mypy_cache", ".pytest_cache", ".ruff_cache",
    "target", "vendor", ".next", ".nuxt", "coverage",
}

# File extensions we care about, mapped to language
LANGUAGE_MAP = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".swift": "swift",
}


def scan_project_files(repo_path: Path, exclude: list[str] | tuple[str, ...] = ()) -> list[Path]:
    """Recursively scan a project directory for source files.

    Skips common non-source directories and any file whose name or
    relative path matches one of the *exclude* glob patterns. Results are
    sorted so batch output is stable.
    """
    files = []
    for item in repo_path.rglob("*"):
        if item.is_file() and _should_include(item, repo_path, exclude):
            files.append(item)
    return sorted(files)


def expand_paths(paths: list[Path], exclude: list[str] | tuple[str, ...] = ()) -> list[Path]:
    """Expand directories into their source files; explicit files pass through."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(scan_project_files(path, exclude))
        else:
            files.append(path)
    return list(dict.fromkeys(files))


def _should_include(path: Path, root: Path, exclude: list[str] | tuple[str, ...]) -> bool:
    """Check if a file should be included in a batch."""
    relative = path.relative_to(root)

    # Skip files in excluded directories
    for part in relative.parts:
        if part in SKIP_DIRS:
            return False

    for pattern in exclude:
        if fnmatch(path.name, pattern) or fnmatch(relative.as_posix(), pattern):
            return False

    # Only include known source file types
    return path.suffix.lower() in LANGUAGE_MAP


def classify_file(path: Path) -> str | None:
    """Return the language classification for a file, or None if unknown."""
    return LANGUAGE_MAP.get(path.suffix.lower())
