"""Filesystem helpers for md-writer."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS, STATS_REPORT_SUFFIX

MAX_FILE_SIZE_ENV_VAR = "MD_WRITER_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MD_WRITER_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink."""
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(
    raw_path: str,
    base_dir: Path,
    extensions: tuple[str, ...] | None = MARKDOWN_EXTENSIONS,
) -> Path:
    """Resolve and validate an input filepath under a base directory.

    Args:
        raw_path: User-supplied path (absolute or relative).
        base_dir: Working directory that constrains allowed paths.
        extensions: Accepted suffixes, or None to accept any suffix.

    Returns:
        Path: Absolute path to the file.

    Raises:
        ValueError: If the path does not exist, is outside `base_dir`, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("docs/README.md", Path.cwd())
        normalize_filepath("notes.txt", Path.cwd(), extensions=None)
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{resolved} is outside of the working directory {base_dir}."
        raise ValueError(error_message) from error

    if extensions is not None and resolved.suffix.lower() not in extensions:
        error_message = f"{resolved} is not a Markdown file.\n"
        error_message += f"Supported extensions are: {', '.join(extensions)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("README.md")) as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def read_text(filepath: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> str:
    """Read a UTF-8 file after checking its size.

    Args:
        filepath: Path to the file.
        max_size: Maximum allowed size in bytes.

    Returns:
        str: File content.

    Raises:
        IOError: If the file is too large, unreadable, or not valid UTF-8.
    """
    enforce_file_size(collect_file_stat(filepath), max_size, filepath)
    try:
        with safe_read(filepath) as file:
            return file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise IOError(error_message) from error


def write_text(filepath: Path, content: str) -> Path:
    """Write `content` to `filepath` atomically.

    The content goes to a temporary file in the same directory, which then
    replaces the destination.

    Returns:
        Path: The written path.

    Raises:
        IOError: If the destination is a symlink or cannot be written.

    Examples:
        write_text(Path("AAA.md"), "# Title")
    """
    if filepath.is_symlink():
        error_message = f"Refusing to write through a symlink: {filepath}"
        raise IOError(error_message)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Error writing {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass

    return filepath


def resolve_output_path(filename: str, output_dir: Path) -> Path:
    """Place a user-chosen output filename inside `output_dir`.

    A ``.md`` suffix is added when the name has none.

    Raises:
        ValueError: If the name is empty or contains a path separator.

    Examples:
        resolve_output_path("notes", Path("build"))  # build/notes.md
    """
    name = filename.strip()
    if not name:
        raise ValueError("Filename cannot be empty")
    if "/" in name or "\\" in name:
        raise ValueError(f"Invalid filename: {name}")
    if not Path(name).suffix:
        name = f"{name}.md"
    return output_dir / name


def stats_report_path(filepath: Path) -> Path:
    """Return the JSON report path for a Markdown file (``<stem>-stats.json``)."""
    return filepath.with_name(f"{filepath.stem}{STATS_REPORT_SUFFIX}")


def suffixed_path(filepath: Path, suffix: str) -> Path:
    """Return a sibling path with `suffix` inserted before the extension.

    Examples:
        suffixed_path(Path("notes.md"), "-corrected")  # notes-corrected.md
    """
    return filepath.with_name(f"{filepath.stem}{suffix}{filepath.suffix}")
