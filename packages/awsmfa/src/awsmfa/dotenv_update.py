"""Merge a replacement map into an existing dotenv file.

Only keys the file already declares are updated; comments, blank lines,
ordering and unrelated keys are kept. The new contents replace the old
ones through a temporary file and an atomic rename, so the target is never
observed half-written.
"""

import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Union

from awsmfa import dotenv_file
from awsmfa.dotenv_file import Entry, Line
from awsmfa.exceptions import DotenvWriteError
from awsmfa.logging import get_logger

DOTENV_FILENAME = ".env"

logger = get_logger(__name__)


@dataclass
class UpdateResult:
    """Outcome of a successful update_dotenv call."""

    path: Path
    replaced: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)


def apply_replacements(lines: list[Line], replacements: Mapping[str, str]) -> list[Line]:
    """Replace the value of every entry whose key is in replacements.

    Keys in replacements that the document does not declare are not added.
    """
    return [
        Entry(line.key, replacements[line.key])
        if isinstance(line, Entry) and line.key in replacements
        else line
        for line in lines
    ]


def _write_atomic(path: Path, contents: str) -> None:
    """Write contents to a sibling temp file, fsync it, then rename over path."""
    mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else None
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as tmp:
            tmp.write(contents)
            tmp.flush()
            os.fsync(tmp.fileno())
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def update_dotenv(
    location: Union[str, os.PathLike],
    replacements: Mapping[str, str],
    filename: str = DOTENV_FILENAME,
) -> UpdateResult:
    """Update the dotenv file in a directory with new values.

    Args:
        location: Directory holding the dotenv file
        replacements: New values keyed by variable name
        filename: Name of the dotenv file inside location

    Returns:
        UpdateResult listing replaced keys and keys the file does not declare

    Raises:
        DotenvWriteError: If the file cannot be created, read or written
    """
    path = Path(location) / filename
    try:
        if not path.exists():
            logger.debug("Creating empty dotenv file", extra={"path": str(path)})
            path.touch()

        lines = dotenv_file.parse(path.read_bytes())
        updated = apply_replacements(lines, replacements)
        # a symlinked dotenv file is updated through the link
        _write_atomic(path.resolve(), dotenv_file.render(updated))
    except OSError as e:
        raise DotenvWriteError(f"Could not update {path}: {e.strerror or e}") from e

    declared = set(dotenv_file.keys(lines))
    result = UpdateResult(
        path=path,
        replaced=[key for key in replacements if key in declared],
        ignored=[key for key in replacements if key not in declared],
    )
    logger.debug(
        "Updated dotenv file",
        extra={"path": str(path), "replaced": result.replaced, "ignored": result.ignored},
    )
    return result
