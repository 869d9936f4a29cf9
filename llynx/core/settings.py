"""Editor settings file handling.

Only the library field (``Lua.workspace.library`` by default) is interpreted.
Every other field is kept verbatim so that rewriting the file never loses the
user's own settings. Comments in the original file are not preserved.

Reads and writes are not transactional: the file is read, modified in memory
and written back without locking, so a concurrent writer can lose updates.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import json5
from pydantic import TypeAdapter, ValidationError

from llynx.core.errors import SettingsError
from llynx.utils.filesystem import write_text_file

logger = logging.getLogger(__name__)

LIBRARY_KEY = "Lua.workspace.library"

_library_adapter = TypeAdapter(list[str])


@dataclass(frozen=True)
class SettingsDocument:
    """Structured view over a settings file.

    Attributes:
        library_key: Name of the recognized library field
        library: Library entries, or None when the field is absent
        extra: All other fields, in their original order
    """

    library_key: str = LIBRARY_KEY
    library: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


def is_blank(text: str) -> bool:
    """Check whether settings text holds only whitespace and comments."""
    if not text.strip():
        return True
    # Comments are allowed inside an array, and any value would become an item.
    try:
        return json5.loads(f"[{text}\n]") == []
    except ValueError:
        return False


def load_settings(text: str, library_key: str = LIBRARY_KEY) -> SettingsDocument:
    """Parse settings text (JSON with comments).

    Text holding only whitespace and comments is an empty document.

    Raises:
        SettingsError: If the text is malformed or the library field is not a
            list of strings
    """
    if not text.strip():
        return SettingsDocument(library_key=library_key)

    try:
        data = json5.loads(text)
    except ValueError as e:
        if is_blank(text):
            return SettingsDocument(library_key=library_key)
        raise SettingsError(f"invalid settings syntax: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"settings must be a JSON object, got {type(data).__name__}")

    extra = dict(data)
    raw_library = extra.pop(library_key, None)
    if raw_library is None:
        return SettingsDocument(library_key=library_key, extra=extra)

    try:
        library = _library_adapter.validate_python(raw_library)
    except ValidationError as e:
        raise SettingsError(f"'{library_key}' must be a list of strings: {e}") from e

    return SettingsDocument(library_key=library_key, library=library, extra=extra)


def get_library(doc: SettingsDocument) -> list[str] | None:
    """Get the library entries, or None if the field is absent."""
    return None if doc.library is None else list(doc.library)


def with_library(doc: SettingsDocument, library: list[str]) -> SettingsDocument:
    """Return a copy of the document with the library field replaced."""
    return replace(doc, library=list(library))


def serialize(doc: SettingsDocument) -> str:
    """Render the document as JSON text."""
    data: dict[str, Any] = {}
    if doc.library is not None:
        data[doc.library_key] = doc.library
    for key, value in doc.extra.items():
        data[key] = value
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class SettingsFile:
    """A settings file on disk."""

    def __init__(self, path: Path, library_key: str = LIBRARY_KEY):
        """Initialize the settings file.

        Args:
            path: Path to the settings file (need not exist yet)
            library_key: Name of the recognized library field
        """
        self._path = Path(path)
        self._library_key = library_key

    @property
    def path(self) -> Path:
        return self._path

    @property
    def library_key(self) -> str:
        return self._library_key

    def read(self) -> SettingsDocument:
        """Read the settings document.

        A missing file, or one holding only whitespace and comments, yields an
        empty document.

        Raises:
            SettingsError: If the file cannot be read or parsed
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("file '%s' was not found. Assuming empty...", self._path)
            return SettingsDocument(library_key=self._library_key)
        except (OSError, UnicodeDecodeError) as e:
            raise SettingsError(f"while reading '{self._path}': {e}", str(self._path)) from e

        try:
            doc = load_settings(text, self._library_key)
        except SettingsError as e:
            raise SettingsError(f"while parsing '{self._path}': {e}", str(self._path)) from e

        if doc.library is None:
            if not doc.extra and is_blank(text):
                logger.warning("file '%s' is empty. Assuming empty...", self._path)
            else:
                logger.warning("key '%s' not found. Assuming empty...", self._library_key)
        return doc

    def write(self, doc: SettingsDocument) -> None:
        """Write the settings document, creating parent directories.

        Raises:
            SettingsError: If the file cannot be written
        """
        logger.debug("Writing settings to %s", self._path)
        try:
            write_text_file(self._path, serialize(doc))
        except OSError as e:
            raise SettingsError(f"while writing '{self._path}': {e}", str(self._path)) from e

    def __repr__(self) -> str:
        return f"SettingsFile(path={self._path!r}, library_key={self._library_key!r})"
