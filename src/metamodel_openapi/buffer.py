"""Incremental construction and writing of structured documents.

Objects and arrays are opened with context managers, so every scope is closed
and nesting always matches. The finished tree is serialized once, as JSON or
YAML, when the buffer is written.
"""

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import yaml

from metamodel_openapi.errors import ConfigurationError, OutputError
from metamodel_openapi.reporter import Reporter

FORMATS = ("json", "yaml")


class Buffer:
    """Builds one document and writes it to `<output>/<package>/openapi.<fmt>`."""

    def __init__(
        self,
        output: Path | str | None,
        package: str | None,
        fmt: str = "json",
        reporter: Reporter | None = None,
    ):
        if not output:
            raise ConfigurationError("output directory is mandatory")
        if not package:
            raise ConfigurationError("package is mandatory")
        if fmt not in FORMATS:
            raise ConfigurationError(f"unsupported output format '{fmt}'")
        self.path = Path(output) / package / f"openapi.{fmt}"
        self.fmt = fmt
        self.reporter = reporter
        self._root: dict[str, Any] | None = None
        self._stack: list[dict[str, Any] | list[Any]] = []

    @property
    def document(self) -> dict[str, Any] | None:
        return self._root

    @contextmanager
    def object(self, key: str | None = None) -> Iterator[dict[str, Any]]:
        """Open an object, as the document root, an array item or a field."""
        value: dict[str, Any] = {}
        self._open(key, value)
        try:
            yield value
        finally:
            self._stack.pop()

    @contextmanager
    def array(self, key: str | None = None) -> Iterator[list[Any]]:
        value: list[Any] = []
        self._open(key, value)
        try:
            yield value
        finally:
            self._stack.pop()

    def field(self, key: str, value: Any) -> None:
        parent = self._current()
        if not isinstance(parent, dict):
            raise OutputError(f"can't add field '{key}' to an array")
        parent[key] = value

    def item(self, value: Any) -> None:
        parent = self._current()
        if not isinstance(parent, list):
            raise OutputError("can't add an item to an object")
        parent.append(value)

    def render(self) -> str:
        if self._root is None or self._stack:
            raise OutputError(f"document for '{self.path}' isn't complete")
        if self.fmt == "yaml":
            return yaml.safe_dump(
                self._root,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        return json.dumps(self._root, indent=2, ensure_ascii=False) + "\n"

    def write(self) -> Path:
        """Serialize the document and write it, returning the file path.

        An `OSError` while writing is raised as `OutputError`, with the original
        message in the text and the original exception as its cause.
        """
        text = self.render()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"can't write '{self.path}': {e}") from e
        if self.reporter is not None:
            self.reporter.info("Generated %s", self.path)
        return self.path

    def _current(self) -> dict[str, Any] | list[Any]:
        if not self._stack:
            raise OutputError("no object or array is open")
        return self._stack[-1]

    def _open(self, key: str | None, value: dict[str, Any] | list[Any]) -> None:
        if not self._stack:
            if self._root is not None:
                raise OutputError("document already has a root")
            if key is not None or not isinstance(value, dict):
                raise OutputError("document root must be an unnamed object")
            self._root = value
        else:
            parent = self._stack[-1]
            if isinstance(parent, dict):
                if key is None:
                    raise OutputError("objects need a key for each member")
                parent[key] = value
            else:
                if key is not None:
                    raise OutputError(f"array items can't have a key, got '{key}'")
                parent.append(value)
        self._stack.append(value)
