"""Document store — the engine's only window onto the vault.

INVARIANT: Files are truth. The engine never caches the listing across
operations; every lookup goes back to the filesystem.

:class:`Store` is the protocol the services consume. :class:`FileStore`
implements it over a vault directory with vault-relative POSIX paths
(``Journal/2024-01-05.md``). Every lookup returns a tagged :class:`Entry`
so callers branch on ``entry.kind`` rather than on instance checks.

Metadata rewrites are atomic: the read-modify-write runs under a per-path
lock and the new file replaces the old one via ``os.replace``, so a failed
mutation leaves the document untouched. Change notifications are sent
after the lock is released, so a listener may safely write back to the
same document. Files are read and written without newline translation;
a rewrite keeps the body verbatim and the document's line ending.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Final, Protocol

from ruamel.yaml.error import YAMLError

from chronolinker.domain.content import (
    FrontmatterError,
    copy_frontmatter,
    detect_newline,
    parse_frontmatter,
    render_frontmatter,
)
from chronolinker.domain.links import DOCUMENT_SUFFIX
from chronolinker.domain.streams import normalize_folder
from chronolinker.domain.types import EntryKind

logger = logging.getLogger(__name__)

# Directories never treated as vault content.
_SKIP_DIRS = frozenset({".chronolinker", ".obsidian", ".git", ".trash"})


class _NoChange:
    """Sentinel returned by a metadata mutator that has nothing to write."""

    _instance: _NoChange | None = None

    def __new__(cls) -> _NoChange:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_CHANGE"


NO_CHANGE: Final = _NoChange()

Metadata = dict[str, Any]
Patch = Metadata | _NoChange
Mutator = Callable[[Metadata], Patch]
Notifier = Callable[[str, dict[str, Any]], None]


class StoreIOError(Exception):
    """An underlying read or write failed."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


@dataclass(frozen=True)
class Document:
    """Descriptor of a markdown document in the vault."""

    path: str

    @property
    def basename(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def folder(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent


@dataclass(frozen=True)
class Entry:
    """Tagged result of a store lookup: document, folder, or missing."""

    kind: EntryKind
    path: str

    @property
    def document(self) -> Document | None:
        return Document(self.path) if self.kind is EntryKind.DOCUMENT else None


class Store(Protocol):
    """Operations the engine issues against the document store."""

    def lookup(self, path: str) -> Entry: ...

    def exists(self, path: str) -> bool: ...

    def list_documents(self) -> list[Document]: ...

    def create_folder(self, path: str) -> None: ...

    def create_document(self, path: str, body: str) -> Document: ...

    def read_text(self, document: Document) -> str: ...

    def read_body(self, document: Document) -> str: ...

    def write_body(self, document: Document, body: str) -> None: ...

    def read_metadata(self, document: Document) -> Metadata: ...

    def mutate_metadata(self, document: Document, mutator: Mutator) -> bool: ...

    def rename(self, old_path: str, new_path: str) -> Document: ...


class FileStore:
    """Filesystem-backed :class:`Store` rooted at a vault directory."""

    def __init__(self, root: Path, *, notify: Notifier | None = None) -> None:
        self._root = root
        self._notify = notify
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def root(self) -> Path:
        return self._root

    def set_notifier(self, notify: Notifier | None) -> None:
        self._notify = notify

    # ------------------------------------------------------------------
    # Lookup / listing
    # ------------------------------------------------------------------

    def _resolve(self, path: str) -> Path:
        result = self._root / normalize_folder(path)
        if not result.resolve().is_relative_to(self._root.resolve()):
            msg = "path escapes vault root"
            raise StoreIOError(path, msg)
        return result

    def lookup(self, path: str) -> Entry:
        target = self._resolve(path)
        if target.is_file():
            return Entry(EntryKind.DOCUMENT, normalize_folder(path))
        if target.is_dir():
            return Entry(EntryKind.FOLDER, normalize_folder(path))
        return Entry(EntryKind.MISSING, normalize_folder(path))

    def exists(self, path: str) -> bool:
        return self.lookup(path).kind is not EntryKind.MISSING

    def list_documents(self) -> list[Document]:
        """All markdown documents in the vault, sorted by path."""
        results: list[Document] = []
        try:
            for path in self._root.rglob(f"*{DOCUMENT_SUFFIX}"):
                rel = path.relative_to(self._root)
                if any(part in _SKIP_DIRS for part in rel.parts):
                    continue
                if path.is_file():
                    results.append(Document(rel.as_posix()))
        except OSError as exc:
            raise StoreIOError(str(self._root), str(exc)) from exc
        return sorted(results, key=lambda d: d.path)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_folder(self, path: str) -> None:
        try:
            self._resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOError(path, str(exc)) from exc

    def create_document(self, path: str, body: str) -> Document:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("x", encoding="utf-8", newline="") as fh:
                fh.write(body)
        except FileExistsError as exc:
            msg = "document already exists"
            raise StoreIOError(path, msg) from exc
        except OSError as exc:
            raise StoreIOError(path, str(exc)) from exc
        document = Document(normalize_folder(path))
        logger.debug("Created %s", document.path)
        self._emit("post_create", {"path": document.path})
        return document

    # ------------------------------------------------------------------
    # Body / metadata
    # ------------------------------------------------------------------

    def _read_text(self, document: Document) -> str:
        try:
            with self._resolve(document.path).open(encoding="utf-8", newline="") as fh:
                return fh.read()
        except OSError as exc:
            raise StoreIOError(document.path, str(exc)) from exc

    def _replace_text(self, document: Document, content: str) -> None:
        target = self._resolve(document.path)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
                    fh.write(content)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreIOError(document.path, str(exc)) from exc

    def read_text(self, document: Document) -> str:
        """Raw file content, frontmatter included."""
        return self._read_text(document)

    def read_body(self, document: Document) -> str:
        return self._parse(document)[1]

    def write_body(self, document: Document, body: str) -> None:
        with self._lock_for(document.path):
            frontmatter, _, newline = self._parse(document)
            self._replace_text(document, render_frontmatter(frontmatter, body, newline))
        self._emit("post_modify", {"path": document.path})

    def _parse(self, document: Document) -> tuple[Metadata, str, str]:
        """``(frontmatter, body, newline)`` of *document*.

        Unparseable YAML and non-mapping blocks raise :class:`StoreIOError`,
        so callers never overwrite frontmatter they could not read.
        """
        content = self._read_text(document)
        try:
            frontmatter, body = parse_frontmatter(content)
        except YAMLError as exc:
            raise StoreIOError(document.path, f"invalid frontmatter: {exc}") from exc
        except FrontmatterError as exc:
            raise StoreIOError(document.path, str(exc)) from exc
        return frontmatter, body, detect_newline(content)

    def read_metadata(self, document: Document) -> Metadata:
        return self._parse(document)[0]

    def mutate_metadata(self, document: Document, mutator: Mutator) -> bool:
        """Atomically rewrite *document*'s frontmatter.

        *mutator* receives a private copy of the current frontmatter and
        returns the replacement mapping, or :data:`NO_CHANGE`. Returns True
        if the file was rewritten. Nothing is written when the mutator
        raises, signals no change, or returns an identical mapping.
        """
        with self._lock_for(document.path):
            frontmatter, body, newline = self._parse(document)
            updated = mutator(copy_frontmatter(frontmatter))
            if updated is NO_CHANGE or updated == frontmatter:
                return False
            self._replace_text(document, render_frontmatter(updated, body, newline))
        logger.debug("Rewrote frontmatter of %s", document.path)
        self._emit("post_modify", {"path": document.path})
        return True

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    def rename(self, old_path: str, new_path: str) -> Document:
        source = self._resolve(old_path)
        target = self._resolve(new_path)
        if target.exists():
            msg = "rename target already exists"
            raise StoreIOError(new_path, msg)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            source.rename(target)
        except OSError as exc:
            raise StoreIOError(old_path, str(exc)) from exc
        document = Document(normalize_folder(new_path))
        self._emit("post_rename", {"path": document.path, "old_path": normalize_folder(old_path)})
        return document

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _lock_for(self, path: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(path, threading.Lock())

    def _emit(self, hook_name: str, payload: dict[str, Any]) -> None:
        if self._notify is None:
            return
        self._notify(hook_name, payload)
