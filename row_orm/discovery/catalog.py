"""Type discovery under a package namespace.

Module names are enumerated from every entry of a search path (``sys.path``
by default), in any of three layouts:

    build/                      plain directory tree
        myapp/models/user.py    -> "myapp.models.user"
    models.zip                  archive with modules at its root
        myapp/models/user.py
    deploy.zip                  deployment archive
        classes/myapp/models/user.py
        lib/extra.zip           nested archive, enumerated in memory
            myapp/models/job.py

Each module is then loaded from the entry it was found in and its classes
are filtered by a predicate. Modules that fail to import are skipped.
"""

from __future__ import annotations

import atexit
import hashlib
import importlib
import importlib.machinery
import importlib.util
import inspect
import io
import logging
import os
import shutil
import sys
import tempfile
import zipfile
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath
from types import ModuleType

logger = logging.getLogger(__name__)

MODULE_SUFFIXES = (".py", ".pyc")
ARCHIVE_SUFFIXES = (".zip", ".whl", ".egg")
DEPLOY_CLASSES = "classes/"
DEPLOY_LIB = "lib/"


@dataclass(frozen=True)
class _Origin:
    """Import root a module was found under.

    For a module inside a nested ``lib/`` archive, *root* is the outer
    archive and *nested* the entry to extract before importing.
    """

    root: str
    nested: str | None = None


class TypeCatalog:
    """Enumerates classes defined under *namespace*.

    Args:
        namespace: Dotted package (or module) name, e.g. ``"myapp.models"``.
        predicate: Optional filter over candidate classes.
        search_path: Directories and archives to scan. Defaults to ``sys.path``.
    """

    def __init__(
        self,
        namespace: str,
        predicate: Callable[[type], bool] | None = None,
        search_path: Iterable[str | Path] | None = None,
    ) -> None:
        self._namespace = namespace.strip(".")
        self._package_path = self._namespace.replace(".", "/")
        self._predicate = predicate
        self._search_path = list(search_path) if search_path is not None else None

    @property
    def namespace(self) -> str:
        return self._namespace

    def scan(self) -> list[type]:
        """Return matching classes, without duplicates, sorted by qualified name."""
        origins = self._locate()
        roots = {origin: _import_root(origin) for origin in dict.fromkeys(origins.values())}

        found: dict[str, type] = {}
        with _on_sys_path(list(dict.fromkeys(roots.values()))):
            importlib.invalidate_caches()
            for module_name in sorted(origins):
                for cls in self._resolve(module_name, roots[origins[module_name]]):
                    key = f"{cls.__module__}.{cls.__qualname__}"
                    if key in found:
                        continue
                    if self._predicate is None or self._predicate(cls):
                        found[key] = cls
        return [found[key] for key in sorted(found)]

    def module_names(self) -> set[str]:
        """Enumerate module names under the namespace from every search path entry."""
        return set(self._locate())

    # -- enumeration ---------------------------------------------------------

    def _locate(self) -> dict[str, _Origin]:
        """Map each module name to the first entry it was found under."""
        search_path = self._search_path if self._search_path is not None else sys.path
        located: dict[str, _Origin] = {}
        for entry in search_path:
            path = Path(entry) if entry else Path.cwd()
            if path.is_dir():
                origin = _Origin(str(path))
                found = ((name, origin) for name in self._find_in_directory(path))
            elif path.is_file() and zipfile.is_zipfile(path):
                found = self._find_in_zip(path)
            else:
                continue
            for name, origin in found:
                located.setdefault(name, origin)
        return located

    def _find_in_directory(self, root: Path) -> Iterator[str]:
        module_file = root / f"{self._package_path}.py"
        if module_file.is_file():
            yield self._namespace
        package_dir = root / self._package_path
        if not package_dir.is_dir():
            return
        for file in package_dir.rglob("*"):
            if file.is_file():
                name = self._module_name(file.relative_to(root).as_posix())
                if name is not None:
                    yield name

    def _find_in_zip(self, path: Path) -> list[tuple[str, _Origin]]:
        with zipfile.ZipFile(path) as archive:
            if not _is_deployment(archive):
                origin = _Origin(str(path))
                return [(name, origin) for name in self._find_in_archive(archive)]

            classes = _Origin(os.path.join(str(path), DEPLOY_CLASSES.rstrip("/")))
            found = [(name, classes) for name in self._find_in_archive(archive, DEPLOY_CLASSES)]
            for entry in archive.namelist():
                if entry.startswith(DEPLOY_LIB) and entry.endswith(ARCHIVE_SUFFIXES):
                    nested = _Origin(str(path), entry)
                    try:
                        with zipfile.ZipFile(io.BytesIO(archive.read(entry))) as inner:
                            found.extend((name, nested) for name in self._find_in_archive(inner))
                    except zipfile.BadZipFile as e:
                        logger.warning("Skipping unreadable nested archive %s: %s", entry, e)
            return found

    def _find_in_archive(self, archive: zipfile.ZipFile, prefix: str = "") -> Iterator[str]:
        for entry in archive.namelist():
            if entry.startswith(prefix):
                name = self._module_name(entry[len(prefix) :])
                if name is not None:
                    yield name

    def _module_name(self, relative: str) -> str | None:
        """Turn ``pkg/sub/mod.py`` into ``pkg.sub.mod`` if it lies under the namespace."""
        path = PurePosixPath(relative)
        if path.suffix not in MODULE_SUFFIXES or "__pycache__" in path.parts:
            return None
        parts = list(path.with_suffix("").parts)
        if parts and parts[-1] == "__init__":
            parts.pop()
        name = ".".join(parts)
        if name == self._namespace or name.startswith(self._namespace + "."):
            return name
        return None

    # -- resolution ----------------------------------------------------------

    def _resolve(self, module_name: str, root: str) -> list[type]:
        """Load *module_name* from *root* and return the classes it defines."""
        try:
            module = _load_module(module_name, root)
        except Exception as e:  # noqa: BLE001 - unloadable modules are skipped
            logger.debug("Skipping module %s: %s", module_name, e)
            return []
        return [
            cls
            for _, cls in inspect.getmembers(module, inspect.isclass)
            if cls.__module__ == module.__name__
        ]


def _is_deployment(archive: zipfile.ZipFile) -> bool:
    return any(
        entry.startswith(DEPLOY_CLASSES)
        or (entry.startswith(DEPLOY_LIB) and entry.endswith(ARCHIVE_SUFFIXES))
        for entry in archive.namelist()
    )


def _load_module(module_name: str, root: str) -> ModuleType:
    """Import *module_name* from the directory or archive *root*.

    Parent packages are imported normally; the module itself is looked up
    only under *root*, so a package may be split across several entries.
    """
    module = sys.modules.get(module_name)
    if module is not None:
        return module

    parent_name, _, leaf = module_name.rpartition(".")
    parent = importlib.import_module(parent_name) if parent_name else None
    location = os.path.join(root, *module_name.split(".")[:-1])
    spec = importlib.machinery.PathFinder.find_spec(module_name, [location])
    if spec is None or spec.loader is None:
        raise ModuleNotFoundError(f"No module named {module_name!r} under {root}", name=module_name)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    if parent is not None:
        setattr(parent, leaf, module)
    return module


@lru_cache(maxsize=1)
def _extraction_dir() -> Path:
    path = Path(tempfile.mkdtemp(prefix="row_orm-lib-"))
    atexit.register(shutil.rmtree, path, ignore_errors=True)
    return path


def _import_root(origin: _Origin) -> str:
    """Return an importable path for *origin*, extracting nested archives."""
    if origin.nested is None:
        return origin.root
    digest = hashlib.sha1(f"{origin.root}!{origin.nested}".encode()).hexdigest()[:12]
    target = _extraction_dir() / f"{digest}-{PurePosixPath(origin.nested).name}"
    if not target.exists():
        with zipfile.ZipFile(origin.root) as archive:
            target.write_bytes(archive.read(origin.nested))
        logger.debug("Extracted %s from %s to %s", origin.nested, origin.root, target)
    return str(target)


@contextmanager
def _on_sys_path(roots: list[str]) -> Iterator[None]:
    """Put *roots* at the front of ``sys.path`` for the duration of a scan."""
    added = [root for root in roots if root not in sys.path]
    sys.path[:0] = added
    try:
        yield
    finally:
        for root in added:
            if root in sys.path:
                sys.path.remove(root)
