"""Discovery of versioned migration scripts.

A script is a Python module named ``<revision>_<description>.py`` that
defines a ``revision`` string plus ``upgrade()`` and ``downgrade()``
functions written against ``alembic.op``. Registry scripts (shared
``public`` schema) and tenant scripts (one copy per tenant namespace) live
in two separate directories and are versioned independently.
"""

from __future__ import annotations

import importlib.util
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterator, Sequence

MIGRATIONS_DIR = Path(__file__).resolve().parent
REGISTRY_SCRIPTS_DIR = MIGRATIONS_DIR / "registry"
TENANT_SCRIPTS_DIR = MIGRATIONS_DIR / "tenant"


@dataclass(frozen=True)
class MigrationScript:
    """One versioned schema transformation.

    Attributes:
        revision: Sortable identifier (timestamp prefix)
        name: Unique name recorded in the tracking table
        upgrade: Forward transformation
        downgrade: Exact reverse of ``upgrade``
    """

    revision: str
    name: str
    upgrade: Callable[[], None]
    downgrade: Callable[[], None]


class MigrationScriptSet:
    """An ordered, immutable collection of migration scripts.

    Scripts are kept in ascending revision order regardless of the order
    they were supplied in.
    """

    def __init__(self, label: str, scripts: Sequence[MigrationScript]) -> None:
        ordered = sorted(scripts, key=lambda s: s.revision)
        revisions = [s.revision for s in ordered]
        if len(set(revisions)) != len(revisions):
            raise ValueError(f"Duplicate revision in migration set '{label}'")
        names = [s.name for s in ordered]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate script name in migration set '{label}'")

        self.label = label
        self._scripts = tuple(ordered)
        self._by_name = {s.name: s for s in ordered}

    @classmethod
    def from_directory(cls, label: str, directory: Path) -> MigrationScriptSet:
        """Load every ``<revision>_*.py`` module from a directory."""
        scripts = [
            _load_script(label, path)
            for path in sorted(directory.glob("[0-9]*.py"))
        ]
        return cls(label, scripts)

    def __iter__(self) -> Iterator[MigrationScript]:
        return iter(self._scripts)

    def __len__(self) -> int:
        return len(self._scripts)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def names(self) -> list[str]:
        return [s.name for s in self._scripts]

    def get(self, name: str) -> MigrationScript | None:
        return self._by_name.get(name)


def _load_script(label: str, path: Path) -> MigrationScript:
    module_name = f"_crm_migrations.{label}.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load migration script {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for attr in ("revision", "upgrade", "downgrade"):
        if not hasattr(module, attr):
            raise ImportError(f"Migration script {path.name} has no '{attr}'")

    return MigrationScript(
        revision=str(module.revision),
        name=path.stem,
        upgrade=module.upgrade,
        downgrade=module.downgrade,
    )


@lru_cache
def registry_scripts() -> MigrationScriptSet:
    """Scripts for the shared registry schema."""
    return MigrationScriptSet.from_directory("registry", REGISTRY_SCRIPTS_DIR)


@lru_cache
def tenant_scripts() -> MigrationScriptSet:
    """Scripts applied to every tenant namespace."""
    return MigrationScriptSet.from_directory("tenant", TENANT_SCRIPTS_DIR)
