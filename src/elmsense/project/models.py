"""Project and dependency models.

``ProjectDefinition`` and ``Dependency`` are immutable once built by the
manifest loader. The raw payloads read from disk are validated with pydantic
(``ManifestPayload``, ``ModuleDocs``) before anything is derived from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from elmsense.config.constants import DEFAULT_PACKAGE_SOURCE_DIR


class ProjectKind(Enum):
    APPLICATION = "application"
    LIBRARY = "package"


# =============================================================================
# Documentation payload (documentation.json)
# =============================================================================


class ValueDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    type: str = ""


class BinopDoc(ValueDoc):
    associativity: str | None = None
    precedence: int | None = None


class AliasDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    args: list[str] = Field(default_factory=list)
    type: str = ""


class UnionDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    args: list[str] = Field(default_factory=list)
    cases: list[tuple[str, list[str]]] = Field(default_factory=list)


class ModuleDocs(BaseModel):
    """Documentation of one module of a package."""

    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    values: list[ValueDoc] = Field(default_factory=list)
    binops: list[BinopDoc] = Field(default_factory=list)
    aliases: list[AliasDoc] = Field(default_factory=list)
    unions: list[UnionDoc] = Field(default_factory=list)


PACKAGE_DOCS = TypeAdapter(list[ModuleDocs])


@dataclass(frozen=True, slots=True)
class DocEntry:
    """A single documented declaration."""

    name: str
    type: str
    comment: str


# =============================================================================
# Manifest payload (elm.json / elm-package.json)
# =============================================================================


class ManifestPayload(BaseModel):
    """The fields of a manifest this package relies on.

    Application manifests nest exact versions under ``dependencies.direct``.
    Package and legacy manifests use a flat map of version constraints, which
    is normalised into the same ``direct`` shape.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: str = "application"
    elm_version: str = Field(alias="elm-version")
    source_directories: list[str] | None = Field(default=None, alias="source-directories")
    direct_dependencies: dict[str, str] = Field(default_factory=dict, alias="dependencies")
    exposed_modules: list[str] = Field(default_factory=list, alias="exposed-modules")

    @field_validator("direct_dependencies", mode="before")
    @classmethod
    def flatten_dependencies(cls, v: Any) -> Any:
        if isinstance(v, dict) and isinstance(v.get("direct"), dict):
            return v["direct"]
        return v

    @field_validator("exposed_modules", mode="before")
    @classmethod
    def flatten_exposed(cls, v: Any) -> Any:
        # Packages may group exposed modules under headings.
        if isinstance(v, dict):
            return [name for names in v.values() for name in names]
        return v


# =============================================================================
# Loaded definitions
# =============================================================================


@dataclass(frozen=True, slots=True)
class Dependency:
    name: str
    version: str
    package_path: Path
    exposed_modules: tuple[str, ...]
    documentation: tuple[ModuleDocs, ...] = field(default=(), compare=False, hash=False)

    @property
    def source_dir(self) -> Path:
        return self.package_path / DEFAULT_PACKAGE_SOURCE_DIR

    def exposes(self, module_name: str) -> bool:
        return module_name in self.exposed_modules


@dataclass(frozen=True, slots=True)
class ProjectDefinition:
    """A project loaded from one manifest. Identity is the manifest path."""

    path: Path
    kind: ProjectKind
    version: str
    source_dirs: tuple[Path, ...]
    dependencies: tuple[Dependency, ...]
    payload: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    exposed_modules: tuple[str, ...] = ()

    def owns(self, contextual_path: str) -> bool:
        """True when any source directory is a prefix of ``contextual_path``."""
        return any(contextual_path.startswith(str(d)) for d in self.source_dirs)
