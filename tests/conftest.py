"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides the workspace builders shared by every test package.
"""

import json
import sys
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local elmsense package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of elmsense modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("elmsense"):
        del sys.modules[module_name]


ELM_VERSION = "0.19.1"

HTML_DOCS: list[dict[str, Any]] = [
    {
        "name": "Html",
        "comment": "HTML elements.",
        "unions": [],
        "aliases": [],
        "values": [
            {
                "name": "text",
                "comment": " Just put plain text in the DOM.",
                "type": "String -> Html msg",
            },
            {
                "name": "div",
                "comment": " A div.",
                "type": "List (Attribute msg) -> List (Html msg) -> Html msg",
            },
        ],
        "binops": [],
    },
    {
        "name": "Html.Attributes",
        "comment": "Attributes.",
        "unions": [],
        "aliases": [],
        "values": [{"name": "class", "comment": " A class.", "type": "String -> Attribute msg"}],
        "binops": [],
    },
]

HTML_SOURCE = """\
module Html exposing (Html, Attribute, text, div, Shape(..))


type Html msg = Node


type Attribute msg = Attr


type Shape = Circle | Square


text : String -> Html msg
text s = Node


div : List (Attribute msg) -> List (Html msg) -> Html msg
div attrs children = Node


internal = 1
"""

HTML_ATTRIBUTES_SOURCE = """\
module Html.Attributes exposing (class)

import Html exposing (Attribute)


class : String -> Attribute msg
class name = Html.Attr
"""


class Workspace:
    """A temporary workspace with an Elm home holding installed packages."""

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()
        self.elm_home = self.root / "elm-home"
        self.projects = self.root / "projects"
        self.projects.mkdir(parents=True)

    def package_dir(self, name: str, version: str, elm_version: str = ELM_VERSION) -> Path:
        subdir = "package" if elm_version in ("0.18.0", "0.19.0") else "packages"
        return self.elm_home / elm_version / subdir / name / version

    def add_package(
        self,
        name: str,
        version: str,
        docs: list[dict[str, Any]] | None,
        sources: dict[str, str] | None = None,
        elm_version: str = ELM_VERSION,
    ) -> Path:
        """Install a package; ``docs=None`` leaves documentation.json out."""
        package = self.package_dir(name, version, elm_version)
        package.mkdir(parents=True, exist_ok=True)
        if docs is not None:
            (package / "documentation.json").write_text(json.dumps(docs))
        for module_name, source in (sources or {}).items():
            path = package / "src" / (module_name.replace(".", "/") + ".elm")
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source)
        return package

    def add_project(
        self,
        name: str,
        dependencies: dict[str, str] | None = None,
        source_dirs: list[str] | None = None,
        elm_version: str = ELM_VERSION,
    ) -> Path:
        project = self.projects / name
        project.mkdir(parents=True, exist_ok=True)
        manifest = {
            "type": "application",
            "source-directories": source_dirs or ["src"],
            "elm-version": elm_version,
            "dependencies": {"direct": dependencies or {}, "indirect": {}},
            "test-dependencies": {"direct": {}, "indirect": {}},
        }
        (project / "elm.json").write_text(json.dumps(manifest))
        return project

    def write_module(self, project: Path, module_name: str, source: str, src: str = "src") -> Path:
        path = project / src / (module_name.replace(".", "/") + ".elm")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        return path

    def env(self) -> dict[str, str]:
        return {"ELM_HOME": str(self.elm_home), "HOME": str(self.root / "home")}


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    return Workspace(tmp_path)


@pytest.fixture
def html_workspace(workspace: Workspace) -> Workspace:
    """Workspace with elm/html installed and one application depending on it."""
    workspace.add_package(
        "elm/html",
        "1.0.0",
        HTML_DOCS,
        {"Html": HTML_SOURCE, "Html.Attributes": HTML_ATTRIBUTES_SOURCE},
    )
    workspace.add_project("app", {"elm/html": "1.0.0"})
    return workspace


@pytest.fixture
def make_session(workspace: Workspace) -> Any:
    """Factory for sessions over ``workspace``; kwargs configure ``packages``."""
    from elmsense.config.models import ElmSenseConfig, PackagesConfig, WorkspaceConfig
    from elmsense.session import ElmSession

    def _make(**packages: Any) -> ElmSession:
        config = ElmSenseConfig(
            workspace=WorkspaceConfig(roots=[str(workspace.projects)]),
            packages=PackagesConfig(**packages),
        )
        return ElmSession(config, env=workspace.env())

    return _make
