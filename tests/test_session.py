"""End-to-end tests through the workspace session."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest
import structlog
from conftest import HTML_DOCS, HTML_SOURCE, Workspace

from elmsense.completion.models import CompletionKind
from elmsense.config.models import (
    ElmSenseConfig,
    LoggingConfig,
    LogOutputConfig,
    WorkspaceConfig,
)
from elmsense.core.logging import get_request_id
from elmsense.modules.models import ModuleDescriptor
from elmsense.modules.parser import parse_module
from elmsense.session import ElmSession

MAIN_SOURCE = """\
module Main exposing (main, view)

import Html exposing (..)


view = text "hello"


main = """


def write_main(workspace: Workspace, typed: str) -> tuple[Path, str]:
    text = MAIN_SOURCE + typed
    path = workspace.write_module(workspace.projects / "app", "Main", text)
    return path, text


class TestProvideCompletions:
    @pytest.mark.asyncio
    async def test_bare_value_from_current_module(
        self, html_workspace: Workspace, make_session: Any
    ) -> None:
        # Given Main declares view and imports Html
        path, text = write_main(html_workspace, "vi")
        session = make_session()

        # When completing "vi" at the end of the body
        candidates = await session.provide_completions(path, len(text))

        # Then view from Main is offered as a value
        assert any(
            c.label == "view" and c.kind is CompletionKind.VALUE and c.module == "Main"
            for c in candidates
        )

    @pytest.mark.asyncio
    async def test_partial_module_name_offers_module_only(
        self, html_workspace: Workspace, make_session: Any
    ) -> None:
        path, text = write_main(html_workspace, "Htm")
        session = make_session()

        candidates = await session.provide_completions(path, len(text))

        assert [(c.label, c.kind) for c in candidates] == [("Html", CompletionKind.MODULE)]
        assert "text" not in [c.label for c in candidates]

    @pytest.mark.asyncio
    async def test_host_text_overrides_disk(
        self, html_workspace: Workspace, make_session: Any
    ) -> None:
        path, _ = write_main(html_workspace, "vi")
        session = make_session()
        unsaved = MAIN_SOURCE.replace("view", "viewer") + "vi"

        candidates = await session.provide_completions(path, len(unsaved), unsaved)

        assert "viewer" in [c.label for c in candidates]

    @pytest.mark.asyncio
    async def test_document_outside_any_project(
        self, html_workspace: Workspace, make_session: Any, tmp_path: Path
    ) -> None:
        # Local declarations still complete; imports cannot resolve.
        stray = tmp_path / "Stray.elm"
        stray.write_text(MAIN_SOURCE + "vi")
        session = make_session()

        candidates = await session.provide_completions(stray, len(stray.read_text()))

        assert [c.label for c in candidates] == ["view", "main"]

    @pytest.mark.asyncio
    async def test_dependency_without_docs_still_completes(
        self, workspace: Workspace, make_session: Any
    ) -> None:
        # Given a second dependency whose documentation is missing
        workspace.add_package("elm/html", "1.0.0", HTML_DOCS, {"Html": HTML_SOURCE})
        workspace.add_package("elm/broken", "1.0.0", None)
        workspace.add_project("app", {"elm/html": "1.0.0", "elm/broken": "1.0.0"})
        path, text = write_main(workspace, "Htm")

        # When completing with the default policy
        candidates = await make_session().provide_completions(path, len(text))

        # Then the project survives and Html still resolves
        assert [c.label for c in candidates] == ["Html"]

    @pytest.mark.asyncio
    async def test_strict_documentation_drops_project(
        self, workspace: Workspace, make_session: Any
    ) -> None:
        workspace.add_package("elm/html", "1.0.0", HTML_DOCS, {"Html": HTML_SOURCE})
        workspace.add_package("elm/broken", "1.0.0", None)
        workspace.add_project("app", {"elm/html": "1.0.0", "elm/broken": "1.0.0"})
        path, text = write_main(workspace, "Htm")

        session = make_session(strict_documentation=True)
        candidates = await session.provide_completions(path, len(text))

        assert candidates == []


class TestResolveCompletionItem:
    @pytest.mark.asyncio
    async def test_resolves_imported_value(
        self, html_workspace: Workspace, make_session: Any
    ) -> None:
        path, text = write_main(html_workspace, "Html.")
        session = make_session()
        candidates = await session.provide_completions(path, len(text))
        text_item = next(c for c in candidates if c.label == "text")

        resolved = await session.resolve_completion_item(text_item)

        assert resolved is text_item
        assert resolved.detail == "text : String -> Html msg"
        assert resolved.documentation == " Just put plain text in the DOM."

    @pytest.mark.asyncio
    async def test_undocumented_gives_empty_strings(
        self, html_workspace: Workspace, make_session: Any
    ) -> None:
        path, text = write_main(html_workspace, "vi")
        session = make_session()
        candidates = await session.provide_completions(path, len(text))
        view_item = next(c for c in candidates if c.label == "view")

        resolved = await session.resolve_completion_item(view_item)

        assert resolved.detail == ""
        assert resolved.documentation == ""


class TestRequestCorrelation:
    @pytest.mark.asyncio
    async def test_request_id_set_during_call_and_cleared(
        self, html_workspace: Workspace
    ) -> None:
        seen: list[str | None] = []

        def recording_parser(text: str) -> ModuleDescriptor:
            seen.append(get_request_id())
            return parse_module(text)

        path, text = write_main(html_workspace, "vi")
        config = ElmSenseConfig(workspace=WorkspaceConfig(roots=[str(html_workspace.projects)]))
        session = ElmSession(config, parser=recording_parser, env=html_workspace.env())

        await session.provide_completions(path, len(text))

        assert seen and seen[0] is not None
        assert get_request_id() is None


class TestSessionLifecycle:
    def test_default_root_is_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        session = ElmSession(env={})

        assert session.config.workspace.roots == [str(tmp_path)]

    @pytest.mark.asyncio
    async def test_invalidate_drops_cached_module(
        self, html_workspace: Workspace, make_session: Any
    ) -> None:
        path, text = write_main(html_workspace, "vi")
        session = make_session()
        await session.provide_completions(path, len(text))
        assert str(path) in session.cache

        session.invalidate(path)

        assert str(path) not in session.cache

    def test_caller_config_left_untouched(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        config = ElmSenseConfig()

        session = ElmSession(config, env={})

        assert config.workspace.roots == []
        assert session.config is not config


class TestSessionLogging:
    def teardown_method(self) -> None:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()

    @pytest.mark.asyncio
    async def test_configured_output_receives_engine_events(
        self, html_workspace: Workspace, tmp_path: Path
    ) -> None:
        # Given a session whose config sends DEBUG JSON to a file
        log_file = tmp_path / "logs" / "elmsense.jsonl"
        config = ElmSenseConfig(
            workspace=WorkspaceConfig(roots=[str(html_workspace.projects)]),
            logging=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            ),
        )
        session = ElmSession(config, env=html_workspace.env())
        path, text = write_main(html_workspace, "vi")

        # When completing
        await session.provide_completions(path, len(text))
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then the engine's event lands in the file with the request id
        events = [json.loads(line) for line in log_file.read_text().splitlines()]
        provided = [e for e in events if e["event"] == "completions_provided"]
        assert provided
        assert provided[0]["logger"] == "completion.engine"
        assert "request_id" in provided[0]
