"""Integration tests for the specref command line."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import httpx
import pytest
import respx
import structlog

from specref import __version__
from specref.cli import create_parser, main

if TYPE_CHECKING:
    from pathlib import Path

SPEC_URL = "https://example.github.io/test-spec/"


@pytest.fixture(autouse=True)
def _fast_quiet_run(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Skip the settle delay and keep log output out of captured stdout."""
    monkeypatch.setenv("SPECREF__TRIGGER__SETTLE_DELAY_MS", "0")

    def _configure(_settings: object) -> None:
        structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL))

    monkeypatch.setattr("specref.cli.configure_logging", _configure)
    yield
    structlog.reset_defaults()


class TestParser:
    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args([])


class TestValidateCommand:
    @respx.mock
    def test_annotates_page_in_place(
        self,
        page_path: Path,
        live_spec: Callable[[str | None], str],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        respx.get(SPEC_URL).mock(return_value=httpx.Response(200, text=live_spec(None)))

        assert main(["validate", str(page_path)]) == 0

        html = page_path.read_text(encoding="utf-8")
        assert html.count('class="external-ref-validation-indicator external-ref-missing') == 2
        out = capsys.readouterr().out
        assert "2 missing" in out
        assert "missing  xref TestSpec:test-term" in out

    @respx.mock
    def test_output_option_leaves_source_untouched(
        self,
        page_path: Path,
        tmp_path: Path,
        live_spec: Callable[[str | None], str],
    ) -> None:
        respx.get(SPEC_URL).mock(
            return_value=httpx.Response(200, text=live_spec("<p>This is a test definition.</p>"))
        )
        original = page_path.read_text(encoding="utf-8")
        output = tmp_path / "out" / "index.html"

        assert main(["validate", str(page_path), "--output", str(output), "--show-valid"]) == 0

        assert page_path.read_text(encoding="utf-8") == original
        assert output.read_text(encoding="utf-8").count('external-ref-valid"') == 2

    @respx.mock
    def test_json_report(
        self,
        page_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        respx.get(SPEC_URL).mock(return_value=httpx.Response(500))

        assert main(["validate", str(page_path), "--json"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["specs_validated"] == 1
        assert [r["outcome"]["kind"] for r in report["results"]] == ["error", "error"]

    @respx.mock
    def test_rerun_replaces_previous_indicators(
        self, page_path: Path, live_spec: Callable[[str | None], str]
    ) -> None:
        route = respx.get(SPEC_URL).mock(return_value=httpx.Response(404))
        assert main(["validate", str(page_path)]) == 0
        assert page_path.read_text(encoding="utf-8").count("external-ref-error") == 2

        route.mock(return_value=httpx.Response(200, text=live_spec(None)))
        assert main(["validate", str(page_path)]) == 0

        html = page_path.read_text(encoding="utf-8")
        assert "external-ref-error" not in html
        assert html.count("external-ref-missing") == 2

    def test_json_error_envelope(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["validate", str(tmp_path / "missing.html"), "--json"]) == 1

        error = json.loads(capsys.readouterr().out)["error"]
        assert error["code"] == "FILE_READ_FAILED"
        assert error["recoverable"] is False

    def test_missing_page_exits_non_zero(self, tmp_path: Path) -> None:
        assert main(["validate", str(tmp_path / "missing.html")]) == 1

    def test_missing_xtrefs_file_exits_non_zero(self, page_path: Path, tmp_path: Path) -> None:
        assert main(["validate", str(page_path), "--xtrefs", str(tmp_path / "nope.json")]) == 1


class TestPrepareTrefCommand:
    def test_rewrites_tref_files(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        xtrefs = tmp_path / "xtrefs-data.json"
        xtrefs.write_text(
            json.dumps(
                {
                    "xtrefs": [
                        {
                            "externalSpec": "TestSpec",
                            "term": "test-term",
                            "commitHash": "abc",
                            "content": "\n\n~ Definition.",
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )
        spec_dir = tmp_path / "spec"
        spec_dir.mkdir()
        term_file = spec_dir / "test-term.md"
        term_file.write_text("[[tref: TestSpec, test-term]]\n", encoding="utf-8")

        assert main(["prepare-tref", str(spec_dir), "--xtrefs", str(xtrefs)]) == 0

        assert term_file.read_text(encoding="utf-8").endswith("~ Commit Hash: abc\n\n~ Definition.")
        assert "1 tref file(s) updated" in capsys.readouterr().out

    def test_missing_index_exits_non_zero(self, tmp_path: Path) -> None:
        assert main(["prepare-tref", str(tmp_path), "--xtrefs", str(tmp_path / "x.json")]) == 1
