"""Tests for the prune pipeline and atomic output."""

from pathlib import Path

import pytest

from prunedts.errors import ParseError
from prunedts.pipeline import (
    REASON_INTERNAL,
    REASON_UNREACHABLE,
    REASON_UNUSED_IMPORT,
    Settings,
    prune_file,
    prune_text,
)

FIXTURES = Path(__file__).parent / "fixtures"


class TestPruneText:
    """Tests for prune_text function."""

    def test_fixture_matches_expected_output(self):
        text = (FIXTURES / "database.d.ts").read_text(encoding="utf-8")
        expected = (FIXTURES / "database.public.d.ts").read_text(encoding="utf-8")
        assert prune_text(text).text == expected

    def test_summary_counts(self):
        text = (FIXTURES / "database.d.ts").read_text(encoding="utf-8")
        summary = prune_text(text).results.summary
        assert summary.statements_in == 14
        assert summary.statements_out == 10
        assert summary.roots == 6
        assert summary.dropped == 4
        assert summary.imports_narrowed == 1
        assert summary.imports_removed == 0
        assert summary.unresolved == 0
        assert summary.dropped_by_kind == {"const": 1, "function": 1, "import": 1, "type": 1}

    def test_dropped_reasons(self):
        text = (FIXTURES / "database.d.ts").read_text(encoding="utf-8")
        dropped = {d.label: d.reason for d in prune_text(text).results.dropped}
        assert dropped == {
            "import util": REASON_UNUSED_IMPORT,
            "function _repoManagerDatabaseFromApp": REASON_INTERNAL,
            "const _TEST_ACCESS": REASON_INTERNAL,
            "type EventType": REASON_UNREACHABLE,
        }

    def test_narrowed_import_reported(self):
        text = (FIXTURES / "database.d.ts").read_text(encoding="utf-8")
        narrowed = prune_text(text).results.narrowed_imports
        assert [(n.module, n.removed_names) for n in narrowed] == [("@firebase/app", ["FirebaseOptions"])]

    def test_output_is_stable(self):
        text = (FIXTURES / "database.d.ts").read_text(encoding="utf-8")
        once = prune_text(text).text
        assert prune_text(once).text == once

    def test_unresolved_recorded_and_processing_continues(self):
        output = prune_text("export declare function f(): Missing;\n")
        assert output.text == "export declare function f(): Missing;\n"
        assert [u.name for u in output.results.unresolved] == ["Missing"]

    def test_custom_internal_tag(self):
        text = "/** @hidden */\nexport declare const a: number;\nexport declare const b: number;\n"
        output = prune_text(text, Settings(internal_tag="@hidden"))
        assert output.text == "export declare const b: number;\n"

    def test_metadata(self):
        output = prune_text("export declare const a: number;\n", input_name="in.d.ts", output_name="out.d.ts")
        metadata = output.results.metadata
        assert metadata.input_path == "in.d.ts"
        assert metadata.output_path == "out.d.ts"
        assert metadata.duration_ms >= 0

    def test_license_survives_removed_first_statement(self):
        text = "/**\n * @license\n */\nimport { Y } from 'y';\nexport declare class A {\n}\n"
        assert prune_text(text).text == "/**\n * @license\n */\nexport declare class A {\n}\n"

    def test_parse_error_propagates(self):
        with pytest.raises(ParseError):
            prune_text("export declare class A {\n")


class TestSettings:
    """Tests for Settings.from_config."""

    def test_defaults(self):
        settings = Settings.from_config({})
        assert settings.internal_tag == "@internal"
        assert "Promise" in settings.known_globals
        assert settings.extractor_command == ("api-extractor",)
        assert settings.extractor_timeout == 300

    def test_from_config(self):
        settings = Settings.from_config(
            {
                "internal_tag": "@hidden",
                "known_globals": ["NodeJS"],
                "extractor": {"command": "npx api-extractor", "timeout": 60},
            }
        )
        assert settings.internal_tag == "@hidden"
        assert settings.extractor_command == ("npx", "api-extractor")
        assert settings.extractor_timeout == 60


class TestPruneFile:
    """Tests for prune_file function."""

    def test_writes_output(self, tmp_path: Path):
        input_path = tmp_path / "rollup.d.ts"
        input_path.write_text((FIXTURES / "database.d.ts").read_text(encoding="utf-8"), encoding="utf-8")
        output_path = tmp_path / "out" / "public.d.ts"

        results = prune_file(input_path, output_path, quiet=True)

        expected = (FIXTURES / "database.public.d.ts").read_text(encoding="utf-8")
        assert output_path.read_text(encoding="utf-8") == expected
        assert results.summary.statements_out == 10

    def test_no_temporary_files_left(self, tmp_path: Path):
        input_path = tmp_path / "rollup.d.ts"
        input_path.write_text("export declare const a: number;\n", encoding="utf-8")
        output_path = tmp_path / "public.d.ts"

        prune_file(input_path, output_path, quiet=True)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["public.d.ts", "rollup.d.ts"]

    def test_overwrites_existing_output(self, tmp_path: Path):
        input_path = tmp_path / "rollup.d.ts"
        input_path.write_text("export declare const a: number;\n", encoding="utf-8")
        output_path = tmp_path / "public.d.ts"
        output_path.write_text("stale", encoding="utf-8")

        prune_file(input_path, output_path, quiet=True)

        assert output_path.read_text(encoding="utf-8") == "export declare const a: number;\n"

    def test_nothing_written_on_parse_error(self, tmp_path: Path):
        input_path = tmp_path / "rollup.d.ts"
        input_path.write_text("export declare class A {\n", encoding="utf-8")
        output_path = tmp_path / "public.d.ts"

        with pytest.raises(ParseError):
            prune_file(input_path, output_path, quiet=True)

        assert not output_path.exists()

    def test_existing_output_kept_on_parse_error(self, tmp_path: Path):
        input_path = tmp_path / "rollup.d.ts"
        input_path.write_text("declare const s = 'unterminated;\n", encoding="utf-8")
        output_path = tmp_path / "public.d.ts"
        output_path.write_text("previous", encoding="utf-8")

        with pytest.raises(ParseError):
            prune_file(input_path, output_path, quiet=True)

        assert output_path.read_text(encoding="utf-8") == "previous"

    def test_missing_input_raises_os_error(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            prune_file(tmp_path / "missing.d.ts", tmp_path / "public.d.ts", quiet=True)

    def test_crlf_preserved(self, tmp_path: Path):
        input_path = tmp_path / "rollup.d.ts"
        input_path.write_bytes(b"import { A } from 'a';\r\nexport declare const x: A;\r\n")
        output_path = tmp_path / "public.d.ts"

        prune_file(input_path, output_path, quiet=True)

        assert output_path.read_bytes() == b"import { A } from 'a';\r\n\r\nexport declare const x: A;\r\n"
