"""
Compress and eliminate workflows against a temporary project and a fake engine.
"""
import pytest

from slim.adapters.stylelint import FileReport
from slim.config import SlimConfig
from slim.suppressions import SuppressionStyle
from slim.violations import hidden_path
from slim.workflows import compact_manifest, eliminate_manifest

from conftest import FakeEngine, error, warning


@pytest.fixture
def cfg():
    return SlimConfig()


# ===================================================================
# compact_manifest
# ===================================================================
class TestCompactManifest:

    def test_unchanged_when_every_entry_still_errors(self, project, write_file, cfg):
        content = "src/button.css\nsrc/nested/\n"
        manifest = write_file(".stylelintignore", content)
        engine = FakeEngine(
            {"button.css": [error(2, "color-no-invalid-hex")], "card.css": [error(2, "declaration-empty-line-before")]},
            manifest=manifest,
        )

        outcome = compact_manifest(cfg, engine, project)

        assert outcome.status == "ok"
        assert manifest.read_text(encoding="utf-8") == content
        assert outcome.entries_kept == 2
        assert outcome.errors_before == 2
        assert outcome.errors_after == 2

    def test_drops_clean_and_disabled_entries(self, project, write_file, cfg):
        write_file("clean/ok.css", ".ok { color: red; }\n")
        manifest = write_file(".stylelintignore", """\
            # generated
            src/
            legacy/
            clean/
            gone/
        """)
        engine = FakeEngine({"button.css": [error(2, "color-no-invalid-hex")]}, manifest=manifest)

        outcome = compact_manifest(cfg, engine, project)

        assert outcome.status == "ok"
        assert manifest.read_text(encoding="utf-8") == "# generated\nsrc/\n"
        assert outcome.entries_kept == 1
        assert outcome.stats_before["length"] == 6
        assert outcome.stats_after == {"size": len("# generated\nsrc/\n"), "length": 3}

    def test_comments_and_blank_lines_survive_round_trip(self, project, write_file, cfg):
        content = "# legacy styles\nsrc/button.css\n\n   # cards\nsrc/nested/\n"
        manifest = write_file(".stylelintignore", content)
        engine = FakeEngine(
            {"button.css": [error(2, "color-no-invalid-hex")], "card.css": [error(2, "declaration-empty-line-before")]},
            manifest=manifest,
        )

        outcome = compact_manifest(cfg, engine, project)

        assert outcome.status == "ok"
        assert manifest.read_text(encoding="utf-8") == content

    def test_dropped_pattern_leaves_surrounding_comments(self, project, write_file, cfg):
        manifest = write_file(".stylelintignore", "# buttons\nsrc/button.css\n\n# cards\nsrc/nested/\n")
        engine = FakeEngine({"button.css": [error(2, "color-no-invalid-hex")]}, manifest=manifest)

        compact_manifest(cfg, engine, project)

        assert manifest.read_text(encoding="utf-8") == "# buttons\nsrc/button.css\n\n# cards\n"

    def test_file_matched_by_two_patterns_counted_once(self, project, write_file, cfg):
        manifest = write_file(".stylelintignore", "src/\nsrc/button.css\n")
        engine = FakeEngine({"button.css": [error(2, "color-no-invalid-hex")]}, manifest=manifest)

        outcome = compact_manifest(cfg, engine, project)

        assert outcome.errors_before == 1
        assert outcome.errors_after == 1
        assert manifest.read_text(encoding="utf-8") == "src/\nsrc/button.css\n"

    def test_only_warnings_means_entry_dropped(self, project, write_file, cfg):
        manifest = write_file(".stylelintignore", "src/button.css\n")
        engine = FakeEngine({"button.css": [warning(2, "color-named")]}, manifest=manifest)

        outcome = compact_manifest(cfg, engine, project)

        assert manifest.read_text(encoding="utf-8") == ""
        assert outcome.errors_before == 0

    def test_engine_never_sees_manifest(self, project, write_file, cfg):
        manifest = write_file(".stylelintignore", "src/button.css\nsrc/nested/card.css\n")
        engine = FakeEngine({"button.css": [error(2, "x")]}, manifest=manifest)

        compact_manifest(cfg, engine, project)

        assert engine.manifest_visible
        assert not any(engine.manifest_visible)
        assert len(engine.calls) == 3

    def test_missing_manifest_aborts(self, project, cfg):
        outcome = compact_manifest(cfg, FakeEngine(), project)

        assert outcome.status == "aborted"
        assert outcome.exit_code == 2
        assert ".stylelintignore" in outcome.failures[0]
        assert not (project / ".stylelintignore").exists()

    def test_malformed_lint_config_aborts(self, project, write_file, cfg):
        write_file(".stylelintrc.json", "{not json")
        manifest = write_file(".stylelintignore", "src/\n")

        outcome = compact_manifest(cfg, FakeEngine(manifest=manifest), project)

        assert outcome.status == "aborted"
        assert manifest.read_text(encoding="utf-8") == "src/\n"


# ===================================================================
# eliminate_manifest
# ===================================================================
MAIN_CSS = """\
    .a {
      color: red;
    }
    .b {
      color: #fffz;
    }
"""


class TestEliminateManifest:

    def test_end_to_end_block_comments(self, project, write_file, cfg):
        target = write_file("src/main.css", MAIN_CSS)
        manifest = write_file(".stylelintignore", "src/*.css\n")
        engine = FakeEngine(
            {"main.css": [error(5, "color-no-invalid-hex")], "button.css": []},
            manifest=manifest,
        )

        outcome = eliminate_manifest(cfg, engine, project)

        assert outcome.status == "ok"
        assert manifest.read_text(encoding="utf-8") == ""
        assert target.read_text(encoding="utf-8") == (
            ".a {\n"
            "  color: red;\n"
            "}\n"
            ".b {\n"
            "/* stylelint-disable color-no-invalid-hex */\n"
            "  color: #fffz;\n"
            "/* stylelint-enable color-no-invalid-hex */\n"
            "}\n"
        )
        assert outcome.files_processed == 1
        assert outcome.errors_before == 1
        assert outcome.errors_after == 0

    def test_next_line_style(self, project, write_file, cfg):
        target = write_file("src/main.css", MAIN_CSS)
        manifest = write_file(".stylelintignore", "src/main.css\n")
        engine = FakeEngine(
            {"main.css": [error(2, "color-named"), error(5, "color-no-invalid-hex"), error(5, "color-hex-length")]},
            manifest=manifest,
        )

        outcome = eliminate_manifest(cfg, engine, project, style=SuppressionStyle.NEXT_LINE)

        assert outcome.status == "ok"
        assert target.read_text(encoding="utf-8").split("\n") == [
            ".a {",
            "/* stylelint-disable-next-line color-named */",
            "  color: red;",
            "}",
            ".b {",
            "/* stylelint-disable-next-line color-no-invalid-hex,color-hex-length */",
            "  color: #fffz;",
            "}",
            "",
        ]
        assert manifest.read_text(encoding="utf-8") == ""

    def test_style_from_config(self, project, write_file):
        target = write_file("src/main.css", MAIN_CSS)
        manifest = write_file(".stylelintignore", "src/main.css\n")
        cfg = SlimConfig.model_validate({"suppression": {"style": "next-line"}})

        eliminate_manifest(cfg, FakeEngine({"main.css": [error(5, "x")]}, manifest=manifest), project)

        assert "/* stylelint-disable-next-line x */" in target.read_text(encoding="utf-8")

    def test_disabled_and_clean_files_untouched(self, project, write_file, cfg):
        legacy_before = (project / "legacy/old.css").read_text(encoding="utf-8")
        card_before = (project / "src/nested/card.css").read_text(encoding="utf-8")
        manifest = write_file(".stylelintignore", "legacy/\nsrc/nested/\n")
        engine = FakeEngine({"old.css": [error(2, "x")], "card.css": [warning(2, "y")]}, manifest=manifest)

        outcome = eliminate_manifest(cfg, engine, project)

        assert outcome.status == "ok"
        assert engine.calls[0] == [str((project / "src/nested/card.css").resolve())]
        assert (project / "legacy/old.css").read_text(encoding="utf-8") == legacy_before
        assert (project / "src/nested/card.css").read_text(encoding="utf-8") == card_before
        assert manifest.read_text(encoding="utf-8") == ""

    def test_write_failure_is_partial_and_keeps_manifest(self, project, write_file, cfg):
        target = write_file("src/main.css", MAIN_CSS)
        manifest = write_file(".stylelintignore", "src/main.css\n")
        ghost = project / "src/ghost.css"

        class PhantomEngine(FakeEngine):
            def lint(self, config, files):
                reports = super().lint(config, files)
                return reports + [FileReport(source=str(ghost), errored=True, warnings=[error(1, "x")])]

        engine = PhantomEngine({"main.css": [error(5, "color-no-invalid-hex")]}, manifest=manifest)

        outcome = eliminate_manifest(cfg, engine, project)

        assert outcome.status == "partial"
        assert outcome.exit_code == 1
        assert "ghost.css" in outcome.failures[0]
        assert "stylelint-disable color-no-invalid-hex" in target.read_text(encoding="utf-8")
        assert manifest.read_text(encoding="utf-8") == "src/main.css\n"

    def test_missing_manifest_aborts(self, project, cfg):
        outcome = eliminate_manifest(cfg, FakeEngine(), project)
        assert outcome.status == "aborted"
        assert outcome.errors_before is None

    def test_engine_failure_aborts_and_restores_manifest(self, project, write_file, cfg):
        manifest = write_file(".stylelintignore", "src/\n")

        class BrokenEngine:
            def lint(self, config, files):
                raise RuntimeError("stylelint exploded")

        outcome = eliminate_manifest(cfg, BrokenEngine(), project)

        assert outcome.status == "aborted"
        assert "stylelint exploded" in outcome.failures[0]
        assert manifest.read_text(encoding="utf-8") == "src/\n"
        assert not hidden_path(manifest).exists()
