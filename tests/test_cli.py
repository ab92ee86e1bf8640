from __future__ import annotations

from datetime import date
import importlib
from pathlib import Path

import pytest
from typer.testing import CliRunner
import yaml

from cssgps.core.exceptions import PositionError
from cssgps.ui.cli import app
from cssgps.ui.cli.utils import offset_from_position


releases_module = importlib.import_module("cssgps.ui.cli.commands.releases")
service_module = importlib.import_module("cssgps.api.service")
options_module = importlib.import_module("cssgps.core.options")

PAGE = '<body>\n  <main>\n    <p class="lead">Hello</p>\n  </main>\n</body>\n'


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    page = tmp_path / "src" / "pages" / "about.html"
    page.parent.mkdir(parents=True)
    page.write_text(PAGE, encoding="utf-8")
    return tmp_path


def _page(workspace: Path) -> Path:
    return workspace / "src" / "pages" / "about.html"


def _invoke(runner: CliRunner, *args: str):
    return runner.invoke(app, list(args), env={"COLUMNS": "200"})


def test_generate_prints_class_name(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "generate",
        str(_page(workspace)),
        "--offset",
        str(PAGE.index("Hello")),
        "--rule",
        "ruleGamma",
        "--workspace",
        str(workspace),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "tuoba"


def test_generate_with_line_and_column(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "generate",
        str(_page(workspace)),
        "--line",
        "3",
        "--column",
        "5",
        "--option",
        "abbreviatedDomPosition",
        "--option",
        "reversedFileName",
        "--separator",
        "_",
        "-w",
        str(workspace),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "mai-p_tuoba"


def test_generate_reads_workspace_settings(runner: CliRunner, workspace: Path) -> None:
    (workspace / "cssgps.yml").write_text("projectPrefix: Acme Corp\n", encoding="utf-8")
    result = _invoke(
        runner,
        "generate",
        str(_page(workspace)),
        "-o",
        str(PAGE.index("Hello")),
        "-r",
        "ruleGamma",
        "-w",
        str(workspace),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "acme-corp--tuoba"


def test_generate_requires_a_position(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(runner, "generate", str(_page(workspace)), "-w", str(workspace))
    assert result.exit_code == 2


def test_generate_rejects_conflicting_positions(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner, "generate", str(_page(workspace)), "--offset", "3", "--line", "1"
    )
    assert result.exit_code == 2


def test_generate_reports_empty_result(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "generate",
        str(_page(workspace)),
        "--offset",
        "0",
        "--option",
        "abbreviatedDomPosition",
        "-w",
        str(workspace),
    )

    assert result.exit_code == 1
    assert "Could not generate" in result.output


def test_generate_unknown_rule(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner, "generate", str(_page(workspace)), "--offset", "30", "--rule", "nope"
    )

    assert result.exit_code == 1
    assert "Unknown rule 'nope'" in result.output


def test_apply_prints_updated_document(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "apply",
        str(_page(workspace)),
        "--offset",
        str(PAGE.index("Hello")),
        "--rule",
        "ruleGamma",
        "-w",
        str(workspace),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == PAGE.replace('class="lead"', 'class="lead tuoba"')
    assert _page(workspace).read_text(encoding="utf-8") == PAGE


def test_apply_in_place_with_marker(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "apply",
        str(_page(workspace)),
        "--offset",
        str(PAGE.index("Hello")),
        "--rule",
        "ruleGamma",
        "--marker",
        "--in-place",
        "-w",
        str(workspace),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "tuoba"
    assert '<p class="lead tuoba" data-css-gps="pag-abo">' in _page(workspace).read_text(
        encoding="utf-8"
    )


def test_apply_to_output_file(runner: CliRunner, workspace: Path, tmp_path: Path) -> None:
    target = tmp_path / "out.html"
    result = _invoke(
        runner,
        "apply",
        str(_page(workspace)),
        "--offset",
        str(PAGE.index("Hello")),
        "--option",
        "abbreviatedDomPosition",
        "--output",
        str(target),
    )

    assert result.exit_code == 0, result.output
    assert 'class="lead mai-p"' in target.read_text(encoding="utf-8")


def test_apply_rejects_in_place_with_output(
    runner: CliRunner, workspace: Path, tmp_path: Path
) -> None:
    result = _invoke(
        runner,
        "apply",
        str(_page(workspace)),
        "--offset",
        "30",
        "--in-place",
        "--output",
        str(tmp_path / "out.html"),
    )
    assert result.exit_code == 2


def test_ancestors(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(runner, "ancestors", str(_page(workspace)), "--offset", str(PAGE.index("Hello")))

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "body>main>p"


def test_ancestors_without_element(runner: CliRunner, tmp_path: Path) -> None:
    page = tmp_path / "plain.txt"
    page.write_text("no tags", encoding="utf-8")
    result = _invoke(runner, "ancestors", str(page), "--offset", "3")

    assert result.exit_code == 1
    assert "No HTML element found" in result.output


def test_options_listing(runner: CliRunner) -> None:
    result = _invoke(runner, "options")

    assert result.exit_code == 0, result.output
    for option_id in ("projectPrefix", "pathHash", "domHash", "releaseName"):
        assert option_id in result.stdout


def test_options_with_values(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "options",
        str(_page(workspace)),
        "--offset",
        str(PAGE.index("Hello")),
        "-w",
        str(workspace),
    )

    assert result.exit_code == 0, result.output
    assert "Value" in result.stdout
    assert "tuoba" in result.stdout
    assert "pag-abo" in result.stdout


def test_rules_add_list_remove(runner: CliRunner, workspace: Path) -> None:
    added = _invoke(
        runner,
        "rules",
        "add",
        "Short",
        "--id",
        "short",
        "--option",
        "projectPrefix",
        "--option",
        "pathHash",
        "--separator",
        "_",
        "-w",
        str(workspace),
    )
    assert added.exit_code == 0, added.output
    assert added.stdout.strip() == "short: {projectPrefix}_{pathHash}"

    payload = yaml.safe_load((workspace / "cssgps.yml").read_text(encoding="utf-8"))
    assert payload["customRules"] == [
        {"id": "short", "name": "Short", "options": ["projectPrefix", "pathHash"], "separator": "_"}
    ]

    listed = _invoke(runner, "rules", "list", "-w", str(workspace))
    assert listed.exit_code == 0, listed.output
    assert "ruleAlpha" in listed.stdout
    assert "short" in listed.stdout

    generated = _invoke(
        runner,
        "generate",
        str(_page(workspace)),
        "--offset",
        "30",
        "--rule",
        "short",
        "-w",
        str(workspace),
    )
    assert generated.exit_code == 0, generated.output
    assert len(generated.stdout.strip()) == 8

    removed = _invoke(runner, "rules", "remove", "short", "-w", str(workspace))
    assert removed.exit_code == 0, removed.output
    payload = yaml.safe_load((workspace / "cssgps.yml").read_text(encoding="utf-8"))
    assert payload["customRules"] == []


def test_rules_add_rejects_unknown_option(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner, "rules", "add", "Bad", "--option", "nope", "-w", str(workspace)
    )

    assert result.exit_code == 1
    assert not (workspace / "cssgps.yml").exists()


def test_rules_add_rejects_preset_ids(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "rules",
        "add",
        "Clash",
        "--id",
        "ruleBeta",
        "--option",
        "pathHash",
        "-w",
        str(workspace),
    )
    assert result.exit_code == 2


def test_rules_remove_unknown(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(runner, "rules", "remove", "ghost", "-w", str(workspace))
    assert result.exit_code == 1


def test_releases_workflow(
    runner: CliRunner, workspace: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(releases_module, "utc_today", lambda: date(2025, 6, 1))

    for name, expiry in (("r2", "2026-01-31"), ("r1", "2025-01-01")):
        result = _invoke(runner, "releases", "add", name, expiry, "-w", str(workspace))
        assert result.exit_code == 0, result.output

    payload = yaml.safe_load((workspace / "cssgps.yml").read_text(encoding="utf-8"))
    assert [entry["name"] for entry in payload["releases"]] == ["r1", "r2"]

    current = _invoke(runner, "releases", "current", "-w", str(workspace))
    assert current.stdout.strip() == "r2"

    listed = _invoke(runner, "releases", "list", "-w", str(workspace))
    assert listed.exit_code == 0, listed.output
    assert "expired" in listed.stdout
    assert "active" in listed.stdout

    removed = _invoke(runner, "releases", "remove", "r2", "-w", str(workspace))
    assert removed.exit_code == 0, removed.output
    fallback = _invoke(runner, "releases", "current", "-w", str(workspace))
    assert fallback.stdout.strip() == "stable"


def test_releases_add_rejects_bad_date(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(runner, "releases", "add", "r1", "tomorrow", "-w", str(workspace))

    assert result.exit_code == 1
    assert "invalid expiry date" in result.output


def test_missing_config_file(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "generate",
        str(_page(workspace)),
        "--offset",
        "30",
        "--config",
        str(workspace / "absent.yml"),
    )

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_verbose_reports_located_element(runner: CliRunner, workspace: Path) -> None:
    result = _invoke(
        runner,
        "-v",
        "generate",
        str(_page(workspace)),
        "--offset",
        str(PAGE.index("Hello")),
        "--rule",
        "ruleGamma",
    )

    assert result.exit_code == 0, result.output
    assert "Located <p>" in result.output


@pytest.mark.parametrize(
    "line, column, expected",
    [(1, 1, 0), (2, 3, 9), (3, 5, 20)],
)
def test_offset_from_position(line: int, column: int, expected: int) -> None:
    assert offset_from_position(PAGE, line, column) == expected


@pytest.mark.parametrize("separator", ["\x0c", "\x0b", "\x1c", "\x85", "\u2028", "\u2029"])
def test_offset_ignores_unicode_line_separators(separator: str) -> None:
    text = f"<p>a{separator}b</p>\n<div>x</div>\n"
    assert offset_from_position(text, 2, 1) == text.index("<div>")


@pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
def test_offset_handles_each_line_ending(newline: str) -> None:
    text = f"<p>a</p>{newline}<div>x</div>"
    assert offset_from_position(text, 2, 1) == text.index("<div>")


def test_offset_of_empty_last_line() -> None:
    assert offset_from_position("a\n", 2, 1) == 2
    assert offset_from_position("", 1, 1) == 0


@pytest.mark.parametrize(
    "text, line, column",
    [("a\n", 3, 1), ("a\n", 2, 2), ("ab", 1, 4), ("ab", 0, 1)],
)
def test_offset_out_of_range(text: str, line: int, column: int) -> None:
    with pytest.raises(PositionError):
        offset_from_position(text, line, column)


def test_apply_by_line_after_form_feed(runner: CliRunner, tmp_path: Path) -> None:
    page = tmp_path / "page.html"
    page.write_text("<p>a\x0cb</p>\n<div>x</div>\n", encoding="utf-8")
    result = _invoke(
        runner,
        "apply",
        str(page),
        "--line",
        "2",
        "--column",
        "1",
        "--option",
        "abbreviatedDomPosition",
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == '<p>a\x0cb</p>\n<div class="div">x</div>\n'


def test_verbose_summary_lists_expired_releases(
    runner: CliRunner, workspace: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(service_module, "utc_today", lambda: date(2030, 1, 1))
    monkeypatch.setattr(options_module, "utc_today", lambda: date(2030, 1, 1))
    (workspace / "cssgps.yml").write_text(
        "releases:\n  - name: r1\n    expiry: '2025-01-01'\n", encoding="utf-8"
    )
    result = _invoke(
        runner,
        "-v",
        "generate",
        str(_page(workspace)),
        "--offset",
        str(PAGE.index("Hello")),
        "--option",
        "releaseName",
        "-w",
        str(workspace),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "stable"
    assert "Expired release" in result.output
    assert "r1 (2025-01-01)" in result.output
