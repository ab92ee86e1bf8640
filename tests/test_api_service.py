from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from cssgps.api import service as service_module
from cssgps.api.service import (
    ClassNameService,
    GenerationRequest,
    OutcomeStatus,
    path_marker_value,
    read_document,
)
from cssgps.core import options as options_module
from cssgps.core.config import GeneratorSettings, PathMarkerConfig
from cssgps.core.context import GenerationContext
from cssgps.core.exceptions import UnknownRuleError


DOCUMENT = '<body>\n  <main>\n    <p class="lead">Hello</p>\n  </main>\n</body>\n'


class RecordingEmitter:
    def __init__(self) -> None:
        self.debug_enabled = False
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def _request(tmp_path: Path, **overrides: Any) -> GenerationRequest:
    source = tmp_path / "src" / "pages" / "about.html"
    params: dict[str, Any] = {
        "file_path": source,
        "offset": DOCUMENT.index("Hello"),
        "document_text": DOCUMENT,
        "workspace_root": tmp_path,
    }
    params.update(overrides)
    return GenerationRequest(**params)


def test_generate_defaults_to_rule_beta(tmp_path: Path) -> None:
    outcome = ClassNameService().generate(_request(tmp_path))

    assert outcome.status is OutcomeStatus.GENERATED
    assert outcome.ok
    assert outcome.rule is not None and outcome.rule.id == "ruleBeta"
    assert outcome.class_name.startswith("mai-p--")
    assert outcome.edit is None
    assert outcome.updated_text == DOCUMENT


def test_apply_returns_single_span_edit(tmp_path: Path) -> None:
    request = _request(tmp_path, option_ids=("abbreviatedDomPosition",))
    outcome = ClassNameService().apply(request)

    assert outcome.status is OutcomeStatus.APPLIED
    assert outcome.edit is not None
    assert outcome.edit.original == '<p class="lead">'
    assert outcome.edit.replacement == '<p class="lead mai-p">'
    assert outcome.updated_text == DOCUMENT.replace('class="lead"', 'class="lead mai-p"')


def test_apply_twice_is_unchanged(tmp_path: Path) -> None:
    service = ClassNameService()
    first = service.apply(_request(tmp_path, rule_id="ruleGamma"))
    second = service.apply(_request(tmp_path, rule_id="ruleGamma", document_text=first.updated_text))

    assert second.status is OutcomeStatus.UNCHANGED
    assert second.ok
    assert second.updated_text == first.updated_text


def test_not_found_is_a_status(tmp_path: Path) -> None:
    outcome = ClassNameService().apply(
        _request(tmp_path, document_text="no markup here", offset=4)
    )

    assert outcome.status is OutcomeStatus.NOT_FOUND
    assert not outcome.ok
    assert outcome.message == "No HTML element found at the given position."
    assert outcome.edit is None


def test_empty_result_is_a_status(tmp_path: Path) -> None:
    document = "<body><p>x</p></body>"
    outcome = ClassNameService().apply(
        _request(
            tmp_path,
            document_text=document,
            offset=document.index("<body") + 1,
            option_ids=("projectPrefix", "abbreviatedDomPosition"),
        )
    )

    assert outcome.status is OutcomeStatus.EMPTY
    assert not outcome.ok
    assert "could not generate" in (outcome.message or "").lower()
    assert outcome.updated_text == document


def test_unknown_rule_propagates(tmp_path: Path) -> None:
    with pytest.raises(UnknownRuleError):
        ClassNameService().generate(_request(tmp_path, rule_id="missing"))


def test_option_ids_take_priority_over_rule(tmp_path: Path) -> None:
    outcome = ClassNameService().generate(
        _request(tmp_path, rule_id="ruleAlpha", option_ids=("reversedFileName",))
    )
    assert outcome.class_name == "tuoba"


def test_path_marker_from_settings(tmp_path: Path) -> None:
    settings = GeneratorSettings(path_marker=PathMarkerConfig(enabled=True))
    outcome = ClassNameService().apply(
        _request(tmp_path, rule_id="ruleGamma", settings=settings)
    )

    assert outcome.marker_value == "pag-abo"
    assert outcome.edit is not None
    assert outcome.edit.replacement == '<p class="lead tuoba" data-css-gps="pag-abo">'


def test_path_marker_request_override(tmp_path: Path) -> None:
    settings = GeneratorSettings(path_marker=PathMarkerConfig(enabled=True))
    outcome = ClassNameService().generate(
        _request(tmp_path, rule_id="ruleGamma", settings=settings, emit_path_marker=False)
    )
    assert outcome.marker_value is None


def test_path_marker_value_falls_back_to_relative_path() -> None:
    context = GenerationContext(
        file_path="/",
        relative_path="/",
        file_name="",
        file_extension="",
        element_offset=0,
        document_text="",
    )
    assert path_marker_value(context, GeneratorSettings()) == "/"


def test_events_are_emitted(tmp_path: Path) -> None:
    emitter = RecordingEmitter()
    ClassNameService(emitter=emitter).generate(_request(tmp_path, rule_id="ruleGamma"))

    names = [name for name, _payload in emitter.events]
    assert names == ["element_located", "class_generated"]
    assert emitter.events[0][1]["tag"] == "p"
    assert emitter.events[1][1] == {"class_name": "tuoba", "rule": "Rule Gamma"}


def test_expired_releases_are_reported(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(service_module, "utc_today", lambda: date(2030, 1, 1))
    monkeypatch.setattr(options_module, "utc_today", lambda: date(2030, 1, 1))
    settings = GeneratorSettings(releases=[{"name": "r1", "expiry": "2025-01-01"}])
    emitter = RecordingEmitter()

    outcome = ClassNameService().generate(
        _request(tmp_path, option_ids=("releaseName",), settings=settings, emitter=emitter)
    )

    assert outcome.class_name == "stable"
    assert ("release_expired", {"name": "r1", "expiry": "2025-01-01"}) in emitter.events


def test_document_is_read_from_disk(tmp_path: Path) -> None:
    source = tmp_path / "page.html"
    source.write_bytes(b"<div>\r\n<span>x</span>\r\n</div>")

    text = read_document(source)
    assert "\r\n" in text

    outcome = ClassNameService().apply(
        GenerationRequest(
            file_path=source,
            offset=text.index("x"),
            option_ids=("abbreviatedDomPosition",),
        )
    )
    assert outcome.updated_text == "<div>\r\n<span class=\"div-spa\">x</span>\r\n</div>"
