"""Tests for the open-document registry."""

import pytest

from helpers import drain
from models.document import TextDocument, TextRange
from models.review import Diagnostic, ReviewKind
from services.errors import DocumentNotFoundError

DOC_ID = "file:///proj/app.py"


def diagnostic_on(document, line):
    return Diagnostic(range=document.line_at(line), message=f"issue on {line}", origin_task=ReviewKind.DOCUMENT)


def test_open_makes_document_active(workspace, sample_document):
    workspace.open(sample_document)
    assert workspace.active() == sample_document
    assert workspace.diagnostics.is_open(DOC_ID)


def test_open_in_background(workspace, sample_document):
    workspace.open(sample_document, active=False)
    assert workspace.active() is None
    workspace.activate(DOC_ID)
    assert workspace.is_active(DOC_ID)


def test_unknown_document(workspace):
    with pytest.raises(DocumentNotFoundError):
        workspace.get("missing")


def test_update_bumps_version_and_clamps_diagnostics(workspace, sample_document):
    workspace.open(sample_document)
    workspace.diagnostics.replace(DOC_ID, [diagnostic_on(sample_document, 8)])

    updated = workspace.update(DOC_ID, "only\ntwo")

    assert updated.version == sample_document.version + 1
    (diagnostic,) = workspace.diagnostics.get(DOC_ID)
    assert diagnostic.range.line == 1
    assert diagnostic.range.end_character == len("two")


def test_update_with_explicit_version(workspace, sample_document):
    workspace.open(sample_document)
    assert workspace.update(DOC_ID, "x", version=42).version == 42


def test_reopen_revalidates(workspace, sample_document):
    workspace.open(sample_document)
    workspace.diagnostics.replace(DOC_ID, [diagnostic_on(sample_document, 9)])
    workspace.open(sample_document.model_copy(update={"content": "a = 1"}))
    assert workspace.diagnostics.get(DOC_ID)[0].range.line == 0


def test_apply_edit_requires_active_document(workspace, sample_document):
    workspace.open(sample_document)
    workspace.open(TextDocument(document_id="other", content="x"))
    edit = TextRange(start_line=0, start_character=0, end_line=0, end_character=10)

    assert workspace.apply_edit(DOC_ID, edit, "changed") is None
    assert workspace.get(DOC_ID).content == sample_document.content

    workspace.activate(DOC_ID)
    updated = workspace.apply_edit(DOC_ID, edit, "changed")
    assert updated.lines[0] == "changed"
    assert workspace.get(DOC_ID) == updated


def test_close_publishes_empty_set(workspace, sample_document, event_bus):
    workspace.open(sample_document)
    workspace.diagnostics.replace(DOC_ID, [diagnostic_on(sample_document, 1)])
    queue = event_bus.subscribe()

    workspace.close(DOC_ID)

    assert workspace.document_ids() == []
    assert workspace.active() is None
    assert drain(queue)[-1].diagnostics == []
    assert not workspace.diagnostics.is_open(DOC_ID)


def test_apply_edit_drops_resolved_diagnostic_in_one_update(workspace, sample_document, event_bus):
    workspace.open(sample_document)
    fixed, other = diagnostic_on(sample_document, 2), diagnostic_on(sample_document, 6)
    workspace.diagnostics.replace(DOC_ID, [fixed, other])
    queue = event_bus.subscribe()

    edit = TextRange(start_line=2, start_character=0, end_line=2, end_character=10)
    workspace.apply_edit(DOC_ID, edit, "line_2 = 2  # checked", resolved=fixed.id)

    events = drain(queue)
    assert len(events) == 1
    assert [d.id for d in events[0].diagnostics] == [other.id]
