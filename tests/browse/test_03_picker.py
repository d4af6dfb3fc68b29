from __future__ import annotations

import pytest

from drive_sdk.browse.picker import DestinationPicker
from drive_sdk.models.folder import Folder
from drive_sdk.transport.errors import ServerError


@pytest.fixture
def picker(client, tree) -> DestinationPicker:
    p = client.browser().picker()
    p.open_dialog()
    return p


def _child(picker: DestinationPicker, name: str) -> Folder:
    for f in picker.folders:
        if f.name == name:
            return f
    raise AssertionError(f"{name!r} not listed; got {[f.name for f in picker.folders]}")


def test_01_opens_at_root_with_folders_only(picker):
    assert picker.is_open
    assert picker.current_folder_id is None
    assert picker.breadcrumbs == []
    assert sorted(f.name for f in picker.folders) == ["Docs", "Photos"]
    assert not picker.loading


def test_02_enter_folder_pushes_frame_and_crumb(picker):
    picker.enter_folder(_child(picker, "Docs"))
    picker.enter_folder(_child(picker, "2024"))

    assert picker.current_folder_id == "f-2024"
    assert [f.id for f in picker.stack] == ["f-docs", "f-2024"]
    assert [(c.id, c.name) for c in picker.breadcrumbs] == [("f-docs", "Docs"), ("f-2024", "2024")]
    assert [f.name for f in picker.folders] == ["Q1"]


def test_03_go_back_as_many_times_returns_to_root(picker):
    for name in ("Docs", "2024", "Q1", "Reports"):
        picker.enter_folder(_child(picker, name))
    assert picker.current_folder_id == "f-reports"

    for _ in range(4):
        assert picker.go_back() is True

    assert picker.current_folder_id is None
    assert picker.breadcrumbs == []
    assert picker.stack == []
    assert sorted(f.name for f in picker.folders) == ["Docs", "Photos"]


def test_04_go_back_lands_on_previous_frame(picker):
    picker.enter_folder(_child(picker, "Docs"))
    picker.enter_folder(_child(picker, "2024"))

    picker.go_back()

    assert picker.current_folder_id == "f-docs"
    assert [c.id for c in picker.breadcrumbs] == ["f-docs"]
    assert [f.name for f in picker.folders] == ["2024"]


def test_05_go_back_at_root_is_a_no_op(picker, tree):
    before = len(tree.calls)

    assert picker.go_back() is False
    assert not picker.can_go_back
    assert len(tree.calls) == before


def test_06_go_to_root_clears_stack(picker):
    picker.enter_folder(_child(picker, "Docs"))
    picker.enter_folder(_child(picker, "2024"))

    picker.go_to_root()

    assert picker.current_folder_id is None
    assert picker.stack == []
    assert picker.breadcrumbs == []


def test_07_stale_listing_is_discarded(picker, tree):
    docs = _child(picker, "Docs")

    # user jumps back to root while the Docs listing is still in flight
    tree.once("GET", "/folders", lambda _call: picker.go_to_root())
    picker.enter_folder(docs)

    assert picker.current_folder_id is None
    assert picker.breadcrumbs == []
    assert sorted(f.name for f in picker.folders) == ["Docs", "Photos"]
    assert not picker.loading


def test_08_load_failure_keeps_previous_listing(picker, tree):
    listed = list(picker.folders)
    tree.failures[("GET", "/folders")] = ServerError(status_code=500, message="boom")

    picker.enter_folder(_child(picker, "Docs"))

    assert picker.current_folder_id == "f-docs"
    assert picker.folders == listed
    assert not picker.loading


def test_09_confirm_returns_target_and_closes(picker):
    picker.enter_folder(_child(picker, "Photos"))

    assert picker.confirm() == "f-photos"
    assert not picker.is_open


def test_10_closed_picker_does_not_load(client, tree):
    p = client.browser().picker()
    p.enter_folder(Folder(id="f-docs", name="Docs"))

    assert tree.calls == []
    assert p.current_folder_id == "f-docs"


def test_11_initial_folder_resolves_breadcrumbs(client, tree):
    p = client.browser().picker(initial_folder_id="f-q1")
    p.open_dialog()

    assert [c.id for c in p.breadcrumbs] == ["f-docs", "f-2024", "f-q1"]
    assert [f.name for f in p.folders] == ["Reports"]
    assert p.go_back() is False


def test_12_picker_navigation_leaves_view_alone(client, tree):
    view = client.browser("f-docs")
    view.load()
    p = view.picker()
    p.open_dialog()
    p.enter_folder(_child(p, "Photos"))

    assert view.folder_id == "f-docs"
    assert [c.id for c in view.breadcrumbs] == ["f-docs"]
