from __future__ import annotations

import asyncio

import pytest

from tagsinput.core.errors import OutOfRangeIndexError
from tagsinput.domain.events import INVALID_TAG, TAG_ADDED, TAG_REMOVED
from tagsinput.domain.options import TagsInputOptions
from tagsinput.domain.rules import RejectReason
from tagsinput.services.event_bus import EventBus
from tagsinput.services.tag_list import NO_SELECTION, TagList


def make_list(recorder, **kwargs):
    hooks = {k: kwargs.pop(k) for k in ("on_tag_adding", "on_tag_removing") if k in kwargs}
    bus = EventBus()
    tag_list = TagList(TagsInputOptions(**kwargs), bus, **hooks)
    return tag_list, recorder(bus)


@pytest.mark.anyio
async def test_add_appends_at_tail_and_announces(recorder):
    tag_list, events = make_list(recorder)

    tag_list.add_text("first")
    tag_list.add_text("second")
    await tag_list.wait_pending()

    assert tag_list.items == ["first", "second"]
    added = events.payloads(TAG_ADDED)
    assert [e.tag for e in added] == ["first", "second"]
    assert added[0].tag_list == ["first"]
    assert added[1].tag_list == ["first", "second"]


@pytest.mark.anyio
async def test_add_returns_normalized_candidate_before_admission(recorder):
    tag_list, _ = make_list(recorder)

    returned = tag_list.add_text("  new york  ")

    assert returned == "new-york"
    assert tag_list.items == []
    assert tag_list.pending_count == 1
    await tag_list.wait_pending()
    assert tag_list.items == ["new-york"]
    assert tag_list.pending_count == 0


@pytest.mark.anyio
async def test_spaces_kept_when_dash_replacement_disabled(recorder):
    tag_list, _ = make_list(recorder, replace_spaces_with_dashes=False)

    tag_list.add_text("new york")
    await tag_list.wait_pending()

    assert tag_list.items == ["new york"]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "candidate,options,reason",
    [
        ("", {}, RejectReason.empty),
        ("x", {}, RejectReason.length),
        ("abcdef", {"max_length": 3}, RejectReason.length),
        ("123", {"allowed_tags_pattern": "^[a-z]+$"}, RejectReason.pattern),
    ],
)
async def test_rejected_candidate_fires_invalid_tag(recorder, candidate, options, reason):
    tag_list, events = make_list(recorder, **options)

    tag_list.add_text(candidate)
    await tag_list.wait_pending()

    assert tag_list.items == []
    assert events.topics() == [INVALID_TAG]
    invalid = events.payloads(INVALID_TAG)[0]
    assert invalid.tag == candidate
    assert invalid.reason is reason


@pytest.mark.anyio
async def test_duplicate_is_case_insensitive(recorder):
    tag_list, events = make_list(recorder)

    tag_list.add_text("Python")
    await tag_list.wait_pending()
    tag_list.add_text("PYTHON")
    await tag_list.wait_pending()

    assert tag_list.items == ["Python"]
    assert events.topics() == [TAG_ADDED, INVALID_TAG]
    assert events.payloads(INVALID_TAG)[0].reason is RejectReason.duplicate


@pytest.mark.anyio
async def test_repeated_rejection_fires_each_time(recorder):
    tag_list, events = make_list(recorder)

    tag_list.add_text("a")
    tag_list.add_text("a")
    await tag_list.wait_pending()

    assert events.topics() == [INVALID_TAG, INVALID_TAG]


@pytest.mark.anyio
async def test_async_veto_decides_admission(recorder):
    async def on_tag_adding(tag, items):
        await asyncio.sleep(0)
        return tag != "spam"

    tag_list, events = make_list(recorder, on_tag_adding=on_tag_adding)

    tag_list.add_text("ham")
    tag_list.add_text("spam")
    await tag_list.wait_pending()

    assert tag_list.items == ["ham"]
    assert events.payloads(INVALID_TAG)[0].reason is RejectReason.vetoed


@pytest.mark.anyio
async def test_veto_exception_rejects_without_escaping(recorder):
    def on_tag_adding(tag, items):
        raise ValueError("nope")

    tag_list, events = make_list(recorder, on_tag_adding=on_tag_adding)

    tag_list.add_text("hello")
    await tag_list.wait_pending()

    assert tag_list.items == []
    assert events.topics() == [INVALID_TAG]


@pytest.mark.anyio
async def test_event_snapshot_is_independent_of_collection(recorder):
    tag_list, events = make_list(recorder)

    tag_list.add_text("one")
    await tag_list.wait_pending()
    events.payloads(TAG_ADDED)[0].tag_list.append("bogus")

    assert tag_list.items == ["one"]


@pytest.mark.anyio
async def test_concurrent_equal_candidates_admit_only_one(recorder):
    gate = asyncio.Event()

    async def on_tag_adding(tag, items):
        await gate.wait()
        return True

    tag_list, events = make_list(recorder, on_tag_adding=on_tag_adding)

    tag_list.add_text("same")
    tag_list.add_text("SAME")
    await asyncio.sleep(0)
    gate.set()
    await tag_list.wait_pending()

    assert tag_list.items == ["same"]
    assert events.topics() == [TAG_ADDED, INVALID_TAG]
    assert events.payloads(INVALID_TAG)[0].reason is RejectReason.duplicate


@pytest.mark.anyio
async def test_admission_finishing_after_reseed_lands_by_default(recorder):
    gate = asyncio.Event()

    async def on_tag_adding(tag, items):
        await gate.wait()
        return True

    tag_list, _ = make_list(recorder, on_tag_adding=on_tag_adding)

    tag_list.add_text("late")
    await asyncio.sleep(0)
    tag_list.reset_items(["seeded"])
    gate.set()
    await tag_list.wait_pending()

    assert tag_list.items == ["seeded", "late"]


@pytest.mark.anyio
async def test_stale_admission_dropped_when_configured(recorder):
    gate = asyncio.Event()

    async def on_tag_adding(tag, items):
        await gate.wait()
        return True

    tag_list, events = make_list(
        recorder, on_tag_adding=on_tag_adding, discard_stale_validations=True
    )

    tag_list.add_text("late")
    await asyncio.sleep(0)
    tag_list.reset_items(["seeded"])
    gate.set()
    await tag_list.wait_pending()

    assert tag_list.items == ["seeded"]
    assert events.events == []


@pytest.mark.anyio
async def test_handler_error_surfaces_from_wait_pending():
    bus = EventBus()
    tag_list = TagList(TagsInputOptions(), bus)

    def broken(_event):
        raise KeyError("handler bug")

    bus.on(TAG_ADDED, broken)
    tag_list.add_text("boom")

    with pytest.raises(KeyError):
        await tag_list.wait_pending()
    assert tag_list.items == ["boom"]


def test_add_requires_running_loop():
    tag_list = TagList(TagsInputOptions(), EventBus())
    with pytest.raises(RuntimeError):
        tag_list.add_text("orphan")


@pytest.mark.anyio
async def test_structured_records(recorder):
    tag_list, events = make_list(recorder, raw_string=False, display_property="name")

    returned = tag_list.add({"name": "big data", "id": 1})
    tag_list.add_text("other")
    await tag_list.wait_pending()

    assert returned == {"name": "big-data", "id": 1}
    assert tag_list.items == [{"name": "big-data", "id": 1}, {"name": "other"}]
    assert tag_list.text_of(tag_list.items[0]) == "big-data"


def test_remove_returns_tag_and_announces(recorder):
    tag_list, events = make_list(recorder)
    tag_list.reset_items(["a", "b", "c"])
    tag_list.select(1)

    removed = tag_list.remove(1)

    assert removed == "b"
    assert tag_list.items == ["a", "c"]
    assert tag_list.index == NO_SELECTION
    event = events.payloads(TAG_REMOVED)[0]
    assert event.tag == "b"
    assert event.tag_list == ["a", "c"]


def test_remove_denied_by_veto(recorder):
    seen = []

    def on_tag_removing(tag, items):
        seen.append((tag, items))
        return False

    tag_list, events = make_list(recorder, on_tag_removing=on_tag_removing)
    tag_list.reset_items(["keep"])

    assert tag_list.remove(0) is None
    assert tag_list.items == ["keep"]
    assert events.events == []
    assert seen == [("keep", ["keep"])]


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_remove_out_of_range(index):
    tag_list = TagList(TagsInputOptions(), EventBus())
    tag_list.reset_items(["a", "b", "c"])

    with pytest.raises(OutOfRangeIndexError) as exc_info:
        tag_list.remove(index)
    assert isinstance(exc_info.value, IndexError)
    assert tag_list.items == ["a", "b", "c"]


def test_selection_wraps_around():
    tag_list = TagList(TagsInputOptions(), EventBus())
    tag_list.reset_items(["a", "b", "c"])

    tag_list.select_prior()
    assert tag_list.selected == "c"
    tag_list.select_next()
    assert tag_list.selected == "a"
    tag_list.select_prior()
    assert tag_list.selected == "c"
    tag_list.select(5)
    assert tag_list.index == 0


def test_select_on_empty_list_clears_selection():
    tag_list = TagList(TagsInputOptions(), EventBus())

    tag_list.select_prior()

    assert tag_list.index == NO_SELECTION
    assert tag_list.selected is None
    assert tag_list.remove_selected() is None


def test_reset_items_drops_selection():
    tag_list = TagList(TagsInputOptions(), EventBus())
    tag_list.reset_items(["a", "b"])
    tag_list.select(1)

    tag_list.reset_items(["x"])

    assert tag_list.index == NO_SELECTION
    assert tag_list.items == ["x"]


@pytest.mark.anyio
async def test_add_clears_selection(recorder):
    tag_list, _ = make_list(recorder)
    tag_list.reset_items(["aa", "bb"])
    tag_list.select(0)

    tag_list.add_text("cc")
    await tag_list.wait_pending()

    assert tag_list.index == NO_SELECTION
