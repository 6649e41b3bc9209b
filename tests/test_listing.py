# File: tests/test_listing.py

from community_action.db.init_db import DEMO_PROJECTS
from community_action.schemas.project import normalize
from community_action.services.listing import SortOrder, ViewState, recompute

SAMPLE = [normalize({**record, "id": i}) for i, record in enumerate(DEMO_PROJECTS, start=1)]


def votes(projects):
    return [p.votes for p in projects]


def test_sort_by_votes_both_directions():
    three = [p for p in SAMPLE if p.votes in (24, 18, 32)]
    assert votes(recompute(three, "", "all", SortOrder.DESC)) == [32, 24, 18]
    assert votes(recompute(three, "", "all", SortOrder.ASC)) == [18, 24, 32]


def test_search_is_case_insensitive_substring_over_three_fields():
    visible = recompute(SAMPLE, "GARDEN", "all", SortOrder.DESC)
    expected = {
        p.id
        for p in SAMPLE
        if "garden" in (p.title + " " + p.description + " " + p.location).lower()
    }
    assert {p.id for p in visible} == expected
    assert {p.title for p in visible} == {"Community Garden Weeding", "Elementary School Garden"}


def test_search_matches_location_only():
    visible = recompute(SAMPLE, "highway 101", "all", SortOrder.DESC)
    assert [p.title for p in visible] == ["Highway Entrance Cleanup"]


def test_type_filter():
    visible = recompute(SAMPLE, "", "weeds", SortOrder.DESC)
    assert visible
    assert all(p.type == "weeds" for p in visible)


def test_all_filter_keeps_search_result():
    searched = recompute(SAMPLE, "park", "all", SortOrder.DESC)
    assert len(searched) == len([p for p in SAMPLE if "park" in (p.title + p.description + p.location).lower()])


def test_combined_search_and_filter():
    visible = recompute(SAMPLE, "park", "cleanup", SortOrder.ASC)
    assert [p.title for p in visible] == ["Riverbank Cleanup"]


def test_no_matches():
    assert recompute(SAMPLE, "volcano", "all", SortOrder.DESC) == []


def test_padded_search_term_is_matched_as_given():
    padded = recompute(SAMPLE, "park ", "all", SortOrder.DESC)
    expected = [
        p
        for p in SAMPLE
        if any("park " in text.lower() for text in (p.title, p.description, p.location))
    ]

    assert {p.id for p in padded} == {p.id for p in expected}
    assert "Riverbank Cleanup" not in [p.title for p in padded]
    assert "Riverbank Cleanup" in [p.title for p in recompute(SAMPLE, "park", "all", SortOrder.DESC)]


def test_recompute_is_deterministic_and_pure():
    before = list(SAMPLE)
    first = recompute(SAMPLE, "e", "all", SortOrder.DESC)
    second = recompute(SAMPLE, "e", "all", SortOrder.DESC)
    assert [p.id for p in first] == [p.id for p in second]
    assert SAMPLE == before


def test_ties_keep_arrival_order():
    a = normalize({**DEMO_PROJECTS[0], "id": 1, "votes": 5})
    b = normalize({**DEMO_PROJECTS[1], "id": 2, "votes": 5})
    assert [p.id for p in recompute([a, b], "", "all", SortOrder.DESC)] == [1, 2]
    assert [p.id for p in recompute([a, b], "", "all", SortOrder.ASC)] == [1, 2]


def test_view_state_from_query_is_lenient():
    view = ViewState.from_query(q="garden", type="nonsense", sort="sideways")
    assert view.search_term == "garden"
    assert view.type_filter == "all"
    assert view.sort_order is SortOrder.DESC

    assert ViewState.from_query(type="graffiti", sort="asc").sort_order is SortOrder.ASC
    assert SortOrder.DESC.toggled() is SortOrder.ASC
