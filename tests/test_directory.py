from conftest import make_record
from roadquality.directory import (
    DirectoryEntry,
    SearchField,
    SearchSpec,
    SortDirection,
    SortKey,
    SortSpec,
    build_directory,
    directory_view,
    filter_entries,
    sort_entries,
)


def entry(user, road, date="N/A"):
    return DirectoryEntry(date=date, road_name=road, user_name=user)


def test_duplicates_keep_first_seen_date():
    records = [
        make_record("u1", "r1", date="2024-05-01"),
        make_record("u1", "r1", date="2024-01-01"),
        make_record("u1", "r2"),
    ]
    entries = build_directory(records, {"u1"})

    assert len(entries) == 2
    assert entries[0].road_key == "u1-r1"
    assert entries[0].date == "2024-05-01"
    assert entries[1].date == "N/A"


def test_directory_only_lists_selected_users(records):
    entries = build_directory(records, {"u2"})
    assert [e.road_key for e in entries] == ["u2-Main", "u2-Pine"]
    assert build_directory(records, set()) == []


def test_sort_by_road_name_then_toggle_reverses():
    entries = [entry("u1", "b"), entry("u1", "c"), entry("u1", "a")]
    spec = SortSpec(SortKey.ROAD_NAME)

    ascending = sort_entries(entries, spec)
    descending = sort_entries(entries, spec.toggled(SortKey.ROAD_NAME))

    assert [e.road_name for e in ascending] == ["a", "b", "c"]
    assert descending == list(reversed(ascending))


def test_new_sort_key_resets_to_ascending():
    spec = SortSpec(SortKey.ROAD_NAME).toggled(SortKey.ROAD_NAME)
    assert spec.direction is SortDirection.DESC

    spec = spec.toggled(SortKey.USER_NAME)
    assert spec == SortSpec(SortKey.USER_NAME, SortDirection.ASC)


def test_sort_spec_accepts_strings():
    assert SortSpec("roadName", "desc") == SortSpec(SortKey.ROAD_NAME, SortDirection.DESC)


def test_sort_by_date_uses_calendar_time():
    entries = [
        entry("u1", "a", "2024-02-10"),
        entry("u1", "b", "N/A"),
        entry("u1", "c", "2023-12-01T08:00:00"),
        entry("u1", "d", "2024-02-09"),
    ]
    ascending = sort_entries(entries, SortSpec(SortKey.DATE))
    assert [e.road_name for e in ascending] == ["c", "d", "a", "b"]

    descending = sort_entries(entries, SortSpec(SortKey.DATE, SortDirection.DESC))
    assert [e.road_name for e in descending] == ["b", "a", "d", "c"]


def test_sort_is_stable_for_equal_keys():
    entries = [entry("u2", "x"), entry("u1", "x"), entry("u3", "x")]
    for direction in (SortDirection.ASC, SortDirection.DESC):
        result = sort_entries(entries, SortSpec(SortKey.ROAD_NAME, direction))
        assert [e.user_name for e in result] == ["u2", "u1", "u3"]


def test_no_sort_keeps_first_seen_order():
    entries = [entry("u1", "b"), entry("u1", "a")]
    assert sort_entries(entries, None) == entries


def test_search_by_name_is_case_insensitive_substring():
    entries = [entry("u1", "r"), entry("u2", "r"), entry("U1x", "r")]
    result = filter_entries(entries, SearchSpec("name", "u1"))
    assert [e.user_name for e in result] == ["u1", "U1x"]


def test_search_by_road_name():
    entries = [entry("u1", "Main Street"), entry("u1", "Oak"), entry("u2", "main")]
    result = filter_entries(entries, SearchSpec(SearchField.ROAD_NAME, "MAIN"))
    assert [e.road_key for e in result] == ["u1-Main Street", "u2-main"]


def test_search_field_aliases():
    assert SearchSpec("userName", "x").field is SearchField.NAME
    assert SearchSpec("road_name", "x").field is SearchField.ROAD_NAME


def test_empty_query_keeps_everything():
    entries = [entry("u1", "a"), entry("u2", "b")]
    assert filter_entries(entries, SearchSpec("name", "")) == entries


def test_view_sorts_before_filtering(records):
    view = directory_view(
        records,
        {"u1", "u2"},
        SortSpec(SortKey.DATE, SortDirection.DESC),
        SearchSpec(SearchField.ROAD_NAME, "main"),
    )
    assert [e.road_key for e in view] == ["u1-Main", "u2-Main"]


def test_view_is_repeatable(records):
    args = (records, {"u1", "u2"}, SortSpec(SortKey.USER_NAME), SearchSpec("name", "u"))
    assert directory_view(*args) == directory_view(*args)


def test_entry_to_dict():
    assert entry("u1", "r1", "2024-01-01").to_dict() == {
        "date": "2024-01-01",
        "road_name": "r1",
        "user_name": "u1",
        "road_key": "u1-r1",
    }
