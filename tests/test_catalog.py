import datetime

from lemonwords.catalog import (
    CatalogError,
    EntryIndexError,
    EntryNotFoundError,
    WordCatalog,
    toggle_tag,
)
from lemonwords.models import Entry


def _sample_catalog():
    a = Entry(title="A", tags=["fruit", "red"])
    b = Entry(title="B", tags=["fruit"])
    c = Entry(title="C", tags=[])
    return WordCatalog([a, b, c]), a, b, c


def test_unfiltered_view_returns_entries_in_insertion_order():
    catalog = WordCatalog()
    entries = [Entry(title=f"word {i}", tags=["t"] if i % 2 else []) for i in range(5)]
    for entry in entries:
        catalog.add_entry(entry)

    assert len(catalog) == 5
    assert catalog.filtered_entries(set()) == entries
    assert catalog.filtered_entries() == entries


def test_filter_by_tag_uses_any_match():
    catalog, a, b, c = _sample_catalog()

    assert catalog.filtered_entries({"red"}) == [a]
    assert catalog.filtered_entries({"fruit"}) == [a, b]
    assert catalog.filtered_entries({"red", "fruit"}) == [a, b]
    assert catalog.filtered_entries(set()) == [a, b, c]
    assert catalog.filtered_entries({"unused"}) == []


def test_filtered_entries_partition_by_intersection():
    catalog = WordCatalog(
        [
            Entry(title="x", tags=["a", "b"]),
            Entry(title="y", tags=["c"]),
            Entry(title="z", tags=["b", "b"]),
            Entry(title="w"),
        ]
    )
    selected = {"b", "d"}
    result = catalog.filtered_entries(selected)

    for entry in catalog:
        if entry in result:
            assert set(entry.tags) & selected
        else:
            assert not set(entry.tags) & selected


def test_all_tags_is_deduplicated_union():
    catalog, *_ = _sample_catalog()
    catalog.add_entry(Entry(title="D", tags=["red", "red", "green"]))

    assert catalog.all_tags() == {"fruit", "red", "green"}
    assert WordCatalog().all_tags() == set()


def test_queries_are_repeatable_without_mutation():
    catalog, *_ = _sample_catalog()

    assert catalog.all_tags() == catalog.all_tags()
    assert catalog.filtered_entries({"fruit"}) == catalog.filtered_entries({"fruit"})


def test_returned_view_does_not_alias_catalog():
    catalog, a, b, c = _sample_catalog()
    view = catalog.filtered_entries()
    view.clear()

    assert len(catalog) == 3


def test_remove_entry_keeps_relative_order():
    catalog, a, b, c = _sample_catalog()

    removed = catalog.remove_entry(1)

    assert removed is b
    assert catalog.filtered_entries() == [a, c]


def test_remove_entry_out_of_range_leaves_catalog_unchanged():
    catalog, a, b, c = _sample_catalog()

    for position in (3, 10, -1):
        try:
            catalog.remove_entry(position)
        except EntryIndexError as exc:
            assert isinstance(exc, IndexError)
            assert isinstance(exc, CatalogError)
        else:
            raise AssertionError(f"Expected EntryIndexError for position {position}")

    assert catalog.filtered_entries() == [a, b, c]


def test_lookup_by_id():
    catalog, a, b, c = _sample_catalog()

    assert catalog.index_of(c.id) == 2
    assert catalog.get(b.id) is b

    try:
        catalog.get("missing")
    except EntryNotFoundError:
        pass
    else:
        raise AssertionError("Expected EntryNotFoundError")


def test_entry_ids_are_unique_and_dates_default_to_today():
    entries = [Entry(title="same") for _ in range(50)]

    assert len({entry.id for entry in entries}) == 50
    assert entries[0].date == datetime.date.today()
    assert not entries[0].has_audio
    assert not entries[0].has_image
    assert not entries[0].has_link


def test_toggle_tag_returns_new_selection():
    selected = {"fruit"}

    assert toggle_tag(selected, "red") == {"fruit", "red"}
    assert toggle_tag(selected, "fruit") == set()
    assert selected == {"fruit"}
