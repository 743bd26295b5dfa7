"""In-memory word catalog and its tag queries."""

from __future__ import annotations

from typing import AbstractSet, Iterable, Iterator, List, Set

from .models import Entry


class CatalogError(RuntimeError):
    """Raised when a catalog operation cannot be carried out."""


class EntryIndexError(CatalogError, IndexError):
    """Raised when a position does not address an entry in the catalog."""


class EntryNotFoundError(CatalogError, KeyError):
    """Raised when no entry carries the requested identifier."""


class WordCatalog:
    """Ordered collection of entries for a single session.

    Insertion order is display order. The catalog only changes through
    :meth:`add_entry` and the positional removals, and nothing is persisted.
    """

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        self._entries: List[Entry] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def add_entry(self, entry: Entry) -> None:
        self._entries.append(entry)

    def remove_entry(self, position: int) -> Entry:
        self._check_position(position)
        return self._entries.pop(position)

    def index_of(self, entry_id: str) -> int:
        for position, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return position
        raise EntryNotFoundError(f"Entry with id {entry_id} not found")

    def get(self, entry_id: str) -> Entry:
        return self._entries[self.index_of(entry_id)]

    def all_tags(self) -> Set[str]:
        """Return every tag in use. The result carries no ordering."""

        return {tag for entry in self._entries for tag in entry.tags}

    def filtered_entries(self, selected_tags: AbstractSet[str] = frozenset()) -> List[Entry]:
        """Return entries tagged with any of ``selected_tags``, in catalog order.

        An empty selection matches every entry, untagged ones included.
        """

        if not selected_tags:
            return list(self._entries)
        return [entry for entry in self._entries if not selected_tags.isdisjoint(entry.tags)]

    def _check_position(self, position: int) -> None:
        if not 0 <= position < len(self._entries):
            raise EntryIndexError(
                f"Position {position} is out of range for a catalog of {len(self._entries)} entries"
            )


def toggle_tag(selected: AbstractSet[str], tag: str) -> Set[str]:
    """Return a copy of ``selected`` with ``tag`` flipped in or out."""

    updated = set(selected)
    if tag in updated:
        updated.remove(tag)
    else:
        updated.add(tag)
    return updated
