# tests/test_catalog_store.py

"""Tests for CatalogStore commands and derived-view consistency."""

import unittest
from datetime import datetime, timezone

from catalog_state.errors import InvalidCommandError
from catalog_state.filters.catalog_filter import CatalogFilter
from catalog_state.models.criteria import FilterCriteria, SortKey
from catalog_state.models.item import Item
from catalog_state.services.catalog_store import CatalogStore


def _make_item(item_id: int, price: float = 10.0, **extra: object) -> Item:
    """Create an Item with sensible defaults."""
    return Item(
        id=item_id,
        name=str(extra.pop("name", f"Item {item_id}")),
        price=price,
        category=str(extra.pop("category", "home")),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        **extra,  # type: ignore[arg-type]
    )


def _catalog(count: int = 30) -> list[Item]:
    return [_make_item(i, price=i * 10) for i in range(1, count + 1)]


class TestInitialState(unittest.TestCase):
    """A fresh store is empty."""

    def test_starts_empty(self) -> None:
        store = CatalogStore()
        self.assertEqual(store.canonical_count, 0)
        self.assertEqual(store.view.total_items, 0)
        self.assertEqual(store.criteria, FilterCriteria())
        self.assertEqual(store.cursor.page, 1)
        self.assertEqual(store.recommendations, ())

    def test_custom_page_size(self) -> None:
        self.assertEqual(CatalogStore(page_size=6).cursor.page_size, 6)


class TestReplaceCanonicalItems(unittest.TestCase):
    """replace_canonical_items behaviour."""

    def setUp(self) -> None:
        self.store = CatalogStore()

    def test_view_recomputed_with_current_criteria(self) -> None:
        self.store.update_criteria(min_price=200)
        self.store.replace_canonical_items(_catalog())
        self.assertEqual(self.store.view.total_items, 11)
        self.assertEqual(self.store.canonical_count, 30)

    def test_resets_page(self) -> None:
        self.store.replace_canonical_items(_catalog())
        self.store.set_pagination(page=3)
        self.store.replace_canonical_items(_catalog(10))
        self.assertEqual(self.store.cursor.page, 1)

    def test_empty_replacement_is_not_an_error(self) -> None:
        self.store.replace_canonical_items(_catalog())
        self.store.replace_canonical_items([])
        self.assertEqual(self.store.canonical_count, 0)
        self.assertEqual(self.store.view.total_items, 0)

    def test_duplicate_ids_rejected_without_change(self) -> None:
        self.store.replace_canonical_items(_catalog(3))
        with self.assertRaises(InvalidCommandError):
            self.store.replace_canonical_items([_make_item(1), _make_item(1)])
        self.assertEqual(self.store.canonical_count, 3)

    def test_input_list_mutation_does_not_leak(self) -> None:
        items = _catalog(3)
        self.store.replace_canonical_items(items)
        items.append(_make_item(99))
        self.assertEqual(self.store.canonical_count, 3)


class TestUpdateCriteria(unittest.TestCase):
    """update_criteria / reset_criteria behaviour."""

    def setUp(self) -> None:
        self.store = CatalogStore(page_size=12)
        self.store.replace_canonical_items(_catalog())

    def test_update_resets_page(self) -> None:
        self.store.set_pagination(page=3)
        self.store.update_criteria(sort_key="price-desc")
        self.assertEqual(self.store.cursor.page, 1)

    def test_reset_resets_page(self) -> None:
        self.store.set_pagination(page=2)
        self.store.reset_criteria()
        self.assertEqual(self.store.cursor.page, 1)

    def test_update_keeps_page_size(self) -> None:
        self.store.set_pagination(page_size=5)
        self.store.update_criteria(min_price=10)
        self.assertEqual(self.store.cursor.page_size, 5)

    def test_partial_update_merges(self) -> None:
        self.store.update_criteria(min_price=100)
        self.store.update_criteria(max_price=150)
        self.assertEqual(
            [i.id for i in self.store.view.items], [10, 11, 12, 13, 14, 15]
        )

    def test_none_clears_filter(self) -> None:
        self.store.update_criteria(min_price=100)
        self.store.update_criteria(min_price=None)
        self.assertEqual(self.store.view.total_items, 30)

    def test_reset_clears_everything(self) -> None:
        self.store.update_criteria(
            min_price=100, search_term="item 2", sort_key="price-desc"
        )
        self.store.reset_criteria()
        self.assertEqual(self.store.criteria, FilterCriteria())
        self.assertEqual(self.store.view.ids, tuple(range(1, 31)))

    def test_rapid_repeated_updates_converge(self) -> None:
        """Each call recomputes from scratch; only the last value counts."""
        for term in ["i", "it", "ite", "item", "item 1", "item 2", "item 2"]:
            self.store.update_criteria(search_term=term)
        expected = CatalogFilter.apply(
            self.store.items, FilterCriteria(search_term="item 2")
        )
        self.assertEqual(self.store.view, expected)

    def test_invalid_update_leaves_state_untouched(self) -> None:
        self.store.update_criteria(category="home")
        self.store.set_pagination(page=2)
        view_before = self.store.view
        with self.assertRaises(InvalidCommandError):
            self.store.update_criteria(sort_key="bogus")
        self.assertEqual(self.store.criteria.category, "home")
        self.assertEqual(self.store.cursor.page, 2)
        self.assertIs(self.store.view, view_before)

    def test_empty_result_is_valid(self) -> None:
        self.store.update_criteria(search_term="nothing matches this")
        self.assertEqual(self.store.view.total_items, 0)


class TestRecompute(unittest.TestCase):
    """recompute() is a pure re-derivation."""

    def test_recompute_twice_identical(self) -> None:
        store = CatalogStore()
        store.replace_canonical_items(_catalog())
        store.update_criteria(sort_key=SortKey.PRICE_DESC, min_price=55)
        first = store.recompute()
        second = store.recompute()
        self.assertEqual(first.ids, second.ids)

    def test_view_matches_pure_function(self) -> None:
        store = CatalogStore()
        store.replace_canonical_items(_catalog())
        store.update_criteria(max_price=90, sort_key="price-desc")
        self.assertEqual(
            store.view, CatalogFilter.apply(store.items, store.criteria)
        )


class TestSetPagination(unittest.TestCase):
    """set_pagination merges without resetting the page."""

    def setUp(self) -> None:
        self.store = CatalogStore(page_size=12)

    def test_page_only(self) -> None:
        self.store.set_pagination(page=4)
        self.assertEqual(self.store.cursor.page, 4)
        self.assertEqual(self.store.cursor.page_size, 12)

    def test_page_size_only_keeps_page(self) -> None:
        self.store.set_pagination(page=3)
        self.store.set_pagination(page_size=24)
        self.assertEqual(self.store.cursor.page, 3)
        self.assertEqual(self.store.cursor.page_size, 24)

    def test_non_positive_rejected(self) -> None:
        for kwargs in ({"page": 0}, {"page_size": 0}, {"page": -1}):
            with self.subTest(kwargs=kwargs), self.assertRaises(InvalidCommandError):
                self.store.set_pagination(**kwargs)
        self.assertEqual(self.store.cursor.page, 1)

    def test_non_int_rejected(self) -> None:
        with self.assertRaises(InvalidCommandError):
            self.store.set_pagination(page=1.5)  # type: ignore[arg-type]


class TestRecommendations(unittest.TestCase):
    """Recommendations are an unfiltered snapshot."""

    def test_not_filtered_by_criteria(self) -> None:
        store = CatalogStore()
        store.update_criteria(min_price=1000)
        store.set_recommendations([_make_item(1, 5), _make_item(2, 6)])
        self.assertEqual([i.id for i in store.recommendations], [1, 2])

    def test_does_not_touch_catalog(self) -> None:
        store = CatalogStore()
        store.replace_canonical_items(_catalog(3))
        store.set_recommendations([_make_item(50)])
        self.assertEqual(store.canonical_count, 3)
        self.assertEqual(store.view.total_items, 3)


if __name__ == "__main__":
    unittest.main()
