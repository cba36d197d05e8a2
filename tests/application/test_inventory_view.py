"""Integration tests for the view pipeline orchestrator."""

import pytest

from invbrowser.application.edit_coordinator import EditState
from invbrowser.application.inventory_view import InventoryView, ViewSettings
from invbrowser.domain.exceptions import ConfigError, NotFoundError, TransportError
from invbrowser.domain.model.criteria import FilterCriteria, SortKey
from invbrowser.domain.model.value_objects import StockStatus
from tests.fakes import FakeProductStore, make_product


def _scenario_view():
    store = FakeProductStore([
        make_product("1", "Alpha", price=10, stock=0, category="A"),
        make_product("2", "Beta", price=20, stock=5, category="B"),
        make_product("3", "Gamma", price=5, stock=50, category="A"),
    ])
    view = InventoryView(store)
    view.reload()
    return view, store


def _big_view(count=25, per_page=9):
    products = [
        make_product(str(i), f"Item {i:02d}", price=i, stock=i % 12, category="ABC"[i % 3])
        for i in range(1, count + 1)
    ]
    store = FakeProductStore(products)
    view = InventoryView(store, ViewSettings(items_per_page=per_page))
    view.reload()
    return view, store


def _row_ids(view):
    return [row.id for row in view.render().rows]


class TestPipeline:

    def test_out_of_stock_scenario(self):
        view, _ = _scenario_view()
        view.set_criteria(FilterCriteria(show_out_of_stock=True))
        assert _row_ids(view) == ["1"]

    def test_price_sort_scenario(self):
        view, _ = _scenario_view()
        view.set_sort_key(SortKey.PRICE_ASC)
        assert _row_ids(view) == ["3", "1", "2"]

    def test_filter_then_sort(self):
        view, _ = _scenario_view()
        view.set_criteria(FilterCriteria(selected_categories={"A"}))
        view.set_sort_key(SortKey.PRICE_DESC)
        assert _row_ids(view) == ["1", "3"]

    def test_second_page_slice(self):
        view, _ = _big_view()
        view.go_to_page(2)
        page = view.render()
        assert [row.id for row in page.rows] == [str(i) for i in range(10, 19)]
        assert page.pagination.total_pages == 3
        assert page.matching_products == 25

    def test_rows_carry_stock_status(self):
        view, _ = _scenario_view()
        statuses = {row.id: row.stock_status for row in view.render().rows}
        assert statuses == {
            "1": StockStatus.OUT_OF_STOCK,
            "2": StockStatus.LOW,
            "3": StockStatus.HIGH,
        }

    def test_categories_come_from_unfiltered_collection(self):
        view, _ = _scenario_view()
        view.set_criteria(FilterCriteria(selected_categories={"B"}))
        assert view.render().categories == ["A", "B"]

    def test_reset_filters(self):
        view, _ = _scenario_view()
        view.set_criteria(FilterCriteria(show_out_of_stock=True))
        view.set_sort_key(SortKey.NAME_DESC)
        view.reset_filters()
        assert view.criteria == FilterCriteria()
        assert view.sort_key is SortKey.NONE
        assert _row_ids(view) == ["1", "2", "3"]


class TestPageState:

    def test_criteria_change_resets_page(self):
        view, _ = _big_view()
        view.go_to_page(3)
        view.set_criteria(FilterCriteria(min_price=2))
        assert view.current_page == 1
        assert view.render().pagination.current_page == 1

    def test_sort_change_resets_page(self):
        view, _ = _big_view()
        view.go_to_page(2)
        view.set_sort_key(SortKey.NAME_DESC)
        assert view.current_page == 1

    def test_paging_does_not_touch_criteria(self):
        view, _ = _big_view()
        criteria = FilterCriteria(min_price=3)
        view.set_criteria(criteria)
        view.go_to_page(2)
        assert view.criteria is criteria
        assert view.current_page == 2

    @pytest.mark.parametrize("requested, expected", [(0, 1), (-4, 1), (99, 3), (3, 3)])
    def test_out_of_range_pages_are_clamped(self, requested, expected):
        view, _ = _big_view()
        assert view.go_to_page(requested) == expected

    def test_page_clamped_when_collection_shrinks(self):
        view, store = _big_view()
        view.go_to_page(3)
        for pid in [str(i) for i in range(10, 26)]:
            store.delete(pid)
        view.reload()
        assert view.current_page == 1

    def test_empty_collection_renders_empty_page(self):
        view = InventoryView(FakeProductStore())
        view.reload()
        page = view.render()
        assert page.rows == []
        assert not page.pagination.needs_controls


class TestReload:

    def test_failed_list_yields_empty_collection_and_error(self):
        view, store = _scenario_view()
        store.fail_on["list_all"] = TransportError("offline")

        assert view.reload() is False

        assert view.products == []
        assert view.categories == []
        assert "offline" in view.render().error

    def test_successful_reload_clears_error(self):
        view, store = _scenario_view()
        store.fail_on["list_all"] = TransportError("offline")
        view.reload()
        del store.fail_on["list_all"]
        assert view.reload() is True
        assert view.error is None

    def test_snapshot_is_not_shared_with_caller(self):
        view, _ = _scenario_view()
        view.products.clear()
        assert len(view.products) == 3


class TestEditing:

    def test_edit_state_annotated_by_comparison(self):
        view, _ = _scenario_view()
        view.editor.begin_edit("2")
        flags = {row.id: row.is_editing for row in view.render().rows}
        assert flags == {"1": False, "2": True, "3": False}

    def test_begin_edit_one_then_two(self):
        view, _ = _scenario_view()
        view.editor.begin_edit("1")
        view.editor.begin_edit("2")
        assert view.editor.state is EditState.EDITING
        assert view.editor.editing_id == "2"
        assert [row.id for row in view.render().rows if row.is_editing] == ["2"]

    def test_save_reloads_collection(self):
        view, store = _scenario_view()
        view.editor.begin_edit("2")
        view.editor.update_draft_field("category", "C")

        assert view.editor.validate_and_save("2") is True

        assert store.count("list_all") == 2
        assert view.categories == ["A", "C"]
        assert not any(row.is_editing for row in view.render().rows)

    def test_reload_drops_edit_of_product_deleted_elsewhere(self):
        view, store = _scenario_view()
        view.editor.begin_edit("2")
        store.delete("2")

        assert view.reload() is True

        assert view.editor.state is EditState.VIEWING
        assert view.editor.editing_id is None

    def test_failed_reload_keeps_edit_session(self):
        view, store = _scenario_view()
        view.editor.begin_edit("2")
        store.fail_on["list_all"] = TransportError("offline")

        view.reload()

        assert view.editor.editing_id == "2"


class TestMutations:

    def test_add_product_reloads(self):
        view, store = _scenario_view()
        assert view.add_product("Delta", "7.50", "3", "D") is True
        assert len(view.products) == 4
        assert "D" in view.categories

    def test_add_invalid_product_reports_fields_without_store_call(self):
        view, store = _scenario_view()
        assert view.add_product("", "0", "1", "D") is False
        assert set(view.field_errors) == {"name", "price"}
        assert store.count("create") == 0

    def test_add_transport_failure(self):
        view, store = _scenario_view()
        store.fail_on["create"] = TransportError("503")
        assert view.add_product("Delta", "7.50", "3", "D") is False
        assert view.error == "503"
        assert len(view.products) == 3

    def test_delete_reloads(self):
        view, _ = _scenario_view()
        assert view.delete_product("2") is True
        assert [p.id for p in view.products] == ["1", "3"]
        assert view.categories == ["A"]

    def test_delete_of_edited_product_ends_edit(self):
        view, _ = _scenario_view()
        view.editor.begin_edit("2")
        view.delete_product("2")
        assert view.editor.state is EditState.VIEWING

    def test_delete_of_vanished_product(self):
        view, store = _scenario_view()
        view.editor.begin_edit("2")
        store.fail_on["delete"] = NotFoundError("gone")

        assert view.delete_product("2") is False

        assert view.error == "Product '2' no longer exists."
        assert view.editor.state is EditState.VIEWING
        assert store.count("list_all") == 2

    def test_delete_transport_failure_keeps_state(self):
        view, store = _scenario_view()
        view.editor.begin_edit("2")
        store.fail_on["delete"] = TransportError("timeout")

        assert view.delete_product("2") is False
        assert view.editor.editing_id == "2"
        assert len(view.products) == 3

    def test_bulk_import_reloads(self, tmp_path):
        view, store = _scenario_view()
        sheet = tmp_path / "stock.csv"
        sheet.write_text("name,price,stock,category\n", encoding="utf-8")

        assert view.bulk_import(sheet) is True
        assert store.imported == [sheet]
        assert store.count("list_all") == 2

    def test_bulk_import_without_file(self):
        view, store = _scenario_view()
        assert view.bulk_import(None) is False
        assert view.error == "Please select a file."
        assert store.count("bulk_import") == 0


class TestViewSettings:

    @pytest.mark.parametrize("field", ["items_per_page", "window_size", "low_stock_threshold"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ConfigError, match=field):
            ViewSettings(**{field: 0})

    def test_low_stock_threshold_is_configurable(self):
        store = FakeProductStore([make_product("1", stock=12), make_product("2", stock=3)])
        view = InventoryView(store, ViewSettings(low_stock_threshold=15))
        view.reload()
        view.set_criteria(FilterCriteria(show_low_stock=True))
        assert _row_ids(view) == ["1", "2"]
