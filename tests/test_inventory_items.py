from decimal import Decimal
from uuid import uuid4

import pytest

from farm_service.app.core.item_locks import item_locks
from farm_service.app.crud.inventory import inventory_items_crud as crud
from farm_service.app.crud.inventory import inventory_transactions_crud
from farm_service.app.crud.inventory import suppliers_crud
from farm_service.app.schemas.inventory.inventory_items_schemas import (
    InventoryItemCreate,
    InventoryItemOut,
    InventoryItemRequest,
    InventoryItemUpdate,
)
from farm_service.app.schemas.inventory.inventory_transactions_schemas import InventoryTransactionCreate
from farm_service.app.schemas.inventory.suppliers_schemas import SupplierCreate
from shared.core.database import FarmSessionLocal
from shared.core.exceptions import ConflictError, NotFoundError, ValidationError


class TestCreateItem:

    def test_create_sets_initial_quantity(self, make_item):
        item = make_item(quantity="100", threshold="20")

        assert item.quantity == Decimal("100")
        assert item.initial_quantity == Decimal("100")
        assert item.version == 1
        assert item.is_deleted is False

    def test_created_low_when_below_threshold(self, make_item):
        item = make_item(quantity="15", threshold="20")
        assert InventoryItemOut.model_validate(item).is_low_stock is True

    def test_zero_quantity_is_allowed(self, make_item):
        assert make_item(quantity="0").quantity == Decimal("0")

    def test_category_and_unit_are_normalised(self, make_item):
        item = make_item(category="Feed", unit="KILOGRAMS")
        assert item.category == "feed"
        assert item.unit == "kilograms"

    @pytest.mark.parametrize("overrides, message", [
        ({"quantity": "-1"}, "quantity"),
        ({"category": "fertilizer"}, "category"),
        ({"unit": "cups"}, "unit"),
        ({"threshold": "-5"}, "low_stock_threshold"),
    ])
    def test_invalid_attributes_are_rejected(self, make_item, db, farm_id, overrides, message):
        with pytest.raises(ValidationError) as exc_info:
            make_item(**overrides)

        assert message in exc_info.value.message
        assert crud.list_items(db, farm_id, InventoryItemRequest()).total == 0

    def test_missing_quantity_is_rejected(self, db, farm_id):
        with pytest.raises(ValidationError) as exc_info:
            crud.create_item(db, farm_id, InventoryItemCreate(
                name="Layer feed", category="feed", unit="kilograms"))

        assert "quantity" in exc_info.value.message
        assert crud.list_items(db, farm_id, InventoryItemRequest()).total == 0

    def test_negative_cost_is_rejected(self, make_item):
        with pytest.raises(ValidationError):
            make_item(cost_per_unit=Decimal("-0.01"))

    def test_unknown_supplier_is_rejected(self, make_item):
        with pytest.raises(NotFoundError):
            make_item(supplier_id=uuid4())

    def test_supplier_from_same_farm_is_accepted(self, make_item, db, farm_id):
        supplier = suppliers_crud.create_supplier(db, farm_id, SupplierCreate(name="Agri Co"))
        item = make_item(supplier_id=supplier.id)
        assert item.supplier_id == supplier.id


class TestGetItem:

    def test_other_farm_cannot_see_item(self, make_item, db):
        item = make_item()
        with pytest.raises(NotFoundError):
            crud.get_item(db, uuid4(), item.id)

    def test_archived_item_is_not_found(self, make_item, db, farm_id):
        item = make_item()
        crud.delete_item(db, farm_id, item.id)

        with pytest.raises(NotFoundError):
            crud.get_item(db, farm_id, item.id)


class TestListItems:

    @pytest.fixture
    def stocked_farm(self, make_item):
        make_item(name="Layer feed", category="feed", quantity="80")
        make_item(name="Grower feed", category="feed", quantity="10")
        make_item(name="Dewormer", category="medication", unit="milliliter", quantity="500")
        make_item(name="Water trough", category="equipment", unit="quantity", quantity="3")

    def test_filter_by_category(self, db, farm_id, stocked_farm):
        result = crud.list_items(db, farm_id, InventoryItemRequest(category="feed", sort_by="name",
                                                                   sort_order="asc"))
        assert result.total == 2
        assert [i.name for i in result.items] == ["Grower feed", "Layer feed"]

    def test_filter_by_name_is_case_insensitive(self, db, farm_id, stocked_farm):
        result = crud.list_items(db, farm_id, InventoryItemRequest(name="TROUGH"))
        assert [i.name for i in result.items] == ["Water trough"]

    def test_sort_by_quantity_desc(self, db, farm_id, stocked_farm):
        result = crud.list_items(db, farm_id, InventoryItemRequest(sort_by="quantity", sort_order="desc"))
        assert [i.quantity for i in result.items] == [500.0, 80.0, 10.0, 3.0]

    def test_pagination(self, db, farm_id, stocked_farm):
        params = InventoryItemRequest(page=2, page_size=3, sort_by="name", sort_order="asc")
        result = crud.list_items(db, farm_id, params)

        assert result.total == 4
        assert result.page == 2
        assert [i.name for i in result.items] == ["Water trough"]

    def test_archived_items_are_hidden(self, db, farm_id, make_item):
        item = make_item(name="Old hay")
        crud.delete_item(db, farm_id, item.id)
        assert crud.list_items(db, farm_id, InventoryItemRequest()).total == 0

    def test_unknown_sort_column_is_rejected(self, db, farm_id, stocked_farm):
        with pytest.raises(ValidationError):
            crud.list_items(db, farm_id, InventoryItemRequest(sort_by="cost_per_unit"))

    def test_page_size_is_clamped(self):
        params = InventoryItemRequest(page=0, page_size=10_000)
        assert params.page == 1
        assert params.page_size == 200


class TestUpdateItemMetadata:

    def test_updates_metadata_only(self, make_item, db, farm_id):
        item = make_item(threshold="20")
        updated = crud.update_item_metadata(
            db, farm_id, item.id,
            InventoryItemUpdate(name="Premium layer feed", low_stock_threshold=Decimal("30")),
        )

        assert updated.name == "Premium layer feed"
        assert updated.low_stock_threshold == Decimal("30")
        assert updated.quantity == Decimal("100")

    def test_quantity_key_is_rejected(self, make_item, db, farm_id):
        item = make_item()
        with pytest.raises(ValidationError):
            crud.update_item_metadata(db, farm_id, item.id, InventoryItemUpdate(quantity=Decimal("5")))

        assert crud.get_item(db, farm_id, item.id).quantity == Decimal("100")

    def test_unchanged_quantity_is_accepted(self, make_item, db, farm_id):
        item = make_item(quantity="100")
        updated = crud.update_item_metadata(
            db, farm_id, item.id,
            InventoryItemUpdate(name="Layer feed v2", quantity=Decimal("100.000")),
        )

        assert updated.name == "Layer feed v2"
        assert updated.quantity == Decimal("100")

    def test_null_quantity_is_rejected(self, make_item, db, farm_id):
        item = make_item()
        with pytest.raises(ValidationError):
            crud.update_item_metadata(db, farm_id, item.id, InventoryItemUpdate(quantity=None))

    def test_invalid_category_is_rejected(self, make_item, db, farm_id):
        item = make_item()
        with pytest.raises(ValidationError):
            crud.update_item_metadata(db, farm_id, item.id, InventoryItemUpdate(category="toys"))

    def test_unit_change_blocked_after_transactions(self, make_item, apply, db, farm_id):
        item = make_item()
        apply(item, "usage", 1)

        with pytest.raises(ValidationError):
            crud.update_item_metadata(db, farm_id, item.id, InventoryItemUpdate(unit="tonnes"))

    def test_unit_change_allowed_before_transactions(self, make_item, db, farm_id):
        item = make_item()
        updated = crud.update_item_metadata(db, farm_id, item.id, InventoryItemUpdate(unit="tonnes"))
        assert updated.unit == "tonnes"

    def test_conflict_while_write_in_flight(self, make_item, db, farm_id):
        item = make_item()
        with item_locks.hold(item.id):
            with pytest.raises(ConflictError):
                crud.update_item_metadata(db, farm_id, item.id, InventoryItemUpdate(notes="x"))

        assert crud.get_item(db, farm_id, item.id).notes is None

    def test_update_sees_writes_from_another_session(self, make_item, db, farm_id):
        item = make_item(quantity="100")
        other = FarmSessionLocal()
        try:
            inventory_transactions_crud.apply_transaction(
                other, farm_id, item.id,
                InventoryTransactionCreate(transaction_type="usage", quantity=Decimal("10")),
            )
        finally:
            other.close()

        # db still holds the item as loaded before the usage
        updated = crud.update_item_metadata(
            db, farm_id, item.id,
            InventoryItemUpdate(notes="Recounted", quantity=Decimal("90")),
        )

        assert updated.notes == "Recounted"
        assert updated.quantity == Decimal("90")
        assert updated.version == 3


class TestDeleteItem:

    def test_archive_keeps_transactions(self, make_item, apply, db, farm_id):
        item = make_item()
        apply(item, "usage", 10)
        crud.delete_item(db, farm_id, item.id)

        assert crud.item_has_transactions(db, item.id) is True

    def test_delete_twice_is_not_found(self, make_item, db, farm_id):
        item = make_item()
        crud.delete_item(db, farm_id, item.id)
        with pytest.raises(NotFoundError):
            crud.delete_item(db, farm_id, item.id)
