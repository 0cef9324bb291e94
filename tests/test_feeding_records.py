from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from farm_service.app.crud.feeding import feeding_records_crud as crud
from farm_service.app.crud.inventory import inventory_items_crud, inventory_queries_crud
from farm_service.app.models.feeding.feeding_records import FeedingRecord
from farm_service.app.schemas.feeding.feeding_records_schemas import (
    FeedingRecordCreate,
    FeedingRecordRequest,
    FeedingRecordUpdate,
)
from shared.core.exceptions import InsufficientStockError, NotFoundError, ValidationError


def _record(item=None, amount="5", unit="kilograms", **extra):
    return FeedingRecordCreate(
        inventory_item_id=item.id if item is not None else None,
        feed_type="Layer mash",
        amount=Decimal(amount),
        unit=unit,
        date=date(2024, 5, 1),
        **extra,
    )


def _record_count(db, farm_id):
    return db.query(FeedingRecord).filter(FeedingRecord.farm_id == farm_id).count()


class TestFeedingDebit:

    def test_record_debits_item_in_one_commit(self, make_item, db, farm_id):
        feed = make_item(quantity="100")

        record, transaction = crud.create_feeding_record(db, farm_id, _record(feed, "12.5"),
                                                         performed_by="test-user")

        assert transaction.transaction_type == "usage"
        assert transaction.quantity_delta == Decimal("-12.5")
        assert transaction.feeding_record_id == record.id
        assert inventory_items_crud.get_item(db, farm_id, feed.id).quantity == Decimal("87.5")
        assert inventory_queries_crud.get_ledger_summary(db, farm_id, feed.id).balanced is True

    def test_insufficient_stock_persists_nothing(self, make_item, db, farm_id):
        feed = make_item(quantity="3")

        with pytest.raises(InsufficientStockError):
            crud.create_feeding_record(db, farm_id, _record(feed, "5"))

        assert _record_count(db, farm_id) == 0
        assert inventory_items_crud.get_item(db, farm_id, feed.id).quantity == Decimal("3")
        assert inventory_queries_crud.get_ledger_summary(db, farm_id, feed.id).transaction_count == 0

    def test_unit_mismatch_persists_nothing(self, make_item, db, farm_id):
        feed = make_item(quantity="100", unit="kilograms")

        with pytest.raises(ValidationError):
            crud.create_feeding_record(db, farm_id, _record(feed, "5", unit="tonnes"))

        assert _record_count(db, farm_id) == 0

    def test_missing_item_persists_nothing(self, db, farm_id):
        with pytest.raises(NotFoundError):
            crud.create_feeding_record(db, farm_id, FeedingRecordCreate(
                inventory_item_id=uuid4(), feed_type="Hay", amount=Decimal("1"),
                unit="bales", date=date(2024, 5, 1)))

        assert _record_count(db, farm_id) == 0

    def test_record_without_item_has_no_debit(self, db, farm_id):
        record, transaction = crud.create_feeding_record(db, farm_id, _record())

        assert transaction is None
        assert record.amount == Decimal("5")

    @pytest.mark.parametrize("amount", ["0", "-1"])
    def test_amount_must_be_positive(self, db, farm_id, amount):
        with pytest.raises(ValidationError):
            crud.create_feeding_record(db, farm_id, _record(amount=amount))


class TestFeedingRecordMetadata:

    def test_update_metadata(self, make_item, db, farm_id):
        feed = make_item(quantity="100")
        record, _ = crud.create_feeding_record(db, farm_id, _record(feed))

        updated = crud.update_feeding_record(db, farm_id, record.id,
                                             FeedingRecordUpdate(notes="Morning feed", amount=Decimal("5")))

        assert updated.notes == "Morning feed"
        assert updated.amount == Decimal("5")

    def test_amount_change_is_rejected(self, make_item, db, farm_id):
        feed = make_item(quantity="100")
        record, _ = crud.create_feeding_record(db, farm_id, _record(feed))

        with pytest.raises(ValidationError):
            crud.update_feeding_record(db, farm_id, record.id, FeedingRecordUpdate(amount=Decimal("6")))

    def test_delete_keeps_the_debit(self, make_item, db, farm_id):
        feed = make_item(quantity="100")
        record, _ = crud.create_feeding_record(db, farm_id, _record(feed))
        crud.delete_feeding_record(db, farm_id, record.id)

        with pytest.raises(NotFoundError):
            crud.get_feeding_record(db, farm_id, record.id)
        assert inventory_items_crud.get_item(db, farm_id, feed.id).quantity == Decimal("95")

    def test_list_filters_by_item(self, make_item, db, farm_id):
        feed = make_item(quantity="100")
        crud.create_feeding_record(db, farm_id, _record(feed))
        crud.create_feeding_record(db, farm_id, _record())

        result = crud.get_feeding_records(db, farm_id, FeedingRecordRequest(inventory_item_id=feed.id))

        assert result.total == 1
        assert result.records[0].inventory_item_id == feed.id


class TestFeedingApi:

    def test_failed_debit_returns_insufficient_stock(self, client, farm_id, make_item):
        feed = make_item(quantity="2")

        response = client.post(f"/api/farms/{farm_id}/feeding-records", json={
            "inventory_item_id": str(feed.id),
            "feed_type": "Layer mash",
            "amount": 3,
            "unit": "kilograms",
            "date": "2024-05-01T00:00:00.000Z",
        })

        assert response.status_code == 400
        assert response.json()["data"]["available"] == 2.0

    def test_create_returns_record_and_transaction(self, client, farm_id, make_item):
        feed = make_item(quantity="10")

        response = client.post(f"/api/farms/{farm_id}/feeding-records", json={
            "inventory_item_id": str(feed.id),
            "feed_type": "Layer mash",
            "amount": 4,
            "unit": "kilograms",
            "date": "2024-05-01",
        })
        data = response.json()["data"]

        assert response.status_code == 200
        assert data["record"]["performed_by"] == "test-user"
        assert data["transaction"]["feeding_record_id"] == data["record"]["id"]
        assert data["transaction"]["quantity_after"] == 6
