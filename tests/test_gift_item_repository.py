"""Tests for gift item persistence."""

import sqlite3

import pytest

from gift_tracker.models import GiftItemCreate, GiftItemUpdate, GiftStatus, RecipientCreate


class TestGiftItemCreate:
    """Tests for creating gift items."""

    def test_create_with_defaults(self, gift_items, alice):
        item = gift_items.create(GiftItemCreate(recipient_id=alice.id, name="Scarf"))

        assert item.recipient_id == alice.id
        assert item.priority == 1
        assert item.status == GiftStatus.NEEDED
        assert item.target_price is None
        assert item.current_best_price is None

    def test_create_joins_recipient_name(self, novel):
        assert novel.recipient_name == "Alice"
        assert novel.target_price == 25

    def test_create_for_missing_recipient_fails_on_foreign_key(self, gift_items):
        with pytest.raises(sqlite3.IntegrityError):
            gift_items.create(GiftItemCreate(recipient_id=999, name="Orphan"))

        assert gift_items.list_all() == []


class TestGiftItemRead:
    """Tests for listing and fetching gift items."""

    def test_list_newest_first(self, gift_items, alice):
        first = gift_items.create(GiftItemCreate(recipient_id=alice.id, name="First"))
        second = gift_items.create(GiftItemCreate(recipient_id=alice.id, name="Second"))

        ids = [item.id for item in gift_items.list_all()]
        assert ids == [second.id, first.id]

    def test_list_filtered_by_recipient(self, gift_items, recipients, alice):
        bob = recipients.create(RecipientCreate(name="Bob"))
        gift_items.create(GiftItemCreate(recipient_id=alice.id, name="Scarf"))
        gift_items.create(GiftItemCreate(recipient_id=bob.id, name="Mug"))

        items = gift_items.list_all(recipient_id=bob.id)
        assert [item.name for item in items] == ["Mug"]
        assert items[0].recipient_name == "Bob"

    def test_filtered_list_ordered_by_priority_then_newest(self, gift_items, alice):
        low = gift_items.create(GiftItemCreate(recipient_id=alice.id, name="Low", priority=1))
        high_old = gift_items.create(
            GiftItemCreate(recipient_id=alice.id, name="High old", priority=5)
        )
        high_new = gift_items.create(
            GiftItemCreate(recipient_id=alice.id, name="High new", priority=5)
        )
        mid = gift_items.create(GiftItemCreate(recipient_id=alice.id, name="Mid", priority=3))

        ids = [item.id for item in gift_items.list_all(recipient_id=alice.id)]
        assert ids == [high_new.id, high_old.id, mid.id, low.id]

    def test_get_missing_returns_none(self, gift_items):
        assert gift_items.get(999) is None


class TestGiftItemUpdate:
    """Tests for partial updates."""

    def test_update_merges_supplied_fields(self, gift_items, novel):
        updated = gift_items.update(novel.id, GiftItemUpdate(current_best_price=19.5))

        assert updated.current_best_price == 19.5
        assert updated.target_price == 25
        assert updated.name == "Novel"
        assert updated.status == GiftStatus.NEEDED

    def test_update_status_and_priority(self, gift_items, novel):
        updated = gift_items.update(
            novel.id, GiftItemUpdate(status=GiftStatus.RESEARCHING, priority=4)
        )
        assert updated.status == GiftStatus.RESEARCHING
        assert updated.priority == 4

    def test_update_writes_zero_price(self, gift_items, novel):
        updated = gift_items.update(novel.id, GiftItemUpdate(target_price=0))
        assert updated.target_price == 0

    def test_update_moves_to_other_recipient(self, gift_items, recipients, novel):
        bob = recipients.create(RecipientCreate(name="Bob"))
        updated = gift_items.update(novel.id, GiftItemUpdate(recipient_id=bob.id))

        assert updated.recipient_id == bob.id
        assert updated.recipient_name == "Bob"

    def test_update_missing_returns_none(self, gift_items):
        assert gift_items.update(999, GiftItemUpdate(name="x")) is None


class TestGiftItemStatus:
    """Tests for the manual status override."""

    def test_set_status(self, gift_items, novel):
        item = gift_items.set_status(novel.id, GiftStatus.READY_TO_BUY)
        assert item.status == GiftStatus.READY_TO_BUY

    def test_set_status_accepts_string(self, gift_items, novel):
        item = gift_items.set_status(novel.id, "researching")
        assert item.status == GiftStatus.RESEARCHING

    def test_set_status_missing_returns_none(self, gift_items):
        assert gift_items.set_status(999, GiftStatus.NEEDED) is None

    def test_set_status_rejects_unknown_value(self, gift_items, novel):
        with pytest.raises(ValueError):
            gift_items.set_status(novel.id, "lost")


class TestGiftItemDelete:
    """Tests for deleting gift items."""

    def test_delete_existing(self, gift_items, novel):
        assert gift_items.delete(novel.id) is True
        assert gift_items.get(novel.id) is None

    def test_delete_missing(self, gift_items):
        assert gift_items.delete(999) is False

    def test_delete_cascades_to_purchase(self, gift_items, purchases, novel_purchase_data):
        purchase = purchases.create(novel_purchase_data)

        gift_items.delete(novel_purchase_data.item_id)

        assert purchases.get(purchase.id) is None
