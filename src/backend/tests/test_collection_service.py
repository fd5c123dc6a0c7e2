"""Tests for the exploration-mode collection ledger."""

from datetime import date, datetime, timezone

import pytest

from medal_compass.core.exceptions import DuplicateCollectionError, MedalNotFoundError
from medal_compass.models import Medal, MedalCollection
from medal_compass.services import collection_service


def test_collect_then_uncollect(db, make_medal):
    medal = make_medal(user_id="alice")

    collection = collection_service.collect_medal(db, "bob", medal.medal_no)
    assert collection.collection_id is not None
    assert collection.collected_at is not None
    assert collection_service.is_medal_collected(db, "bob", medal.medal_no) is True

    collection_service.uncollect_medal(db, "bob", medal.medal_no)
    assert collection_service.is_medal_collected(db, "bob", medal.medal_no) is False
    assert db.query(MedalCollection).count() == 0

    # 既に存在しない場合も例外にならない
    collection_service.uncollect_medal(db, "bob", medal.medal_no)


def test_uncollect_never_collected_medal(db):
    collection_service.uncollect_medal(db, "bob", 4242)


def test_duplicate_collection(db, make_medal):
    medal = make_medal(user_id="alice")
    collection_service.collect_medal(db, "bob", medal.medal_no)

    with pytest.raises(DuplicateCollectionError) as exc_info:
        collection_service.collect_medal(db, "bob", medal.medal_no)

    assert exc_info.value.message == "既に獲得済みです"
    assert db.query(MedalCollection).count() == 1


def test_same_medal_collected_by_different_users(db, make_medal):
    medal = make_medal(user_id="alice")
    collection_service.collect_medal(db, "bob", medal.medal_no)
    collection_service.collect_medal(db, "carol", medal.medal_no)

    assert db.query(MedalCollection).count() == 2


def test_collecting_missing_or_invalidated_medal(db, make_medal):
    with pytest.raises(MedalNotFoundError):
        collection_service.collect_medal(db, "bob", 999)

    medal = make_medal(user_id="alice")
    db.query(Medal).filter(Medal.medal_no == medal.medal_no).update({"is_deleted": True})
    db.commit()
    with pytest.raises(MedalNotFoundError):
        collection_service.collect_medal(db, "bob", medal.medal_no)


def test_collections_are_returned_newest_first(db, make_medal):
    medals = [make_medal(user_id="alice") for _ in range(3)]
    stamps = [
        datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc),
        datetime(2026, 10, 3, 9, 0, tzinfo=timezone.utc),
        datetime(2026, 10, 2, 9, 0, tzinfo=timezone.utc),
    ]
    for medal, stamp in zip(medals, stamps):
        db.add(MedalCollection(user_id="bob", medal_no=medal.medal_no, collected_at=stamp))
    db.add(MedalCollection(user_id="carol", medal_no=medals[0].medal_no, collected_at=stamps[1]))
    db.commit()

    collections = collection_service.get_user_collections(db, "bob")

    assert [c.medal_no for c in collections] == [medals[1].medal_no, medals[2].medal_no, medals[0].medal_no]


def test_collections_filtered_by_day(db, make_medal):
    medals = [make_medal(user_id="alice") for _ in range(3)]
    db.add(MedalCollection(user_id="bob", medal_no=medals[0].medal_no,
                           collected_at=datetime(2026, 10, 2, 0, 0, tzinfo=timezone.utc)))
    db.add(MedalCollection(user_id="bob", medal_no=medals[1].medal_no,
                           collected_at=datetime(2026, 10, 2, 23, 59, tzinfo=timezone.utc)))
    db.add(MedalCollection(user_id="bob", medal_no=medals[2].medal_no,
                           collected_at=datetime(2026, 10, 3, 0, 0, tzinfo=timezone.utc)))
    db.commit()

    collections = collection_service.get_user_collections(db, "bob", collected_on=date(2026, 10, 2))

    assert [c.medal_no for c in collections] == [medals[1].medal_no, medals[0].medal_no]
