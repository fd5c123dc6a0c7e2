# medal_compass/crud/collection.py
from datetime import date, datetime, time, timedelta, timezone
from sqlalchemy import func
from sqlalchemy.orm import Session
from medal_compass.models import MedalCollection

def create_collection(db: Session, user_id: str, medal_no: int) -> MedalCollection:
    collection = MedalCollection(user_id=user_id, medal_no=medal_no)
    db.add(collection)
    db.flush()
    return collection

def delete_collection(db: Session, user_id: str, medal_no: int) -> int:
    """
    獲得記録を物理削除し，削除した行数を返す（存在しなければ0）．
    """
    return (
        db.query(MedalCollection)
        .filter(MedalCollection.user_id == user_id, MedalCollection.medal_no == medal_no)
        .delete(synchronize_session="fetch")
    )

def get_user_collections(db: Session, user_id: str, collected_on: date | None = None) -> list[MedalCollection]:
    """
    ユーザーの獲得記録を新しい順に返す．collected_onを指定すると，その日（UTC）に獲得したものだけに絞る．
    """
    query = db.query(MedalCollection).filter(MedalCollection.user_id == user_id)

    if collected_on is not None:
        day_start = datetime.combine(collected_on, time.min, tzinfo=timezone.utc)
        day_end = day_start + timedelta(days=1)
        query = query.filter(
            MedalCollection.collected_at >= day_start,
            MedalCollection.collected_at < day_end,
        )

    return (
        query
        .order_by(MedalCollection.collected_at.desc(), MedalCollection.collection_id.desc())
        .all()
    )

def is_collected(db: Session, user_id: str, medal_no: int) -> bool:
    return (
        db.query(MedalCollection.collection_id)
        .filter(MedalCollection.user_id == user_id, MedalCollection.medal_no == medal_no)
        .first()
    ) is not None

def count_user_collections(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(MedalCollection.collection_id))
        .filter(MedalCollection.user_id == user_id)
        .scalar()
    ) or 0
