# medal_compass/crud/medal.py
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session
from medal_compass.models import Medal
from medal_compass.utils.geo import BoundingBox

def create_medal(db: Session, user_id: str, latitude: float, longitude: float) -> Medal:
    medal = Medal(user_id=user_id, latitude=latitude, longitude=longitude, is_deleted=False)
    db.add(medal)
    db.flush() # ここでmedal_noが採番される．
    return medal

def get_active_medal(db: Session, medal_no: int) -> Medal | None:
    return (
        db.query(Medal)
        .filter(Medal.medal_no == medal_no, Medal.is_deleted.is_(False))
        .first()
    )

def get_medals_in_bounding_box(db: Session, box: BoundingBox, limit: int = 1000) -> list[Medal]:
    """
    矩形範囲内にある有効な（論理削除されていない）メダルを返す．
    距離による絞り込みはしないので，矩形の角付近には半径の外側のメダルも含まれる．
    """
    return (
        db.query(Medal)
        .filter(
            Medal.is_deleted.is_(False), # 削除済みメダルは除外
            Medal.latitude >= box.min_lat,
            Medal.latitude <= box.max_lat,
            Medal.longitude >= box.min_lon,
            Medal.longitude <= box.max_lon,
        )
        .order_by(Medal.medal_no)
        .limit(limit)
        .all()
    )

def get_user_medals(db: Session, user_id: str) -> list[Medal]:
    return (
        db.query(Medal)
        .filter(Medal.user_id == user_id, Medal.is_deleted.is_(False))
        .order_by(Medal.created_at.desc(), Medal.medal_no.desc())
        .all()
    )

def count_user_medals(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(Medal.medal_no))
        .filter(Medal.user_id == user_id, Medal.is_deleted.is_(False))
        .scalar()
    ) or 0

def get_owned_medal_nos(db: Session, user_id: str) -> list[int]:
    """
    ユーザーが登録した全メダルの番号を返す．通報受信数の集計に使うため，無効化済みも含める．
    """
    return [row.medal_no for row in db.query(Medal.medal_no).filter(Medal.user_id == user_id).all()]

def delete_medal(db: Session, medal_no: int) -> int:
    """
    物理削除．通報・獲得の行は外部キーのON DELETE CASCADEで一緒に消える．
    """
    return (
        db.query(Medal)
        .filter(Medal.medal_no == medal_no)
        .delete(synchronize_session="fetch")
    )

def invalidate_medal(db: Session, medal_no: int, now: datetime) -> int:
    """
    メダルを論理削除する．既に無効化済みの行は対象外なので，最初のdeleted_atが保たれる．
    """
    return (
        db.query(Medal)
        .filter(Medal.medal_no == medal_no, Medal.is_deleted.is_(False))
        .update({"is_deleted": True, "deleted_at": now, "updated_at": now}, synchronize_session="fetch")
    )

def invalidate_user_medals(db: Session, user_id: str, now: datetime) -> int:
    """
    ユーザーの有効な全メダルを1回のUPDATEで論理削除する（BAN）．
    """
    return (
        db.query(Medal)
        .filter(Medal.user_id == user_id, Medal.is_deleted.is_(False))
        .update({"is_deleted": True, "deleted_at": now, "updated_at": now}, synchronize_session="fetch")
    )
