# medal_compass/services/collection_service.py
# 冒険モードでのメダル獲得．獲得キャンセルは物理削除（メダル本体の論理削除とは別の方針）．
from datetime import date
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from medal_compass.core.exceptions import DuplicateCollectionError, MedalNotFoundError
from medal_compass.crud import collection as crud_collection
from medal_compass.crud import medal as crud_medal
from medal_compass.db.errors import is_unique_violation, persistence_error
from medal_compass.db.session import run_with_retry
from medal_compass.models import MedalCollection
from medal_compass.utils.logger import logger


def collect_medal(db: Session, user_id: str, medal_no: int) -> MedalCollection:
    def _collect() -> MedalCollection:
        if crud_medal.get_active_medal(db, medal_no) is None:
            raise MedalNotFoundError()
        try:
            collection = crud_collection.create_collection(db, user_id=user_id, medal_no=medal_no)
        except IntegrityError as e:
            db.rollback()
            if is_unique_violation(e):
                raise DuplicateCollectionError() from e
            raise
        db.commit()
        db.refresh(collection)
        return collection

    try:
        collection = run_with_retry(db, _collect, label="collect_medal")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Collect medal", "獲得に失敗しました。再度お試しください。", e) from e

    logger.info(f"Medal collected: medal_no={medal_no} by user_id={user_id}")
    return collection


def uncollect_medal(db: Session, user_id: str, medal_no: int) -> None:
    """
    獲得を取り消す．獲得記録が存在しない場合も成功とみなす（既に取り消し済みと同じ状態のため）．
    """
    def _uncollect() -> int:
        deleted = crud_collection.delete_collection(db, user_id=user_id, medal_no=medal_no)
        db.commit()
        return deleted

    try:
        deleted = run_with_retry(db, _uncollect, label="uncollect_medal")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Uncollect medal", "獲得キャンセルに失敗しました。再度お試しください。", e) from e

    if deleted:
        logger.info(f"Medal uncollected: medal_no={medal_no} by user_id={user_id}")
    else:
        logger.debug(f"Uncollect skipped (not collected): medal_no={medal_no} user_id={user_id}")


def get_user_collections(db: Session, user_id: str, collected_on: date | None = None) -> list[MedalCollection]:
    """
    獲得記録を新しい順に返す．並び替えはクエリ側で行う．
    """
    try:
        return run_with_retry(
            db, lambda: crud_collection.get_user_collections(db, user_id, collected_on=collected_on),
            label="get_user_collections"
        )
    except SQLAlchemyError as e:
        raise persistence_error(db, "Get user collections", "獲得メダル一覧の取得に失敗しました", e) from e


def is_medal_collected(db: Session, user_id: str, medal_no: int) -> bool:
    try:
        return run_with_retry(
            db, lambda: crud_collection.is_collected(db, user_id, medal_no), label="is_medal_collected"
        )
    except SQLAlchemyError as e:
        raise persistence_error(db, "Check medal collected", "獲得状態の確認に失敗しました", e) from e
