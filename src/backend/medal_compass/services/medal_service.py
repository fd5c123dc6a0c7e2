# medal_compass/services/medal_service.py
# メダルの登録・近傍検索・削除．DBの例外はここでドメイン例外（日本語メッセージ付き）に変換する．
from dataclasses import dataclass
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from medal_compass.core.config import get_settings
from medal_compass.core.exceptions import LowAccuracyError, MedalNotFoundError, PermissionDeniedError
from medal_compass.crud import collection as crud_collection
from medal_compass.crud import medal as crud_medal
from medal_compass.db.errors import persistence_error
from medal_compass.db.session import run_with_retry
from medal_compass.models import Medal
from medal_compass.utils.geo import bounding_box, is_accuracy_good_enough
from medal_compass.utils.logger import logger


@dataclass
class UserSummary:
    registered_count: int
    collected_count: int


def ensure_accuracy(accuracy: float | None, confirmed: bool, threshold: float | None = None) -> None:
    """
    測位精度が閾値より悪い（または不明な）場合，ユーザーが「このまま続ける」を選んでいなければLowAccuracyErrorを送出する．
    """
    threshold = threshold or get_settings().GPS_ACCURACY_THRESHOLD_M
    if is_accuracy_good_enough(accuracy, threshold) or confirmed:
        return
    raise LowAccuracyError(accuracy=accuracy, threshold=threshold)


def register_medal(db: Session, user_id: str, latitude: float, longitude: float) -> Medal:
    def _register() -> Medal:
        medal = crud_medal.create_medal(db, user_id=user_id, latitude=latitude, longitude=longitude)
        db.commit()
        db.refresh(medal)
        return medal

    try:
        medal = run_with_retry(db, _register, label="register_medal")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Register medal", "登録に失敗しました。再度お試しください。", e) from e

    logger.info(f"Medal registered: medal_no={medal.medal_no} user_id={user_id} ({latitude:.6f}, {longitude:.6f})")
    return medal


def get_medals_within_radius(
        db: Session,
        center_lat: float,
        center_lon: float,
        radius_km: float | None = None,
        limit: int | None = None) -> list[Medal]:
    """
    指定座標から半径radius_km以内のメダルを取得する（マップ表示用）．

    矩形範囲による前段フィルタのみで，距離による後段フィルタは行わない．
    そのため矩形の角付近では半径の外側のメダルも返る（意図した近似）．
    厳密な円が必要な呼び出し側は utils.geo.distance で絞り込むこと．
    """
    settings = get_settings()
    radius_km = radius_km or settings.DEFAULT_SEARCH_RADIUS_KM
    limit = limit or settings.MAX_MEDALS_PER_QUERY

    box = bounding_box(center_lat, center_lon, radius_km * 1000)

    try:
        medals = run_with_retry(
            db, lambda: crud_medal.get_medals_in_bounding_box(db, box, limit=limit),
            label="get_medals_within_radius"
        )
    except SQLAlchemyError as e:
        raise persistence_error(db, "Get medals within radius", "メダルの取得に失敗しました", e) from e

    logger.debug(f"{len(medals)} medals within {radius_km}km of ({center_lat:.6f}, {center_lon:.6f})")
    return medals


def get_user_medals(db: Session, user_id: str) -> list[Medal]:
    try:
        return run_with_retry(db, lambda: crud_medal.get_user_medals(db, user_id), label="get_user_medals")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Get user medals", "メダル一覧の取得に失敗しました", e) from e


def get_medal(db: Session, medal_no: int) -> Medal:
    try:
        medal = run_with_retry(db, lambda: crud_medal.get_active_medal(db, medal_no), label="get_medal")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Get medal", "メダル情報の取得に失敗しました", e) from e

    if medal is None:
        raise MedalNotFoundError()
    return medal


def delete_medal(db: Session, medal_no: int, user_id: str) -> None:
    """
    メダルを物理削除する．削除できるのは登録したユーザー本人のみ．
    通報で無効化されたメダルは監査用に残すため，削除対象にしない（MedalNotFoundError）．
    物理削除すると通報も連鎖して消え，BAN判定の通報受信数が減ってしまう．
    """
    def _delete() -> None:
        medal = crud_medal.get_active_medal(db, medal_no)
        if medal is None:
            raise MedalNotFoundError()
        if medal.user_id != user_id:
            raise PermissionDeniedError("自分のメダルのみ削除できます")
        crud_medal.delete_medal(db, medal_no)
        db.commit()

    try:
        run_with_retry(db, _delete, label="delete_medal")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Delete medal", "削除に失敗しました。再度お試しください。", e) from e

    logger.info(f"Medal deleted: medal_no={medal_no} by user_id={user_id}")


def get_user_summary(db: Session, user_id: str) -> UserSummary:
    """
    マイページ用：登録中のメダル数と獲得したメダル数．
    """
    def _summary() -> UserSummary:
        return UserSummary(
            registered_count=crud_medal.count_user_medals(db, user_id),
            collected_count=crud_collection.count_user_collections(db, user_id),
        )

    try:
        return run_with_retry(db, _summary, label="get_user_summary")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Get user summary", "ユーザー情報の取得に失敗しました", e) from e
