# medal_compass/services/moderation_service.py
"""
通報によるモデレーション．

メダル：有効 →（異なるユーザーから MEDAL_INVALIDATION_THRESHOLD 件以上の通報）→ 無効化（論理削除）
ユーザー：有効 →（所有メダル全体で USER_BAN_THRESHOLD 件以上の通報）→ BAN（所有メダルを全て無効化）
どちらも終端状態で，元に戻す経路は無い．

通報 → メダル無効化判定 → BAN判定 の3段階は submit_report で1トランザクションにまとめて実行する．
個別の関数も残しているが，通報の受付には必ず submit_report を使うこと．
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from medal_compass.core.config import get_settings
from medal_compass.core.exceptions import (
    DuplicateReportError, MedalNotFoundError, PermissionDeniedError, PersistenceError,
)
from medal_compass.crud import medal as crud_medal
from medal_compass.crud import report as crud_report
from medal_compass.db.errors import is_unique_violation, persistence_error
from medal_compass.db.session import run_with_retry
from medal_compass.utils.logger import logger


@dataclass
class ReportOutcome:
    report_count: int        # 通報後のメダルの通報数
    medal_invalidated: bool  # メダルが無効化状態になったか
    user_banned: bool        # メダルの所有者がBAN状態になったか


@dataclass
class ReconcileResult:
    invalidated_medal_nos: list[int] = field(default_factory=list)
    banned_user_ids: list[str] = field(default_factory=list)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _insert_report(db: Session, medal_no: int, reporter_user_id: str) -> None:
    """
    通報を追加する．一意制約違反はDuplicateReportErrorに変換する（commitはしない）．
    """
    try:
        crud_report.create_report(db, medal_no=medal_no, reporter_user_id=reporter_user_id)
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise DuplicateReportError() from e
        logger.error(f"Report medal error: {e}")
        raise PersistenceError("通報に失敗しました。再度お試しください。") from e


def _invalidate_if_over_threshold(db: Session, medal_no: int, threshold: int) -> tuple[int, bool]:
    report_count = crud_report.count_reports(db, medal_no)
    if report_count < threshold:
        return report_count, False

    # 既に無効化済みでもUPDATEは発行する（対象0行になるだけで無害）．
    if crud_medal.invalidate_medal(db, medal_no, _now()) > 0:
        logger.info(f"Medal invalidated: medal_no={medal_no} (reports={report_count} >= {threshold})")
    return report_count, True


def _ban_if_over_threshold(db: Session, user_id: str, threshold: int) -> bool:
    received_count = _count_received_reports(db, user_id)
    if received_count < threshold:
        return False

    invalidated = crud_medal.invalidate_user_medals(db, user_id, _now())
    if invalidated > 0:
        logger.info(f"User banned: user_id={user_id} (received reports={received_count} >= {threshold}, "
                    f"{invalidated} medals invalidated)")
    return True


def _count_received_reports(db: Session, user_id: str) -> int:
    # 2段階：所有メダルの番号 → それらへの通報数．メダルが無ければ通報も0件．
    medal_nos = crud_medal.get_owned_medal_nos(db, user_id)
    if not medal_nos:
        return 0
    return crud_report.count_reports_for_medals(db, medal_nos)


def report_medal(db: Session, medal_no: int, reporter_user_id: str) -> None:
    """
    通報を1件追加する．閾値判定は行わない（submit_reportを参照）．
    """
    def _report() -> None:
        _insert_report(db, medal_no, reporter_user_id)
        db.commit()

    try:
        run_with_retry(db, _report, label="report_medal")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Report medal", "通報に失敗しました。再度お試しください。", e) from e


def get_medal_report_count(db: Session, medal_no: int) -> int:
    try:
        return run_with_retry(db, lambda: crud_report.count_reports(db, medal_no), label="get_medal_report_count")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Get medal report count", "通報数の取得に失敗しました", e) from e


def has_user_reported_medal(db: Session, medal_no: int, user_id: str) -> bool:
    try:
        return run_with_retry(
            db, lambda: crud_report.has_user_reported(db, medal_no, user_id), label="has_user_reported_medal"
        )
    except SQLAlchemyError as e:
        raise persistence_error(db, "Check user reported medal", "通報状態の確認に失敗しました", e) from e


def check_and_invalidate_medal(db: Session, medal_no: int, threshold: int | None = None) -> bool:
    """
    通報数が閾値以上ならメダルを無効化する．無効化状態になっていればTrueを返す．
    何度呼んでも結果は変わらない（冪等）．
    """
    threshold = threshold or get_settings().MEDAL_INVALIDATION_THRESHOLD

    def _check() -> bool:
        _, invalidated = _invalidate_if_over_threshold(db, medal_no, threshold)
        db.commit()
        return invalidated

    try:
        return run_with_retry(db, _check, label="check_and_invalidate_medal")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Invalidate medal", "メダル無効化に失敗しました", e) from e


def get_user_report_received_count(db: Session, user_id: str) -> int:
    try:
        return run_with_retry(db, lambda: _count_received_reports(db, user_id),
                              label="get_user_report_received_count")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Get user report received count", "通報受信数の取得に失敗しました", e) from e


def check_and_ban_user(db: Session, user_id: str, threshold: int | None = None) -> bool:
    """
    通報受信数が閾値以上なら，ユーザーの全メダルを無効化する．BAN状態ならTrueを返す．
    """
    threshold = threshold or get_settings().USER_BAN_THRESHOLD

    def _check() -> bool:
        banned = _ban_if_over_threshold(db, user_id, threshold)
        db.commit()
        return banned

    try:
        return run_with_retry(db, _check, label="check_and_ban_user")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Ban user", "ユーザーBAN処理に失敗しました", e) from e


def submit_report(db: Session, medal_no: int, reporter_user_id: str) -> ReportOutcome:
    """
    通報の受付．通報の追加・メダル無効化判定・BAN判定を1トランザクションで行う．
    途中で失敗した場合は全て巻き戻るので，「閾値を超えたのに無効化されていない」状態は残らない．
    """
    settings = get_settings()

    def _submit() -> ReportOutcome:
        medal = crud_medal.get_active_medal(db, medal_no)
        if medal is None:
            raise MedalNotFoundError()
        if medal.user_id == reporter_user_id:
            raise PermissionDeniedError("自分のメダルは通報できません")
        owner_id = medal.user_id

        _insert_report(db, medal_no, reporter_user_id)
        report_count, invalidated = _invalidate_if_over_threshold(
            db, medal_no, settings.MEDAL_INVALIDATION_THRESHOLD
        )
        banned = _ban_if_over_threshold(db, owner_id, settings.USER_BAN_THRESHOLD)
        db.commit()

        return ReportOutcome(report_count=report_count, medal_invalidated=invalidated or banned, user_banned=banned)

    try:
        outcome = run_with_retry(db, _submit, label="submit_report")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Submit report", "通報に失敗しました。再度お試しください。", e) from e

    logger.info(f"Medal reported: medal_no={medal_no} by user_id={reporter_user_id} -> {outcome}")
    return outcome


def reconcile_moderation(db: Session) -> ReconcileResult:
    """
    閾値を超えているのに無効化・BANされていないメダルとユーザーを洗い出して処理する．
    各段階を別々に呼ぶ古いクライアントが途中で落ちた場合などの取りこぼしを回収するためのスイープ．
    """
    settings = get_settings()

    def _reconcile() -> ReconcileResult:
        result = ReconcileResult()
        now = _now()

        for medal_no in crud_report.get_active_medal_nos_with_reports_at_least(
                db, settings.MEDAL_INVALIDATION_THRESHOLD):
            if crud_medal.invalidate_medal(db, medal_no, now) > 0:
                result.invalidated_medal_nos.append(medal_no)

        for user_id in crud_report.get_user_ids_with_received_reports_at_least(db, settings.USER_BAN_THRESHOLD):
            # 全メダルが既に無効化済みのユーザーは0行更新となり，結果には含めない．
            if crud_medal.invalidate_user_medals(db, user_id, now) > 0:
                result.banned_user_ids.append(user_id)

        db.commit()
        return result

    try:
        result = run_with_retry(db, _reconcile, label="reconcile_moderation")
    except SQLAlchemyError as e:
        raise persistence_error(db, "Reconcile moderation", "モデレーションの再評価に失敗しました", e) from e

    logger.info(f"Moderation reconciled: {len(result.invalidated_medal_nos)} medals invalidated, "
                f"{len(result.banned_user_ids)} users banned")
    return result
