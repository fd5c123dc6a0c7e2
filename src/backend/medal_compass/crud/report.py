# medal_compass/crud/report.py
from sqlalchemy import func
from sqlalchemy.orm import Session
from medal_compass.models import Medal, MedalReport

def create_report(db: Session, medal_no: int, reporter_user_id: str) -> MedalReport:
    """
    通報を1件追加する．同じ(medal_no, reporter_user_id)が既にあればflush時にIntegrityErrorになる．
    """
    report = MedalReport(medal_no=medal_no, reporter_user_id=reporter_user_id)
    db.add(report)
    db.flush()
    return report

def count_reports(db: Session, medal_no: int) -> int:
    return (
        db.query(func.count(MedalReport.id))
        .filter(MedalReport.medal_no == medal_no)
        .scalar()
    ) or 0

def has_user_reported(db: Session, medal_no: int, user_id: str) -> bool:
    return (
        db.query(MedalReport.id)
        .filter(MedalReport.medal_no == medal_no, MedalReport.reporter_user_id == user_id)
        .first()
    ) is not None

def count_reports_for_medals(db: Session, medal_nos: list[int]) -> int:
    # IN () は方言によって不正なSQLになるので，空なら問い合わせずに0を返す．
    if not medal_nos:
        return 0
    return (
        db.query(func.count(MedalReport.id))
        .filter(MedalReport.medal_no.in_(medal_nos))
        .scalar()
    ) or 0

def get_active_medal_nos_with_reports_at_least(db: Session, threshold: int) -> list[int]:
    """
    通報数が閾値以上なのに，まだ無効化されていないメダルの番号を返す．
    """
    rows = (
        db.query(Medal.medal_no)
        .join(MedalReport, MedalReport.medal_no == Medal.medal_no)
        .filter(Medal.is_deleted.is_(False))
        .group_by(Medal.medal_no)
        .having(func.count(MedalReport.id) >= threshold)
        .order_by(Medal.medal_no)
        .all()
    )
    return [row.medal_no for row in rows]

def get_user_ids_with_received_reports_at_least(db: Session, threshold: int) -> list[str]:
    """
    所有する全メダル（無効化済みを含む）への通報の合計が閾値以上のユーザーIDを返す．
    """
    rows = (
        db.query(Medal.user_id)
        .join(MedalReport, MedalReport.medal_no == Medal.medal_no)
        .group_by(Medal.user_id)
        .having(func.count(MedalReport.id) >= threshold)
        .order_by(Medal.user_id)
        .all()
    )
    return [row.user_id for row in rows]
