# medal_compass/routers/reports.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medal_compass.core.auth import CurrentUser, get_current_user
from medal_compass.db import session
from medal_compass.schemas import report as schemas_report
from medal_compass.services import moderation_service

router = APIRouter()
@router.post("/api/v1/medals/{medal_no}/reports", response_model=schemas_report.ReportOutcome, status_code=201)
def report_medal(
        medal_no: int,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    """
    メダルを通報する．閾値を超えた場合のメダル無効化・ユーザーBANまで同じリクエスト内で処理される．
    """
    outcome = moderation_service.submit_report(db, medal_no=medal_no, reporter_user_id=user.user_id)
    return schemas_report.ReportOutcome(
        report_count=outcome.report_count,
        medal_invalidated=outcome.medal_invalidated,
        user_banned=outcome.user_banned,
    )
