# medal_compass/routers/medals.py
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from medal_compass.core.auth import CurrentUser, get_current_user
from medal_compass.db import session
from medal_compass.schemas import medal as schemas_medal
from medal_compass.services import collection_service, medal_service, moderation_service

router = APIRouter()
@router.post("/api/v1/medals", response_model=schemas_medal.Medal, status_code=201)
def register_medal(
        payload: schemas_medal.MedalCreate,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    """
    現在地にメダルを登録する．測位精度が悪い場合は，confirm_low_accuracy=trueでの再送を求める（428）．
    """
    medal_service.ensure_accuracy(payload.accuracy, confirmed=payload.confirm_low_accuracy)
    return medal_service.register_medal(
        db, user_id=user.user_id, latitude=payload.latitude, longitude=payload.longitude
    )

@router.get("/api/v1/medals", response_model=schemas_medal.MedalsResponse)
def search_medals(
        lat: float = Query(..., ge=-90, le=90),
        lon: float = Query(..., ge=-180, le=180),
        radius: float | None = Query(None, gt=0, description="検索半径（km）．省略時は5km．"),
        db: Session = Depends(session.get_db)):
    """
    指定された中心座標から半径radius(km)の矩形範囲にある有効なメダルを返す．
    """
    medals = medal_service.get_medals_within_radius(db, center_lat=lat, center_lon=lon, radius_km=radius)
    return {"total": len(medals), "medals": medals}

@router.get("/api/v1/medals/{medal_no}", response_model=schemas_medal.MedalDetail)
def get_medal_detail(
        medal_no: int,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    medal = medal_service.get_medal(db, medal_no)
    return schemas_medal.MedalDetail(
        medal=schemas_medal.Medal.model_validate(medal),
        report_count=moderation_service.get_medal_report_count(db, medal_no),
        has_reported=moderation_service.has_user_reported_medal(db, medal_no, user.user_id),
        is_collected=collection_service.is_medal_collected(db, user.user_id, medal_no),
        is_own=medal.user_id == user.user_id,
    )

@router.delete("/api/v1/medals/{medal_no}", status_code=204)
def delete_medal(
        medal_no: int,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    medal_service.delete_medal(db, medal_no=medal_no, user_id=user.user_id)
    return Response(status_code=204)

@router.get("/api/v1/users/me/medals", response_model=schemas_medal.MedalsResponse)
def get_my_medals(
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    medals = medal_service.get_user_medals(db, user.user_id)
    return {"total": len(medals), "medals": medals}

@router.get("/api/v1/users/me/summary", response_model=schemas_medal.UserSummary)
def get_my_summary(
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    summary = medal_service.get_user_summary(db, user.user_id)
    return schemas_medal.UserSummary(
        registered_count=summary.registered_count,
        collected_count=summary.collected_count,
    )
