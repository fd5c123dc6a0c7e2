# medal_compass/routers/collections.py
from datetime import date
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from medal_compass.core.auth import CurrentUser, get_current_user
from medal_compass.db import session
from medal_compass.schemas import collection as schemas_collection
from medal_compass.services import collection_service

router = APIRouter()
@router.post("/api/v1/medals/{medal_no}/collection", response_model=schemas_collection.MedalCollection, status_code=201)
def collect_medal(
        medal_no: int,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    return collection_service.collect_medal(db, user_id=user.user_id, medal_no=medal_no)

@router.delete("/api/v1/medals/{medal_no}/collection", status_code=204)
def uncollect_medal(
        medal_no: int,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    # 獲得していないメダルに対しても204を返す（冪等）．
    collection_service.uncollect_medal(db, user_id=user.user_id, medal_no=medal_no)
    return Response(status_code=204)

@router.get("/api/v1/medals/{medal_no}/collection", response_model=schemas_collection.CollectionStatus)
def get_collection_status(
        medal_no: int,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    return {
        "medal_no": medal_no,
        "is_collected": collection_service.is_medal_collected(db, user.user_id, medal_no),
    }

@router.get("/api/v1/users/me/collections", response_model=schemas_collection.CollectionsResponse)
def get_my_collections(
        collected_on: date | None = Query(None, description="この日（UTC）に獲得したものだけに絞る"),
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(session.get_db)):
    collections = collection_service.get_user_collections(db, user.user_id, collected_on=collected_on)
    return {"total": len(collections), "collections": collections}
