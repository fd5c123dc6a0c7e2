# medal_compass/schemas/medal.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class MedalCreate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0) # 測位精度（m）．不明ならNone．
    confirm_low_accuracy: bool = False # 精度が低くても登録を続ける場合にTrue

class Medal(BaseModel):
    medal_no: int
    user_id: str
    latitude: float
    longitude: float
    is_deleted: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True) # SQLAlchemyモデル（models/medal.py）から自動でこのデータ構造に変換できるようにする設定

# APIレスポンス全体を表すスキーマ
class MedalsResponse(BaseModel):
    total: int
    medals: list[Medal]

# マーカーをタップした時に表示する詳細
class MedalDetail(BaseModel):
    medal: Medal
    report_count: int
    has_reported: bool
    is_collected: bool
    is_own: bool

class UserSummary(BaseModel):
    registered_count: int
    collected_count: int
