# medal_compass/models/medal.py
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Index
from medal_compass.db.base_class import Base

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Medal(Base):
    __tablename__ = "medals"

    medal_no = Column(Integer, primary_key=True, autoincrement=True) # メダル番号（連番）
    user_id = Column(String, nullable=False, index=True) # 登録ユーザーID（IDプロバイダが発行する文字列）

    # 世界測地系（WGS84）の度．矩形範囲で検索するため，Geography型ではなく緯度・経度を別カラムで持つ．
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # 論理削除．通報による無効化・BANではレコードを残す（監査用）．
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_medals_latitude_longitude", "latitude", "longitude"),
    )
