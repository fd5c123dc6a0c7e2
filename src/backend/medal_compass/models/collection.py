# medal_compass/models/collection.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from medal_compass.db.base_class import Base
from medal_compass.models.medal import utcnow

class MedalCollection(Base):
    __tablename__ = "medal_collections"

    collection_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    medal_no = Column(Integer, ForeignKey("medals.medal_no", ondelete="CASCADE"), nullable=False)
    collected_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # 獲得キャンセルは物理削除なので，同じ組は常に高々1行．
    __table_args__ = (
        UniqueConstraint("user_id", "medal_no", name="uq_medal_collections_user_medal"),
    )
