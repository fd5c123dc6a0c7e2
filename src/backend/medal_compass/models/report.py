# medal_compass/models/report.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from medal_compass.db.base_class import Base
from medal_compass.models.medal import utcnow

class MedalReport(Base):
    __tablename__ = "medal_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    medal_no = Column(Integer, ForeignKey("medals.medal_no", ondelete="CASCADE"), nullable=False, index=True)
    reporter_user_id = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # 同じユーザーが同じメダルを2回通報できないよう，DB側で一意制約をかける．
    __table_args__ = (
        UniqueConstraint("medal_no", "reporter_user_id", name="uq_medal_reports_medal_no_reporter"),
    )
