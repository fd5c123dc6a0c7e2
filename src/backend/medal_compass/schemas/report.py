# medal_compass/schemas/report.py
from pydantic import BaseModel

class ReportOutcome(BaseModel):
    report_count: int
    medal_invalidated: bool
    user_banned: bool
