# medal_compass/schemas/collection.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class MedalCollection(BaseModel):
    collection_id: int
    user_id: str
    medal_no: int
    collected_at: datetime

    model_config = ConfigDict(from_attributes=True) # SQLAlchemyモデル（models/collection.py）から変換できるようにする

class CollectionsResponse(BaseModel):
    total: int
    collections: list[MedalCollection]

class CollectionStatus(BaseModel):
    medal_no: int
    is_collected: bool
