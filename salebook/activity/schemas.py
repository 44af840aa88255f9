from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Literal


ActivityType = Literal["sale", "client", "product", "purchase", "expense"]


class RecentActivityOut(BaseModel):
    id: str
    type: ActivityType
    description: str
    time: datetime
    person: str

    model_config = ConfigDict(from_attributes=True)
