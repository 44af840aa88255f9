from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Optional

from salebook.ledger.identifiers import client_code


class ClientBase(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    province: str = ""
    location: str = ""


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    province: Optional[str] = None
    location: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class ClientOut(ClientBase):
    id: str

    # derived from the sales ledger on every read
    total_spent: float = 0
    orders: int = 0

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def code(self) -> str:
        return client_code(self.id)
