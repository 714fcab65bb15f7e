from typing import List

from pydantic import BaseModel


class FactoryClient(BaseModel):
    id: int
    name: str


class MONumberListResponse(BaseModel):
    client_id: int
    mo_numbers: List[str]
