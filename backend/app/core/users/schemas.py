import uuid
from pydantic import BaseModel


class UserSummary(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    name: str | None
    email: str
