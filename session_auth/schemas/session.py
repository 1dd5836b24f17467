from datetime import datetime
from pydantic import BaseModel, ConfigDict


class SessionRecord(BaseModel):
    """Store-facing view of a session row; `val` is the serialized LoginUser."""
    id: str
    created_at: datetime
    updated_at: datetime
    expires_at: datetime
    val: str

    model_config = ConfigDict(from_attributes=True)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
