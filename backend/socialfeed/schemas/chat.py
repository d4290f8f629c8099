from sqlmodel import Field, SQLModel

__all__ = [
    "ChatMessageIn",
    "ChatMessageResult",
    "RateLimitStatus",
]


class ChatMessageIn(SQLModel):
    message: str = Field(min_length=1, max_length=4000)
    active_button: str = Field(max_length=64)


class ChatMessageResult(SQLModel):
    limited: bool
    retry_after_ms: int | None = None
    remaining: int | None = None
    success: bool | None = None
    message: str | None = None


class RateLimitStatus(SQLModel):
    remaining: int
    used: int
