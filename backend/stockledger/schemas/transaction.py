from datetime import date, datetime, time, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from stockledger.models.transaction import MovementType
from stockledger.schemas.product import ProductSummary
from stockledger.schemas.user import UserSummary


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransactionCreate(BaseModel):
    type: MovementType
    product_id: int = Field(validation_alias=AliasChoices("product_id", "product"))
    quantity: int = Field(ge=1)
    notes: str = Field(default="", max_length=500)
    date: datetime | None = None

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, value: str) -> str:
        return value.strip()

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value) if value else None


class TransactionUpdate(BaseModel):
    type: MovementType | None = None
    product_id: int | None = Field(default=None, validation_alias=AliasChoices("product_id", "product"))
    quantity: int | None = Field(default=None, ge=1)
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None


class TransactionFilter(BaseModel):
    type: MovementType | None = None
    product_id: int | None = None
    user_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def expand_plain_dates(cls, value, info):
        # A bare date means the start of that day for start_date and its last
        # instant for end_date, so the range stays inclusive of whole days.
        if isinstance(value, str) and len(value) == 10:
            value = date.fromisoformat(value)
        if isinstance(value, date) and not isinstance(value, datetime):
            bound = time.max if info.field_name == "end_date" else time.min
            return datetime.combine(value, bound, tzinfo=timezone.utc)
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_bounds(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value) if value else None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class TransactionRead(BaseModel):
    id: int
    type: MovementType
    product_id: int
    quantity: int
    user_id: int
    date: datetime
    notes: str
    created_at: datetime
    updated_at: datetime
    product: ProductSummary | None = None
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class TransactionPage(BaseModel):
    items: list[TransactionRead]
    count: int
    total_count: int
    current_page: int
    total_pages: int


class TransactionHistory(BaseModel):
    items: list[TransactionRead]
    count: int


class MessageResponse(BaseModel):
    message: str
