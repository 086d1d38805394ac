from pydantic import BaseModel, Field, field_validator


class SchedulingRules(BaseModel):
    daily_capacity: int = Field(3, ge=1)
    horizon_days: int = Field(365, ge=1)
    max_past_start_days: int = Field(30, ge=0)


class StorageRules(BaseModel):
    busy_timeout_seconds: float = Field(5.0, gt=0)
    max_transaction_attempts: int = Field(3, ge=1)


class MarketInfo(BaseModel):
    name: str
    currency: str
    locale: str


class Rules(BaseModel):
    scheduling: SchedulingRules = Field(default_factory=SchedulingRules)
    storage: StorageRules = Field(default_factory=StorageRules)
    markets: dict[str, MarketInfo]

    @field_validator("markets")
    @classmethod
    def markets_not_empty(cls, v: dict[str, MarketInfo]) -> dict[str, MarketInfo]:
        if not v:
            raise ValueError("at least one market must be configured")
        return v

    @property
    def market_codes(self) -> tuple[str, ...]:
        return tuple(self.markets)
