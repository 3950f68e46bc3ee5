"""Pydantic models for application configuration settings."""

from pydantic import BaseModel, Field, field_validator


class SettingsRead(BaseModel):
    site_name: str
    currency_symbol: str
    backup_retention_days: int


class SettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their value but none may be cleared."""

    site_name: str | None = Field(default=None, min_length=1)
    currency_symbol: str | None = Field(default=None, min_length=1)
    backup_retention_days: int | None = Field(default=None, ge=1)

    @field_validator("site_name", "currency_symbol", "backup_retention_days", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value
