# backend/app/schemas/site.py
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# --- Pydantic Models for Site Validation ---
# These mirror the Site SQLAlchemy model. Coordinates are checked here so that
# nothing out of range ever reaches the database.


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


def _clean_state(value: str) -> str:
    value = value.strip().upper()
    if not value:
        raise ValueError("state must not be empty")
    return value


class SiteCreate(BaseModel):
    name: str = Field(..., max_length=255)
    state: str = Field(..., max_length=2)
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)

    @field_validator("name", mode="before")
    @classmethod
    def name_not_blank(cls, value):
        return _clean_name(value) if isinstance(value, str) else value

    @field_validator("state", mode="before")
    @classmethod
    def state_upper(cls, value):
        return _clean_state(value) if isinstance(value, str) else value


class SiteUpdate(BaseModel):
    """Partial edit: only the fields a caller sets are written."""

    name: str | None = Field(None, max_length=255)
    state: str | None = Field(None, max_length=2)
    latitude: float | None = Field(None, ge=-90, le=90, allow_inf_nan=False)
    longitude: float | None = Field(None, ge=-180, le=180, allow_inf_nan=False)

    @field_validator("name", mode="before")
    @classmethod
    def name_not_blank(cls, value):
        return _clean_name(value) if isinstance(value, str) else value

    @field_validator("state", mode="before")
    @classmethod
    def state_upper(cls, value):
        return _clean_state(value) if isinstance(value, str) else value

    @model_validator(mode="after")
    def no_null_fields(self):
        # Omitting a field leaves it unchanged; sending null is not a value
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class SiteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    state: str
    latitude: float
    longitude: float
