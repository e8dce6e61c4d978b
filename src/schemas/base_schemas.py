# src/schemas/base_schemas.py
from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, Annotated, ClassVar, FrozenSet
from datetime import datetime
from uuid import UUID
from utils.scheduling import normalize_date, normalize_time


class BaseSchema(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        alias_generator=to_camel,
    )


class FormSchema(BaseSchema):
    """Request payloads: unknown fields are rejected instead of dropped"""

    model_config = ConfigDict(extra="forbid")


class PatchSchema(FormSchema):
    """Partial updates: omitted fields are kept, and only the columns listed
    in ``nullable_fields`` may be cleared by sending null
    """

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_required(self):
        cleared = sorted(
            name
            for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.nullable_fields
        )
        if cleared:
            fields = ", ".join(to_camel(name) for name in cleared)
            raise ValueError(f"{fields} cannot be null")
        return self


class TimestampMixin(BaseSchema):
    created_at: Optional[datetime] = None


class IDMixin(BaseSchema):
    id: UUID


# Calendar dates and clock times as they are stored and compared
CanonicalDate = Annotated[str, BeforeValidator(normalize_date)]
ClockTime = Annotated[str, BeforeValidator(normalize_time)]


class MessageResponse(BaseSchema):
    success: bool = True
    message: Optional[str] = None
