from datetime import date, datetime
import re
from typing import Any, Union, get_args, get_origin
from pydantic import BaseModel, model_validator

INVISIBLE_CHARS_PATTERN = re.compile(
    r'[\u200e\u200f\u202a-\u202e\u2066-\u2069\ufeff]')


def deep_clean(value: Any):
    """Recursively convert empty strings to None and strip invisible chars."""

    if isinstance(value, BaseModel):
        return type(value)(**deep_clean(value.model_dump()))

    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    return value


def safe_parse_date(value: Any):
    """Convert date strings to date, return None if invalid."""
    if value is None or value == "":
        return None

    if isinstance(value, (date, datetime)):
        return value

    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _is_date_annotation(annotation) -> bool:
    origin = get_origin(annotation)
    args = get_args(annotation)
    return annotation is date or (origin is Union and date in args)


class EmptyStringModel(BaseModel):
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if isinstance(values, dict):
            return deep_clean(values)
        return values

    # ISO datetimes sent by the browser ("2024-05-01T00:00:00.000Z") land in date fields
    @model_validator(mode="before")
    @classmethod
    def fix_dates(cls, values):
        if not isinstance(values, dict):
            return values

        for field_name, field in cls.model_fields.items():
            if field_name in values and _is_date_annotation(field.annotation):
                values[field_name] = safe_parse_date(values[field_name])

        return values
