"""
Shared model building blocks.

All entities serialize with camelCase keys on the wire
(totalBalance, familyId) while Python code uses snake_case.
Both spellings are accepted on input.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Mapping, Optional, TypeVar
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


CENTS = Decimal("0.01")


def _quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


# Fixed-precision amounts, always carried with two decimal places.
Money = Annotated[
    Decimal,
    Field(max_digits=14, decimal_places=2),
    AfterValidator(_quantize_money),
]
NonNegativeMoney = Annotated[
    Decimal,
    Field(ge=0, max_digits=14, decimal_places=2),
    AfterValidator(_quantize_money),
]
PositiveMoney = Annotated[
    Decimal,
    Field(gt=0, max_digits=14, decimal_places=2),
    AfterValidator(_quantize_money),
]


def utcnow() -> datetime:
    """Naive UTC timestamp, comparable across both store backends."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid4())


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CamelModel(BaseModel):
    """Base for every wire-facing model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def coerce_variant(
    values: Any,
    tag_field: str,
    payload_field: str,
    variants: Mapping[Any, type[BaseModel]],
) -> Any:
    """
    Validate a free-form payload against the model selected by a tag.

    Used by "before" model validators: when `values[payload_field]` is a
    plain dict, it is replaced with an instance of the variant registered
    for `values[tag_field]`. Unknown tags are left alone so the tag
    field's own validation reports them.
    """
    if not isinstance(values, dict):
        return values

    tag_alias = to_camel(tag_field)
    payload_alias = to_camel(payload_field)

    tag = values.get(tag_field, values.get(tag_alias))
    payload_key = payload_field if payload_field in values else payload_alias
    payload = values.get(payload_key)

    if not isinstance(payload, dict):
        return values

    variant = _lookup_variant(tag, variants)
    if variant is None:
        return values

    values = dict(values)
    values[payload_key] = variant.model_validate(payload)
    return values


def _lookup_variant(
    tag: Any,
    variants: Mapping[Any, type[BaseModel]],
) -> Optional[type[BaseModel]]:
    for key, model in variants.items():
        if tag == key or tag == getattr(key, "value", key):
            return model
    return None


ModelT = TypeVar("ModelT", bound=BaseModel)


def merge_update(entity: ModelT, updates: BaseModel, **overrides: Any) -> ModelT:
    """
    Return a re-validated copy of `entity` with the fields set on `updates`.

    Fields explicitly sent as null are left unchanged.
    """
    changes = updates.model_dump(exclude_unset=True, exclude_none=True)
    changes.update(overrides)
    return type(entity).model_validate({**entity.model_dump(), **changes})
