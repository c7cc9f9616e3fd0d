from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PayloadValidationError

from notes_client.errors import MalformedResponse, ValidationError

T = TypeVar("T")

NON_NULLABLE_FIELDS = frozenset({"name", "title", "content"})


def parse_payload(adapter: TypeAdapter[T], payload: Any, *, what: str) -> T:
    try:
        return adapter.validate_python(payload)
    except PayloadValidationError as exc:
        raise MalformedResponse(f"Malformed {what} response: {exc.error_count()} error(s).") from exc


def validate_input(model: type[BaseModel], **fields: Any) -> BaseModel:
    try:
        return model(**fields)
    except PayloadValidationError as exc:
        fields_in_error = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
        raise ValidationError(
            f"Invalid or missing fields: {', '.join(fields_in_error)}"
        ) from exc


def reject_null_updates(updates: dict[str, object]) -> None:
    null_fields = [
        key for key, value in updates.items() if value is None and key in NON_NULLABLE_FIELDS
    ]
    if null_fields:
        field_list = ", ".join(sorted(null_fields))
        raise ValidationError(f"Fields cannot be null: {field_list}")


def extract_updates(
    payload: BaseModel, *, empty_detail: str = "No fields to update."
) -> dict[str, object]:
    updates = payload.model_dump(exclude_unset=True)
    reject_null_updates(updates)
    if not updates:
        raise ValidationError(empty_detail)
    return updates
