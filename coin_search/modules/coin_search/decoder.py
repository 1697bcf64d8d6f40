"""JSON decoding of CoinGecko payloads into typed records."""

from __future__ import annotations

from typing import Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from coin_search.core.errors import ParsingError
from coin_search.core.types import CoinSearchResponse

T = TypeVar("T", bound=BaseModel)


def decode(data: Union[bytes, str], model: Type[T]) -> T:
    """Decode *data* into an instance of *model*.

    Malformed JSON, missing required fields and type mismatches all raise
    :class:`ParsingError`; no partially populated instance is ever returned.
    """
    try:
        return model.model_validate_json(data)
    except ValidationError as exc:
        raise ParsingError(_describe(exc, model)) from exc


def decode_coin_response(data: Union[bytes, str]) -> CoinSearchResponse:
    return decode(data, CoinSearchResponse)


def _describe(exc: ValidationError, model: Type[BaseModel]) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return f"{model.__name__}: invalid payload"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    message = f"{model.__name__}: {location}: {first.get('msg', 'invalid value')}"
    if len(errors) > 1:
        message += f" (+{len(errors) - 1} more)"
    return message
