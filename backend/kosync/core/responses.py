# kosync/core/responses.py
"""
JSON bodies with exact decimal numbers.

Reading percentages are stored as Decimal. The stock JSON encoding turns
them into floats (or quoted strings), so both directions go through the
helpers below: loads() reads numbers as Decimal and DecimalJSONResponse
writes them back as JSON numbers with every digit.
"""
import json
from decimal import Decimal
from typing import Any

from fastapi.responses import JSONResponse


def loads(raw: bytes | str) -> Any:
    return json.loads(raw, parse_float=Decimal)


def dumps(value: Any) -> str:
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"{value} cannot be written as a JSON number")
        return str(value)
    if isinstance(value, dict):
        return "{" + ",".join(f"{json.dumps(str(k), ensure_ascii=False)}:{dumps(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(dumps(v) for v in value) + "]"
    return json.dumps(value, ensure_ascii=False)


class DecimalJSONResponse(JSONResponse):
    """JSONResponse that writes Decimal values verbatim."""

    def render(self, content: Any) -> bytes:
        return dumps(content).encode("utf-8")
