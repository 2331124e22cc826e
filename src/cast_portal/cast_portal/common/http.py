"""Small request helpers shared by the JSON controllers."""

from __future__ import annotations

from typing import Any, Optional

from flask import request

from ..core.exceptions import ValidationError


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("不正な入力です。")
    return data


def store_id_hint(body: Optional[dict] = None) -> Optional[str]:
    if body and body.get("storeId"):
        return str(body["storeId"])
    return request.args.get("storeId") or None


def optional_str(body: dict, key: str) -> Optional[str]:
    value: Any = body.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value
