from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body, optional_str, store_id_hint
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/casts/<cast_id>/reservations/<reservation_id>/attendance-requests",
        methods=["POST"],
        endpoint="cast_attendance_request",
    )
    def cast_attendance_request(cast_id: str, reservation_id: str):
        body = json_body()
        requested = optional_str(body, "requestedTime")
        if not requested:
            raise ValidationError("不正な入力です。")

        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint(body))
        latest = container.request_service.submit(
            cast_id=cast_id,
            store_id=store_id,
            reservation_id=reservation_id,
            type=str(body.get("type") or ""),
            requested_time=parse_iso_datetime(requested),
            reason=optional_str(body, "reason"),
        )
        return jsonify({"requests": latest}), 201
