from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_utc, parse_iso_datetime
from ..common.http import json_body, optional_str, store_id_hint
from ..container import Container
from ..core.enums import AttendanceAction
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/casts/<cast_id>/reservations/<reservation_id>/attendance",
        methods=["POST"],
        endpoint="cast_attendance",
    )
    def cast_attendance(cast_id: str, reservation_id: str):
        body = json_body()
        try:
            action = AttendanceAction(body.get("action"))
        except ValueError:
            raise ValidationError("不正な入力です。")

        now = now_utc()
        timestamp = optional_str(body, "timestamp")
        at = parse_iso_datetime(timestamp) if timestamp else now

        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint(body))
        data = container.attendance_service.record(
            cast_id=cast_id,
            store_id=store_id,
            reservation_id=reservation_id,
            action=action,
            at=at,
            now=now,
        )
        return jsonify(data)
