from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.http import json_body, optional_str, store_id_hint
from ..container import Container
from ..core.constants import DEFAULT_SCHEDULE_WINDOW_DAYS
from ..core.enums import ScheduleDayStatus
from ..core.exceptions import ValidationError
from .model import ScheduleUpdate


def _parse_days(raw) -> int:
    if raw is None or raw == "":
        return DEFAULT_SCHEDULE_WINDOW_DAYS
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValidationError("days must be an integer")
    if isinstance(raw, int):
        return raw
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("days must be an integer")


def _parse_start(raw: Optional[str]):
    return parse_iso_date(raw) if raw else None


def _parse_updates(raw) -> list[ScheduleUpdate]:
    if not isinstance(raw, list):
        raise ValidationError("不正な入力です。")

    updates = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("date"):
            raise ValidationError("不正な入力です。")
        try:
            status = ScheduleDayStatus(item.get("status"))
        except ValueError:
            raise ValidationError("不正な入力です。")
        updates.append(
            ScheduleUpdate(
                schedule_date=parse_iso_date(str(item["date"])),
                status=status,
                start_time=optional_str(item, "startTime"),
                end_time=optional_str(item, "endTime"),
            )
        )
    return updates


def register(app: Flask, container: Container) -> None:
    @app.route("/api/casts/<cast_id>/schedule", methods=["GET"], endpoint="cast_schedule_window")
    def cast_schedule_window(cast_id: str):
        now = now_utc()
        start, end = container.schedule_service.window_bounds(
            now=now,
            start=_parse_start(request.args.get("startDate")),
            days=_parse_days(request.args.get("days")),
        )
        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint())
        return jsonify(container.schedule_service.get_window(cast_id, store_id, start=start, end=end, now=now))

    @app.route("/api/casts/<cast_id>/schedule", methods=["POST"], endpoint="cast_schedule_update")
    def cast_schedule_update(cast_id: str):
        body = json_body()
        updates = _parse_updates(body.get("updates"))

        now = now_utc()
        start, end = container.schedule_service.window_bounds(
            now=now,
            start=_parse_start(optional_str(body, "startDate")),
            days=_parse_days(body.get("days")),
        )
        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint(body))
        data = container.schedule_service.update_window(
            cast_id, store_id, updates, start=start, end=end, now=now
        )
        return jsonify(data)

    @app.route("/api/cast-schedules", methods=["POST"], endpoint="cast_schedule_create")
    def cast_schedule_create():
        body = json_body()
        cast_id = optional_str(body, "castId")
        day = optional_str(body, "date")
        start_time = optional_str(body, "startTime")
        end_time = optional_str(body, "endTime")
        if not cast_id or not day or not start_time or not end_time:
            raise ValidationError("不正な入力です。")

        created = container.schedule_service.create_shift(
            cast_id=cast_id,
            schedule_date=parse_iso_date(day),
            start_time=start_time,
            end_time=end_time,
        )
        return jsonify(created.to_dict()), 201
