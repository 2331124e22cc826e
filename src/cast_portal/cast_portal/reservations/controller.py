from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_utc
from ..common.http import store_id_hint
from ..common.validators import parse_limit
from ..container import Container
from ..core.constants import DEFAULT_RESERVATION_LIST_LIMIT, MAX_RESERVATION_LIST_LIMIT
from ..core.enums import ReservationScope
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/casts/<cast_id>/reservations", methods=["GET"], endpoint="cast_reservations")
    def cast_reservations(cast_id: str):
        try:
            scope = ReservationScope(request.args.get("scope") or ReservationScope.UPCOMING.value)
        except ValueError:
            raise ValidationError("scope must be one of upcoming, today, past")
        limit = parse_limit(
            request.args.get("limit"),
            default=DEFAULT_RESERVATION_LIST_LIMIT,
            maximum=MAX_RESERVATION_LIST_LIMIT,
        )

        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint())
        data = container.reservation_service.list_for_cast(
            cast_id, store_id, now=now_utc(), scope=scope, limit=limit
        )
        return jsonify(data.to_dict())

    @app.route(
        "/api/casts/<cast_id>/reservations/<reservation_id>",
        methods=["GET"],
        endpoint="cast_reservation_detail",
    )
    def cast_reservation_detail(cast_id: str, reservation_id: str):
        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint())
        return jsonify(container.reservation_service.get_detail(cast_id, store_id, reservation_id, now=now_utc()))
