from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_utc
from ..common.http import store_id_hint
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/casts/<cast_id>/settlements", methods=["GET"], endpoint="cast_settlements")
    def cast_settlements(cast_id: str):
        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint())
        return jsonify(container.settlement_service.get_settlements(cast_id, store_id, now=now_utc()))
