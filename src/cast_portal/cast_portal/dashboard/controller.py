from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_utc
from ..common.http import store_id_hint
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/casts/<cast_id>/dashboard", methods=["GET"], endpoint="cast_dashboard")
    def cast_dashboard(cast_id: str):
        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint())
        return jsonify(container.dashboard_service.get_dashboard(cast_id, store_id, now=now_utc()))

    @app.route("/api/casts/<cast_id>/performance", methods=["GET"], endpoint="cast_performance")
    def cast_performance(cast_id: str):
        store_id = container.cast_service.resolve_store_id(cast_id, store_id_hint())
        return jsonify(container.dashboard_service.get_performance(cast_id, store_id, now=now_utc()))
