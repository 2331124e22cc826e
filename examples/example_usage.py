"""Example: call the service layer directly, without Flask."""

import importlib
import json
import sys

from config import get_settings_module

from cast_portal.common.datetime_utils import now_utc
from cast_portal.container import build_container


def main():
    cast_id = sys.argv[1] if len(sys.argv) > 1 else "cast-1"

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, time_zone=settings.TIME_ZONE)

    store_id = container.cast_service.resolve_store_id(cast_id)
    dashboard = container.dashboard_service.get_dashboard(cast_id, store_id, now=now_utc())
    print(json.dumps(dashboard, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
