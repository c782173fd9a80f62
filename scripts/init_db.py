from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from checkin_watch.config import get_settings_module
from checkin_watch.database.bootstrap import apply_schema
from checkin_watch.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_dict(dict(settings.DB_CONFIG))

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    count = apply_schema(config, schema_path=schema_path)
    print(f"OK: Applied schema.sql -> {config.user}@{config.host}:{config.port}/{config.database} ({count} statements)")


if __name__ == "__main__":
    main()
