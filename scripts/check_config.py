"""Validate the shops config and print the resolved layout."""

from __future__ import annotations

import sys

from dotenv import load_dotenv

from adsync.errors import ConfigError
from adsync.ingest import config_path, load_settings


def main() -> None:
    load_dotenv()
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"Config {config_path()}: spreadsheet {settings.spreadsheet_id}")
    for shop in settings.shops:
        snaps = ", ".join(f"{s.time_of_day}->{s.target_range}" for s in shop.snapshots) or "none"
        print(f"  {shop.name} (user {shop.user_id}): {shop.sheet_range}; items {shop.items_range or '-'}; snapshots {snaps}")


if __name__ == "__main__":
    main()
