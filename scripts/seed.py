"""Seed sample properties (pass --reset to clear the table first)."""

from property_manager.services.seeding import main

if __name__ == "__main__":
    raise SystemExit(main())
