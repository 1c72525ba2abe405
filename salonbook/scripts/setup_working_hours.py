#!/usr/bin/env python3
"""
Seed the global working hours table with one row per weekday
Usage: python -m salonbook.scripts.setup_working_hours [--force]
"""
import sys

from salonbook.config.database import SessionLocal, create_tables
from salonbook.services.working_hours.working_hours_service import WorkingHoursService

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def main():
    """Main entry point"""
    force = "--force" in sys.argv[1:]

    create_tables()
    db = SessionLocal()
    try:
        rows = WorkingHoursService(db).setup_default_schedule(force=force)
        print("✅ Working hours:")
        for row in rows:
            if row.is_closed:
                print(f"  {WEEKDAYS[row.weekday]:10} closed")
            else:
                hours = row.to_dict()
                print(
                    f"  {WEEKDAYS[row.weekday]:10} {hours['start_time']}-{hours['end_time']}"
                    f" (break {hours['break_start']}-{hours['break_end']})"
                )
    finally:
        db.close()


if __name__ == "__main__":
    main()
