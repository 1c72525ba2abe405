#!/usr/bin/env python3
"""
Import public holidays from Nager.Date
Usage: python -m salonbook.scripts.import_holidays [year] [country_code]
"""
import sys

from salonbook.config.database import SessionLocal
from salonbook.services.holiday.holiday_service import HolidayService, HolidayImportError
from salonbook.utils.my_logging import setup_logging
from salonbook.utils.time_utils import salon_now


def main():
    """Main entry point"""
    setup_logging()

    year = int(sys.argv[1]) if len(sys.argv) > 1 else salon_now().year
    country_code = sys.argv[2] if len(sys.argv) > 2 else None

    db = SessionLocal()
    try:
        counts = HolidayService(db).import_public_holidays(year, country_code)
    except HolidayImportError as e:
        print(f"❌ Failed to import holidays: {e}")
        sys.exit(1)
    finally:
        db.close()

    print(
        f"✅ Imported {counts['imported']} new holidays and updated {counts['updated']} "
        f"existing holidays for {year} ({counts['skipped']} skipped)"
    )


if __name__ == "__main__":
    main()
