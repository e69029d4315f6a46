# scripts/setup/init_db.py
"""
Initialize database — creates all tables and seeds the permit type catalog.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from parking_api.database import SessionLocal, create_tables, engine, seed_permit_types, PERMIT_TYPE_CATALOG
from parking_api.config import settings
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError


def main():
    print("🗄️  Parking DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except SQLAlchemyError as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print("\n🪪 Seeding permit types...")
    db = SessionLocal()
    try:
        seed_permit_types(db)
    finally:
        db.close()
    for type_id, name, *_ in PERMIT_TYPE_CATALOG:
        print(f"   ✓ {type_id:<12} {name}")

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn parking_api.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
