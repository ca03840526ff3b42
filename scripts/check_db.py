#!/usr/bin/env python3
# scripts/check_db.py - Check database connection and table status
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect

from service_hours.core.config import settings
from service_hours.core.db import db_manager, get_engine
from service_hours.models import Base


def check_database_connection() -> bool:
    """Check connectivity and whether every model table exists"""
    print("Database Connection Check")
    print("=" * 40)
    print(f"Database: {settings.DATABASE_URL.split('@')[-1]}")
    print("-" * 40)

    health = db_manager.health_check()
    if health["status"] != "healthy":
        print(f"❌ Connection failed: {health.get('error')}")
        return False
    print(f"✅ Connection successful ({health['response_time_ms']} ms)")

    existing = set(inspect(get_engine()).get_table_names())
    missing = [name for name in Base.metadata.tables if name not in existing]
    if missing:
        print(f"📝 Missing tables: {', '.join(missing)} - run 'alembic upgrade head'")
        return False

    print("📋 All tables present:")
    for name in sorted(Base.metadata.tables):
        print(f"  - {name}")
    return True


if __name__ == "__main__":
    sys.exit(0 if check_database_connection() else 1)
