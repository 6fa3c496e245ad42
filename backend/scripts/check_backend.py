#!/usr/bin/env python3
"""
Quick checks so the backend and the court notify job can start. Run from repo root or backend/:
  python backend/scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    # 1) .env
    env_file = backend_dir / ".env"
    if not env_file.exists():
        errors.append("backend/.env missing. Copy from backend/.env.example and set DATABASE_URL, etc.")
    else:
        print("OK  .env exists")

    # 2) Settings the notify job needs (it refuses to run without them)
    try:
        from vacantcourt.config import missing_notify_settings, settings

        missing = missing_notify_settings(settings)
        if missing:
            errors.append(f"Court notify job settings missing: {', '.join(missing)}")
            print("FAIL Notify settings:", ", ".join(missing))
        else:
            print(f"OK  Notify settings ({settings.email_provider}, predicate={settings.notify_availability_predicate})")
        if not (settings.auth_jwt_secret or settings.auth_jwt_public_key):
            errors.append("AUTH_JWT_SECRET or AUTH_JWT_PUBLIC_KEY not set; signed-in routes will reject every token.")
            print("FAIL Token verification not configured")
    except Exception as e:
        errors.append(f"Settings: {e}")
        print("FAIL Settings:", e)

    # 3) DB connection and tables
    try:
        from sqlalchemy import inspect, text

        from vacantcourt.db.session import get_engine

        engine = get_engine()
        from vacantcourt.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing_tables = set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names())
        if missing_tables:
            errors.append(f"Tables missing: {sorted(missing_tables)}. Run: cd backend && alembic upgrade head")
            print("FAIL Tables missing:", sorted(missing_tables))
        else:
            print("OK  Tables present")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 4) App import (catches missing deps, bad imports)
    try:
        from vacantcourt.main import app  # noqa: F401

        print("OK  App import (vacantcourt.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn vacantcourt.main:app --host 0.0.0.0 --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
