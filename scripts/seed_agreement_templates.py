#!/usr/bin/env python3
"""Seed the canonical agreement templates (co-ownership, POA, JOP declaration).

Usage:
    python scripts/seed_agreement_templates.py [--database-url URL]

Running it again when templates exist performs no writes.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import sessionmaker

from app.db import get_engine
from app.logging import configure_logging
from app.services.agreement_seed import seed_agreement_templates


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args()

    configure_logging(json_output=False)
    engine = get_engine(args.database_url)
    session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    db = session_factory()
    try:
        created = seed_agreement_templates(db)
    finally:
        db.close()
        engine.dispose()

    if created:
        print(f"Created {created} agreement templates.")
    else:
        print("Agreement templates already exist; nothing to do.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
