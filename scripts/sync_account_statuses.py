#!/usr/bin/env python3
"""
Refresh the cached onboarding status of every host with a connected account.

The cache is normally refreshed when a host opens the dashboard; run this
after a missed webhook window or to backfill statuses.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session
from sipdepot.core.exceptions import PaymentProviderError
from sipdepot.db.session import SessionLocal
from sipdepot.models.user import User
from sipdepot.services.account_status import sync_user_account_status
from sipdepot.services.stripe_gateway import StripeGateway


def sync_all():
    db: Session = SessionLocal()
    gateway = StripeGateway.from_settings()
    synced = failed = 0
    try:
        hosts = db.query(User).filter(User.stripe_account_id.isnot(None)).all()
        print(f"Found {len(hosts)} hosts with connected accounts")
        for host in hosts:
            try:
                status = sync_user_account_status(db, host, gateway)
                print(f"  {host.email}: {status.onboarding_status.value}")
                synced += 1
            except PaymentProviderError as e:
                db.rollback()
                print(f"  {host.email}: FAILED ({e.cause or e.message})")
                failed += 1
    finally:
        db.close()
    print(f"Synced {synced}, failed {failed}")
    return failed == 0


if __name__ == "__main__":
    sys.exit(0 if sync_all() else 1)
