# storefront/tasks/expire.py
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import Database, transaction
from storefront.repos.cart_repo import CartRepo
from storefront.utils.settings import DATABASE_URL, GUEST_CART_TTL_HOURS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_database: Database | None = None


def _get_database() -> Database:
    global _database
    if _database is None:
        _database = Database(DATABASE_URL)
    return _database


def purge_guest_carts(db: Session, ttl_hours: int = GUEST_CART_TTL_HOURS, now: datetime | None = None) -> int:
    """Deletes guest cart rows that were not touched for ttl_hours."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(hours=ttl_hours)

    with transaction(db):
        removed = CartRepo(db).delete_guest_items_older_than(cutoff)

    logger.info(f"Purged {removed} guest cart items not updated since {cutoff.isoformat()}")
    return removed


@celery_app.task(name="storefront.tasks.expire.purge_guest_carts_task")
def purge_guest_carts_task():
    logger.info("Purge guest carts task started")

    db = _get_database().session()
    try:
        return purge_guest_carts(db)
    finally:
        db.close()
