"""One-shot copy of the flat Firestore collections into the multi-tenant layout.

Every document of ``<collection>`` is written to
``barbearias/<tenant>/<collection>`` under the same document id, so running
the migration twice overwrites the first copy instead of duplicating it.
The source collections are left untouched.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List

from google.cloud import firestore

from barber_booking import config

logger = logging.getLogger(__name__)


def create_client() -> firestore.Client:
    """Builds a Firestore client from FIREBASE_CREDENTIALS_FILE, or from ADC when unset."""
    if config.FIREBASE_CREDENTIALS_FILE:
        return firestore.Client.from_service_account_json(config.FIREBASE_CREDENTIALS_FILE)
    return firestore.Client()


def ensure_tenant(db: firestore.Client, tenant_id: str):
    """Creates the tenant document if missing, keeping any fields it already has."""
    db.collection(config.TENANT_COLLECTION).document(tenant_id).set(
        {"nome": config.TENANT_NAME, "criadoEm": datetime.now(timezone.utc)},
        merge=True,
    )
    logger.info(f"Tenant document '{config.TENANT_COLLECTION}/{tenant_id}' ensured.")


def migrate_collection(db: firestore.Client, collection_name: str, tenant_id: str) -> int:
    """Copies one collection under the tenant and returns the number of documents written."""
    logger.info(f"Starting migration for collection: {collection_name}...")

    snapshots = list(db.collection(collection_name).stream())
    if not snapshots:
        logger.info(f"Collection '{collection_name}' is empty. Nothing to migrate.")
        return 0

    target = db.collection(config.TENANT_COLLECTION).document(tenant_id).collection(collection_name)

    # Firestore rejects batches above FIRESTORE_BATCH_LIMIT writes
    for start in range(0, len(snapshots), config.FIRESTORE_BATCH_LIMIT):
        batch = db.batch()
        for snapshot in snapshots[start : start + config.FIRESTORE_BATCH_LIMIT]:
            batch.set(target.document(snapshot.id), snapshot.to_dict())
        batch.commit()

    logger.info(
        f"Migrated {len(snapshots)} documents from '{collection_name}' to "
        f"'{config.TENANT_COLLECTION}/{tenant_id}/{collection_name}'."
    )
    return len(snapshots)


def run_migration(
    db: firestore.Client | None = None,
    tenant_id: str = config.TENANT_ID,
    collections: Iterable[str] = config.LEGACY_COLLECTIONS,
) -> bool:
    """Runs the whole migration. Returns False, after logging, if anything fails."""
    try:
        logger.info("Starting data migration to the multi-tenant layout")
        db = db or create_client()
        ensure_tenant(db, tenant_id)

        migrated: List[int] = [migrate_collection(db, name, tenant_id) for name in collections]

        logger.info(f"Migration finished: {sum(migrated)} documents copied.")
        logger.info("The old collections were kept; delete them manually once the copy is verified.")
        return True
    except Exception as e:
        logger.error(f"Error during migration: {e}", exc_info=True)
        return False
