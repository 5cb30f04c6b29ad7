"""
Firestore query helpers shared by the real client and the local mock store.
"""

from firebase_admin import firestore

from app.config.mock_firestore import MockTransaction


def where_filter(query, field_path: str, op_string: str, value):
    """
    Apply one field filter to a collection or query.

    Positional arguments are used because both firebase_admin and the mock
    store accept them (firebase_admin logs a deprecation warning only).

    Usage:
        query = where_filter(collection, "user_id", "==", "user-42")
        query = where_filter(query, "status", "==", "reported")
    """
    return query.where(field_path, op_string, value)


def run_in_transaction(db, callback, *args):
    """
    Run callback(transaction, *args) atomically and return its result.

    Firestore retries the callback when a document it read changed before
    commit; the mock store holds its lock for the whole callback instead.
    Reads inside the callback must pass `transaction=transaction`.

    Usage:
        def _apply(transaction, doc_ref):
            snapshot = doc_ref.get(transaction=transaction)
            transaction.update(doc_ref, {...})

        run_in_transaction(db, _apply, doc_ref)
    """
    transaction = db.transaction()
    if isinstance(transaction, MockTransaction):
        return transaction.run(callback, *args)
    return firestore.transactional(callback)(transaction, *args)
