"""MongoDB index management.

Each repository declares its indexes as ``IndexSpec`` values; they are
applied at startup. An existing index that clashes with a spec (same name
with other keys, or same keys under another name) is dropped and rebuilt.
"""

from dataclasses import dataclass
from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = getLogger(__name__)


@dataclass(frozen=True)
class IndexSpec:
    name: str
    keys: tuple[tuple[str, int], ...]
    unique: bool = False


def ensure_index(collection: Collection, spec: IndexSpec) -> bool:
    try:
        collection.create_index(list(spec.keys), name=spec.name, unique=spec.unique)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise
    conflict = _find_conflict(collection, spec)
    if conflict is None:
        logger.error("Unresolvable index conflict", extra={"index": spec.name})
        return False
    logger.warning("Dropping conflicting index", extra={"index": conflict, "replacement": spec.name})
    collection.drop_index(conflict)
    collection.create_index(list(spec.keys), name=spec.name, unique=spec.unique)
    return True


def _find_conflict(collection: Collection, spec: IndexSpec) -> str | None:
    wanted = dict(spec.keys)
    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_keys = dict(idx_info.get('key', [])) == wanted
        if (idx_name == spec.name) != same_keys:
            return idx_name
    return None


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for users and todos. Called at app startup."""
    from adapter.mongodb.todo_repository import MongoTodoRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoTodoRepository(db).ensure_indexes(),
    ]
    return all(results)
