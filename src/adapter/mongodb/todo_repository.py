"""MongoDB implementation of TodoRepository.

Every query carries both ``_id`` and ``owner_id`` so a foreign todo is
indistinguishable from a missing one. Updates and deletes are single
``find_one_and_*`` calls, which the server applies atomically per document.
"""

from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError
from adapter.mongodb.connection import TODOS_COLLECTION_NAME
from adapter.mongodb.indexes import IndexSpec, ensure_index
from domain.model.errors import RepositoryError
from domain.model.todo import Todo, TodoPatch

logger = getLogger(__name__)

TODO_INDEXES = (
    IndexSpec('idx_todos_owner', (('owner_id', 1),)),
)


def build_update_pipeline(patch: TodoPatch, now: int) -> list[dict]:
    """Translate a patch into an aggregation-pipeline update.

    The pipeline form lets ``$ifNull`` keep an existing completion stamp,
    so re-completing a todo does not move its timestamp.
    """
    fields: dict = {}
    if patch.text is not None:
        # $literal stops a leading "$" in user text being read as a field path
        fields['text'] = {'$literal': patch.text}
    if patch.is_completed is True:
        fields['is_completed'] = True
        fields['completed_at'] = {'$ifNull': ['$completed_at', now]}
    elif patch.is_completed is False:
        fields['is_completed'] = False

    pipeline = [{'$set': fields}] if fields else []
    if patch.is_completed is False:
        pipeline.append({'$unset': 'completed_at'})
    return pipeline


class MongoTodoRepository:
    def __init__(self, db: Database):
        self.collection = db[TODOS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for todos collection."""
        try:
            return all(ensure_index(self.collection, spec) for spec in TODO_INDEXES)
        except PyMongoError as e:
            logger.error("Failed to create todos indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> Todo:
        return Todo(
            id=doc['_id'],
            owner_id=doc['owner_id'],
            text=doc['text'],
            created_at=doc['created_at'],
            is_completed=doc.get('is_completed', False),
            completed_at=doc.get('completed_at'),
        )

    def create(self, todo: Todo) -> Todo:
        doc = {
            '_id': todo.id,
            'owner_id': todo.owner_id,
            'text': todo.text,
            'is_completed': todo.is_completed,
            'created_at': todo.created_at,
        }
        if todo.completed_at is not None:
            doc['completed_at'] = todo.completed_at
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Failed to create todo", extra={"userId": todo.owner_id, "error": str(e)})
            raise RepositoryError("Failed to create todo") from e
        return todo

    def list_by_owner(self, owner_id: str) -> list[Todo]:
        try:
            docs = list(self.collection.find({'owner_id': owner_id}).sort('created_at', 1))
        except PyMongoError as e:
            logger.error("Failed to list todos", extra={"userId": owner_id, "error": str(e)})
            raise RepositoryError("Failed to list todos") from e
        return [self._to_domain(doc) for doc in docs]

    def get(self, owner_id: str, todo_id: str) -> Todo | None:
        try:
            doc = self.collection.find_one({'_id': todo_id, 'owner_id': owner_id})
        except PyMongoError as e:
            logger.error("Failed to get todo", extra={"todoId": todo_id, "error": str(e)})
            raise RepositoryError("Failed to get todo") from e
        return self._to_domain(doc) if doc else None

    def update(self, owner_id: str, todo_id: str, patch: TodoPatch, now: int) -> Todo | None:
        pipeline = build_update_pipeline(patch, now)
        if not pipeline:
            return self.get(owner_id, todo_id)
        try:
            doc = self.collection.find_one_and_update(
                {'_id': todo_id, 'owner_id': owner_id},
                pipeline,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update todo", extra={"todoId": todo_id, "error": str(e)})
            raise RepositoryError("Failed to update todo") from e
        return self._to_domain(doc) if doc else None

    def delete(self, owner_id: str, todo_id: str) -> Todo | None:
        try:
            doc = self.collection.find_one_and_delete({'_id': todo_id, 'owner_id': owner_id})
        except PyMongoError as e:
            logger.error("Failed to delete todo", extra={"todoId": todo_id, "error": str(e)})
            raise RepositoryError("Failed to delete todo") from e
        return self._to_domain(doc) if doc else None
