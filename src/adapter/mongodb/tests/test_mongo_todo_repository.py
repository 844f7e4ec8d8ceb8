"""Tests for MongoTodoRepository against a mocked collection."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from pymongo import ReturnDocument
from pymongo.errors import OperationFailure, PyMongoError

from adapter.mongodb.indexes import IndexSpec, ensure_index
from adapter.mongodb.todo_repository import MongoTodoRepository, build_update_pipeline
from domain.model.errors import RepositoryError
from domain.model.todo import Todo, TodoPatch


class TestBuildUpdatePipeline(unittest.TestCase):

    def test_complete_keeps_existing_stamp(self):
        pipeline = build_update_pipeline(TodoPatch(is_completed=True), now=1000)

        self.assertEqual(pipeline, [{'$set': {
            'is_completed': True,
            'completed_at': {'$ifNull': ['$completed_at', 1000]},
        }}])

    def test_uncomplete_unsets_stamp(self):
        pipeline = build_update_pipeline(TodoPatch(text='x', is_completed=False), now=1000)

        self.assertEqual(pipeline, [
            {'$set': {'text': {'$literal': 'x'}, 'is_completed': False}},
            {'$unset': 'completed_at'},
        ])

    def test_text_is_literal(self):
        pipeline = build_update_pipeline(TodoPatch(text='$owner_id'), now=1)

        self.assertEqual(pipeline, [{'$set': {'text': {'$literal': '$owner_id'}}}])

    def test_empty_patch(self):
        self.assertEqual(build_update_pipeline(TodoPatch(), now=1), [])


class TestMongoTodoRepository(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        db = MagicMock()
        db.__getitem__.return_value = self.collection
        self.repo = MongoTodoRepository(db)
        self.now = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)
        self.doc = {
            '_id': 'todo-1',
            'owner_id': 'owner-1',
            'text': 'buy milk',
            'is_completed': True,
            'completed_at': 1000,
            'created_at': self.now,
        }

    def test_create_omits_absent_completed_at(self):
        todo = Todo(id='todo-1', owner_id='owner-1', text='buy milk', created_at=self.now)

        self.repo.create(todo)

        doc = self.collection.insert_one.call_args[0][0]
        self.assertNotIn('completed_at', doc)
        self.assertEqual(doc['owner_id'], 'owner-1')
        self.assertFalse(doc['is_completed'])

    def test_get_filters_on_owner(self):
        self.collection.find_one.return_value = self.doc

        todo = self.repo.get('owner-1', 'todo-1')

        self.assertEqual(todo.completed_at, 1000)
        self.collection.find_one.assert_called_once_with({'_id': 'todo-1', 'owner_id': 'owner-1'})

    def test_list_by_owner(self):
        self.collection.find.return_value.sort.return_value = [self.doc]

        todos = self.repo.list_by_owner('owner-1')

        self.assertEqual([t.id for t in todos], ['todo-1'])
        self.collection.find.assert_called_once_with({'owner_id': 'owner-1'})

    def test_update_is_single_atomic_call(self):
        self.collection.find_one_and_update.return_value = self.doc

        todo = self.repo.update('owner-1', 'todo-1', TodoPatch(is_completed=True), now=2000)

        self.assertTrue(todo.is_completed)
        args, kwargs = self.collection.find_one_and_update.call_args
        self.assertEqual(args[0], {'_id': 'todo-1', 'owner_id': 'owner-1'})
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)

    def test_update_not_found(self):
        self.collection.find_one_and_update.return_value = None

        self.assertIsNone(self.repo.update('owner-2', 'todo-1', TodoPatch(text='x'), now=1))

    def test_empty_update_reads_current(self):
        self.collection.find_one.return_value = self.doc

        todo = self.repo.update('owner-1', 'todo-1', TodoPatch(), now=1)

        self.assertEqual(todo.id, 'todo-1')
        self.collection.find_one_and_update.assert_not_called()

    def test_delete(self):
        self.collection.find_one_and_delete.return_value = self.doc

        todo = self.repo.delete('owner-1', 'todo-1')

        self.assertEqual(todo.text, 'buy milk')
        self.collection.find_one_and_delete.assert_called_once_with({'_id': 'todo-1', 'owner_id': 'owner-1'})

    def test_storage_failure_raises(self):
        self.collection.find_one_and_delete.side_effect = PyMongoError('boom')

        with self.assertRaises(RepositoryError):
            self.repo.delete('owner-1', 'todo-1')


class TestEnsureIndex(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.spec = IndexSpec('idx_todos_owner', (('owner_id', 1),))

    def test_creates_index(self):
        self.assertTrue(ensure_index(self.collection, self.spec))
        self.collection.create_index.assert_called_once_with(
            [('owner_id', 1)], name='idx_todos_owner', unique=False,
        )

    def test_replaces_renamed_index(self):
        self.collection.create_index.side_effect = [
            OperationFailure('Index already exists with a different name'),
            'idx_todos_owner',
        ]
        self.collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'owner_id_1': {'key': [('owner_id', 1)]},
        }

        self.assertTrue(ensure_index(self.collection, self.spec))
        self.collection.drop_index.assert_called_once_with('owner_id_1')

    def test_unrelated_error_propagates(self):
        self.collection.create_index.side_effect = OperationFailure('not authorized')

        with self.assertRaises(OperationFailure):
            ensure_index(self.collection, self.spec)


if __name__ == '__main__':
    unittest.main()
