"""Unit tests for todo_service module."""

import unittest

from adapter.fake.todo_repository import FakeTodoRepository
from domain.model.errors import NotFoundError, ValidationError
from domain.model.identifiers import new_id
from services import todo_service

OWNER = 'a' * 32
OTHER = 'b' * 32


class TestTodoService(unittest.TestCase):

    def setUp(self):
        self.repo = FakeTodoRepository()
        self.todo = todo_service.create_todo(self.repo, OWNER, 'buy milk')

    def test_create_todo(self):
        self.assertEqual(self.todo.text, 'buy milk')
        self.assertEqual(self.todo.owner_id, OWNER)
        self.assertFalse(self.todo.is_completed)
        self.assertIsNone(self.todo.completed_at)

    def test_create_rejects_blank_text(self):
        with self.assertRaises(ValidationError):
            todo_service.create_todo(self.repo, OWNER, '   ')
        self.assertEqual(len(self.repo.store), 1)

    def test_list_is_owner_scoped(self):
        todo_service.create_todo(self.repo, OTHER, 'walk dog')

        todos = todo_service.list_todos(self.repo, OWNER)

        self.assertEqual([t.text for t in todos], ['buy milk'])

    def test_get_twice_is_stable(self):
        first = todo_service.get_todo(self.repo, OWNER, self.todo.id)
        second = todo_service.get_todo(self.repo, OWNER, self.todo.id)

        self.assertEqual(first, second)

    def test_not_found_is_uniform(self):
        for owner, todo_id in [(OWNER, '123'), (OWNER, new_id()), (OTHER, self.todo.id)]:
            with self.assertRaises(NotFoundError):
                todo_service.get_todo(self.repo, owner, todo_id)
            with self.assertRaises(NotFoundError):
                todo_service.update_todo(self.repo, owner, todo_id, is_completed=True)
            with self.assertRaises(NotFoundError):
                todo_service.delete_todo(self.repo, owner, todo_id)
        # foreign attempts left the todo untouched
        self.assertEqual(self.repo.store[self.todo.id], self.todo)

    def test_update_completion_cycle(self):
        done = todo_service.update_todo(self.repo, OWNER, self.todo.id, is_completed=True)
        self.assertTrue(done.is_completed)
        self.assertIsInstance(done.completed_at, int)

        pending = todo_service.update_todo(self.repo, OWNER, self.todo.id, is_completed=False)
        self.assertFalse(pending.is_completed)
        self.assertIsNone(pending.completed_at)

    def test_update_text(self):
        updated = todo_service.update_todo(self.repo, OWNER, self.todo.id, text='  buy oat milk ')

        self.assertEqual(updated.text, 'buy oat milk')

    def test_update_rejects_blank_text(self):
        with self.assertRaises(ValidationError):
            todo_service.update_todo(self.repo, OWNER, self.todo.id, text='')

    def test_malformed_id_wins_over_bad_patch(self):
        with self.assertRaises(NotFoundError):
            todo_service.update_todo(self.repo, OWNER, '123', text='')

    def test_delete_returns_snapshot(self):
        deleted = todo_service.delete_todo(self.repo, OWNER, self.todo.id)

        self.assertEqual(deleted.id, self.todo.id)
        self.assertNotIn(self.todo.id, self.repo.store)
        with self.assertRaises(NotFoundError):
            todo_service.get_todo(self.repo, OWNER, self.todo.id)


if __name__ == '__main__':
    unittest.main()
