"""Tests for structured JSON logging."""

import json
import sys
import logging
import unittest
from datetime import datetime, timezone

from utils.logging import JSONFormatter, setup_structured_logging


class TestJSONFormatter(unittest.TestCase):

    def _record(self, msg='Todo created', **extra):
        record = logging.LogRecord('services.todo_service', logging.INFO, __file__, 1, msg, None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(self._record()))

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'services.todo_service')
        self.assertEqual(data['message'], 'Todo created')
        self.assertEqual(data['service'], 'todo-api')
        self.assertTrue(data['timestamp'].endswith('Z'))

    def test_extra_fields_included(self):
        data = json.loads(JSONFormatter().format(self._record(todoId='t-1', userId='u-1')))

        self.assertEqual(data['todoId'], 't-1')
        self.assertEqual(data['userId'], 'u-1')
        self.assertNotIn('pathname', data)

    def test_non_json_values_stringified(self):
        data = json.loads(JSONFormatter().format(self._record(when=datetime(2026, 1, 1, tzinfo=timezone.utc))))

        self.assertEqual(data['when'], '2026-01-01 00:00:00+00:00')

    def test_exception_included(self):
        try:
            raise ValueError('boom')
        except ValueError:
            record = logging.LogRecord('x', logging.ERROR, __file__, 1, 'failed', None, sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        self.assertIn('ValueError: boom', data['exception'])


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        self.root = logging.getLogger()
        self._handlers = self.root.handlers[:]
        self._level = self.root.level

    def tearDown(self):
        self.root.handlers = self._handlers
        self.root.setLevel(self._level)

    def test_installs_json_handler(self):
        setup_structured_logging('debug')

        self.assertEqual(self.root.level, logging.DEBUG)
        self.assertEqual(len(self.root.handlers), 1)
        self.assertIsInstance(self.root.handlers[0].formatter, JSONFormatter)


if __name__ == '__main__':
    unittest.main()
