#!/usr/bin/env python3
"""
Configuration and CLI tests
"""

import io
import json
import logging
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import date
from pathlib import Path
from unittest.mock import patch
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import AppConfig, Environment
from core.database import Database
from dashboard.config import DashboardSettings
from utils.datetime_utils import today_provider
from utils.logger import setup_logger
import main

import pytz


class TestAppConfig(unittest.TestCase):

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
        self.assertEqual(config.environment, Environment.DEVELOPMENT)
        self.assertEqual(config.storage.key, 'increment_app_arcs_v1')
        self.assertEqual(config.server.port, 8000)
        self.assertEqual(config.review_weeks, 6)
        self.assertTrue(config.is_development())

    def test_invalid_values_are_collected(self):
        env = {'TIMEZONE': 'Mars/Olympus', 'PORT': '70000', 'REVIEW_WEEKS': '0'}
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ValueError) as ctx:
                AppConfig()
        message = str(ctx.exception)
        self.assertIn('TIMEZONE', message)
        self.assertIn('70000', message)
        self.assertIn('REVIEW_WEEKS', message)

    def test_logging_config_without_file(self):
        with patch.dict(os.environ, {'LOG_TO_FILE': 'false', 'LOG_LEVEL': 'debug'}, clear=True):
            config = AppConfig()
        logging_config = config.get_logging_config()
        self.assertNotIn('file', logging_config['handlers'])
        self.assertEqual(logging_config['loggers']['']['handlers'], ['console'])
        self.assertEqual(logging_config['handlers']['console']['level'], 'DEBUG')


class TestSetupLogger(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.root = logging.getLogger()
        self.saved_handlers = self.root.handlers[:]
        self.saved_level = self.root.level

    def tearDown(self):
        for handler in self.root.handlers:
            if handler not in self.saved_handlers:
                handler.close()
        self.root.handlers = self.saved_handlers
        self.root.setLevel(self.saved_level)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_file_handler_directory_is_created(self):
        log_dir = os.path.join(self.temp_dir, 'nested', 'logs')
        env = {'LOG_DIR': log_dir, 'LOG_TO_FILE': 'true', 'ENVIRONMENT': 'testing'}
        with patch.dict(os.environ, env, clear=True):
            config = AppConfig()

        setup_logger(config.get_logging_config())
        logging.getLogger('increment.test').warning('written to file')
        for handler in self.root.handlers:
            handler.flush()

        log_file = Path(log_dir) / 'increment_testing.log'
        self.assertTrue(log_file.exists())
        self.assertIn('written to file', log_file.read_text(encoding='utf-8'))


class TestDashboardSettings(unittest.TestCase):

    def test_origins_and_docs(self):
        settings = DashboardSettings(ALLOWED_ORIGINS='http://a.test, http://b.test', ENVIRONMENT='Production')
        self.assertEqual(settings.allowed_origins, ['http://a.test', 'http://b.test'])
        self.assertEqual(settings.ENVIRONMENT, 'production')
        self.assertFalse(settings.docs_enabled)

    def test_unknown_environment(self):
        with self.assertRaises(ValueError):
            DashboardSettings(ENVIRONMENT='staging')


class TestTodayProvider(unittest.TestCase):

    def test_unknown_zone_fails_fast(self):
        with self.assertRaises(pytz.UnknownTimeZoneError):
            today_provider('Mars/Olympus')

    def test_provider_returns_date(self):
        self.assertIsInstance(today_provider('Europe/Moscow')(), date)


class TestCli(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.env = {
            'DATA_DIR': self.temp_dir,
            'LOG_DIR': os.path.join(self.temp_dir, 'logs'),
            'LOG_TO_FILE': 'false',
            'LOG_LEVEL': 'WARNING',
        }
        self.storage_file = Path(self.temp_dir) / 'increment_storage.json'

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def run_cli(self, *argv):
        out = io.StringIO()
        with patch.dict(os.environ, self.env, clear=True), redirect_stdout(out):
            code = main.main(list(argv))
        return code, out.getvalue()

    def test_status_on_empty_store(self):
        code, out = self.run_cli('status')
        self.assertEqual(code, 0)
        summary = json.loads(out)
        self.assertEqual(summary['load'], 0)
        self.assertEqual(summary['habits'], [])

    def test_review_prints_requested_weeks(self):
        code, out = self.run_cli('review', '--weeks', '3')
        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(out)), 3)

    def test_review_with_zero_weeks_is_empty(self):
        code, out = self.run_cli('review', '--weeks', '0')
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [])

    def test_reset_requires_confirmation(self):
        Database.from_file(self.storage_file).habits.create('Read')

        code, _ = self.run_cli('reset')
        self.assertEqual(code, 2)
        self.assertEqual(len(Database.from_file(self.storage_file).habits.find_many()), 1)

        code, _ = self.run_cli('reset', '--yes')
        self.assertEqual(code, 0)
        self.assertEqual(Database.from_file(self.storage_file).habits.find_many(), [])

    def test_bad_configuration_exits_with_2(self):
        self.env['PORT'] = '0'
        code, _ = self.run_cli('status')
        self.assertEqual(code, 2)


if __name__ == '__main__':
    unittest.main()
