#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Configuration
Environment-driven configuration with validation

Version: 1.0.0
Date: 2026-10-19
"""

import os
import sys
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass
from enum import Enum

import pytz

class Environment(Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

@dataclass
class StorageConfig:
    """Where the document lives"""
    path: Path
    key: str = "increment_app_arcs_v1"

@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    debug_mode: bool = False

class AppConfig:
    """Main configuration object"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Read settings from environment variables"""

        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        self.storage = StorageConfig(
            path=Path(os.getenv('STORAGE_FILE', str(self.data_dir / "increment_storage.json"))),
            key=os.getenv('STORAGE_KEY', 'increment_app_arcs_v1'),
        )

        self.server = ServerConfig(
            host=os.getenv('HOST', '127.0.0.1'),
            port=int(os.getenv('PORT', 8000)),
            debug_mode=os.getenv('DEBUG_MODE', 'false').lower() == 'true',
        )

        self.timezone = os.getenv('TIMEZONE', 'UTC')
        self.review_weeks = int(os.getenv('REVIEW_WEEKS', 6))

        # Logging
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = os.getenv('LOG_TO_FILE', 'true').lower() == 'true'
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        errors = []

        if self.timezone not in pytz.all_timezones_set:
            errors.append(f"Unknown TIMEZONE {self.timezone!r}")

        if not 1 <= self.server.port <= 65535:
            errors.append(f"Port {self.server.port} is out of range (1-65535)")

        if self.review_weeks < 1:
            errors.append("REVIEW_WEEKS must be at least 1")

        if not self.storage.key:
            errors.append("STORAGE_KEY must not be empty")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"- {error}" for error in errors))

    def ensure_directories(self):
        for directory in (self.storage.path.parent, self.log_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """dictConfig mapping for utils.logger.setup_logger"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stderr
                },
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'uvicorn.access': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
            }
        }
        if self.log_to_file:
            logging_config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"increment_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }
        return logging_config

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'environment': self.environment.value,
            'storage_path': str(self.storage.path),
            'storage_key': self.storage.key,
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug_mode': self.server.debug_mode
            },
            'timezone': self.timezone,
            'review_weeks': self.review_weeks,
            'log_level': self.log_level.value
        }

__all__ = [
    'AppConfig',
    'Environment',
    'LogLevel',
    'StorageConfig',
    'ServerConfig',
]
