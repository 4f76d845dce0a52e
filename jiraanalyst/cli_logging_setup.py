"""
Logging setup and configuration for the Jira AI Analyst CLI and API server.
"""
import os
import logging
import socket
import uuid
from logging.handlers import RotatingFileHandler
from pythonjsonlogger import jsonlogger

from jiraanalyst import __version__
from jiraanalyst.utils.logging import LOGGER_NAME

LOG_FILE = os.environ.get('JIRAANALYST_LOG_FILE', 'jiraanalyst.log')
LOG_LEVEL = os.environ.get('JIRAANALYST_LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = os.environ.get('JIRAANALYST_LOG_FORMAT', 'json').lower()
HOSTNAME = socket.gethostname()
PID = os.getpid()
ENV = os.environ.get('JIRAANALYST_ENV', 'dev')

CONTEXT_FIELDS = [
    'feature', 'source', 'operation', 'stage', 'params', 'status', 'error_type',
    'correlation_id', 'duration_ms', 'output_file', 'issue_count',
]


class AnalystJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for structured logging.
    Adds the standard context fields set by contextual_log plus host/process metadata.
    """
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['asctime'] = getattr(record, 'asctime', self.formatTime(record, self.datefmt))
        log_record['levelname'] = record.levelname
        log_record['name'] = record.name
        log_record['function'] = message_dict.get('function') or getattr(record, 'function', record.funcName)
        log_record['operation_id'] = message_dict.get('operation_id') or getattr(record, 'operation_id', str(uuid.uuid4()))
        for field in CONTEXT_FIELDS:
            log_record[field] = message_dict.get(field) or getattr(record, field, None)
        log_record['env'] = ENV
        log_record['version'] = __version__
        log_record['hostname'] = HOSTNAME
        log_record['pid'] = PID


def setup_logging(log_file: str = None, level: str = None, fmt: str = None) -> logging.Logger:
    """
    Install a rotating file handler (5MB x 5) on the package logger.
    Safe to call more than once; an existing handler for the same file is reused.
    """
    log_file = log_file or LOG_FILE
    level = (level or LOG_LEVEL).upper()
    fmt = (fmt or LOG_FORMAT).lower()
    logger = logging.getLogger(LOGGER_NAME)
    target = os.path.abspath(log_file)
    for existing in logger.handlers:
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == target:
            return logger
    log_dir = os.path.dirname(target)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(target, maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8')
    if fmt == 'json':
        formatter = AnalystJsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
    else:
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
