import logging
import subprocess
import sys
from pathlib import Path

import structlog

from budget_insights.log import configure_logging, get_logger

REPO_ROOT = Path(__file__).resolve().parents[1]

HOST_SETUP = """
import logging
import structlog

logging.getLogger().setLevel(logging.WARNING)
structlog.configure(processors=[structlog.processors.JSONRenderer()])
before = structlog.get_config()['processors']

import budget_insights
import budget_insights.storage

print(logging.getLevelName(logging.getLogger().level))
print(structlog.get_config()['processors'] is before)
"""


def test_import_leaves_host_logging_alone():
    result = subprocess.run(
        [sys.executable, '-c', HOST_SETUP],
        cwd=REPO_ROOT,
        capture_output=True,
        text=True,
        check=True,
    )

    assert result.stdout.split() == ['WARNING', 'True']


def test_configure_logging_sets_root_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging(level='debug')
        assert root.level == logging.DEBUG
        get_logger('budget_insights.test').debug('configured')
    finally:
        root.setLevel(previous)
        structlog.reset_defaults()
