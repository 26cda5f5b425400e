#  -*- coding: utf-8 -*-
"""
Test suite for the helpers: identifiers, sanitizing, workspace roots and
logging setup.
"""

from __future__ import annotations

import logging

import pytest

from pathlib import Path

from projectviewer.utils import generate_uuid, sanitize_string
from projectviewer.workspace import Workspace
from projectviewer.logging_config import setup_logging


# ========== ========== ========== ========== Test utils
class TestGenerateUuid:

    def test_is_hex_of_32_chars(self) -> None:
        value = generate_uuid()

        assert len(value) == 32
        int(value, 16)

    def test_is_unique(self) -> None:
        assert len({generate_uuid() for _ in range(100)}) == 100


class TestSanitizeString:

    @pytest.mark.parametrize('raw, expected', [
        ('Foo', 'Foo'),
        ('  Foo  ', 'Foo'),
        ('Acme\t  Corp', 'Acme Corp'),
        ('line\nbreak', 'line break'),
        ('<b>Infra</b>', 'bInfra/b'),
        ('bell\x07', 'bell'),
        ('   ', ''),
    ])
    def test_sanitizes(self, raw: str, expected: str) -> None:
        assert sanitize_string(raw) == expected

    def test_converts_to_string(self) -> None:
        assert sanitize_string(42) == '42'


# ========== ========== ========== ========== Test Workspace
class TestWorkspace:

    def test_add_path(self) -> None:
        workspace = Workspace()

        assert workspace.add_path('/srv/foo') is True
        assert workspace.add_path('/srv/foo') is False
        assert workspace.paths == ['/srv/foo']

    def test_remove_path(self) -> None:
        workspace = Workspace(['/srv/foo', '/srv/bar'])

        assert workspace.remove_path('/srv/foo') is True
        assert workspace.remove_path('/srv/foo') is False
        assert list(workspace) == ['/srv/bar']

    def test_accepts_path_objects(self) -> None:
        workspace = Workspace([Path('/srv/foo')])

        assert '/srv/foo' in workspace
        assert Path('/srv/foo') in workspace

    def test_set_paths(self) -> None:
        workspace = Workspace(['/srv/foo'])

        workspace.set_paths(['/srv/bar', '/srv/bar', '/srv/baz'])

        assert workspace.paths == ['/srv/bar', '/srv/baz']
        assert len(workspace) == 2


# ========== ========== ========== ========== Test logging
class TestSetupLogging:

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger('projectviewer')
        handlers, level = list(logger.handlers), logger.level

        yield

        for handler in logger.handlers:
            handler.close()

        logger.handlers = handlers
        logger.setLevel(level)

    def test_returns_package_logger(self) -> None:
        logger = setup_logging(logging.DEBUG)

        assert logger.name == 'projectviewer'
        assert logger.level == logging.DEBUG

    def test_repeated_calls_do_not_duplicate_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1

    def test_writes_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / 'projectviewer.log'
        setup_logging(log_file=log_file)

        logging.getLogger('projectviewer.engine').info('Created project %r.', 'Foo')

        for handler in logging.getLogger('projectviewer').handlers:
            handler.flush()

        assert "Created project 'Foo'." in log_file.read_text(encoding='utf-8')
