"""
Tests for the logger implementations and the encoder's use of them.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from structmap import ConsoleLogger, NullLogger, Struct


@dataclass
class Handle:
    _fd: int = 3


@dataclass
class Resource:
    path: str
    handle: Handle


def test_console_logger_quiet_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    logger = ConsoleLogger()

    logger.debug('d')
    logger.info('i')
    logger.warning('w')
    logger.error('e')

    assert capsys.readouterr().out == '[WARNING] w\n[ERROR] e\n'


def test_console_logger_verbose(capsys: pytest.CaptureFixture[str]) -> None:
    logger = ConsoleLogger(verbose=True)

    logger.debug('d')
    logger.info('i')

    assert capsys.readouterr().out == '[DEBUG] d\n[INFO] i\n'


def test_null_logger_is_silent(capsys: pytest.CaptureFixture[str]) -> None:
    logger = NullLogger()

    logger.debug('d')
    logger.info('i')
    logger.warning('w')
    logger.error('e')

    assert capsys.readouterr().out == ''


def test_encoder_reports_opaque_records(capsys: pytest.CaptureFixture[str]) -> None:
    result = Struct(Resource('/tmp/x', Handle()), logger=ConsoleLogger(verbose=True)).map()

    assert result == {'path': '/tmp/x', 'handle': Handle()}
    assert 'Handle has no exported fields' in capsys.readouterr().out


def test_encoder_is_silent_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    Struct(Resource('/tmp/x', Handle())).map()

    assert capsys.readouterr().out == ''
