"""Tests for the notion-sync command line entry point."""

import logging
from unittest.mock import patch

import pytest

import sync
from fetchers import NetworkFailure
from logger import LOGGER_NAME
from models import SyncStatus


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ('NOTION_KEY', 'DATABASE_ID'):
        monkeypatch.setenv(name, 'placeholder')
        monkeypatch.delenv(name)
    return tmp_path


def env_args(tmp_path, *args):
    return ['--env-file', str(tmp_path / '.env'), *args]


class TestArgumentParser:
    def test_defaults(self):
        args = sync.create_argument_parser().parse_args([])
        assert args.published is False
        assert args.config is None
        assert args.verbose == 0

    def test_flags(self):
        args = sync.create_argument_parser().parse_args(
            ['-p', '--config', 'c.yaml', '--output-dir', 'out', '-vv', '--log-file', 'x.log']
        )
        assert args.published is True
        assert args.config == 'c.yaml'
        assert args.output_dir == 'out'
        assert args.verbose == 2
        assert args.log_file == 'x.log'

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            sync.create_argument_parser().parse_args(['--version'])
        assert exc_info.value.code == 0
        assert sync.__version__ in capsys.readouterr().out


class TestMain:
    def test_missing_credentials_exit_2(self, env, capsys):
        exit_code = sync.main(env_args(env))

        assert exit_code == 2
        assert 'NOTION_KEY' in capsys.readouterr().err

    def test_missing_config_file_exit_2(self, env, capsys):
        exit_code = sync.main(env_args(env, '--config', str(env / 'nope.yaml')))

        assert exit_code == 2
        assert 'File not found' in capsys.readouterr().err

    def test_successful_run(self, env, monkeypatch, capsys):
        monkeypatch.setenv('NOTION_KEY', 'secret_abc')
        monkeypatch.setenv('DATABASE_ID', 'db-1')
        results = [
            SyncStatus(page_id='a', page_title='A', status='written', output_path='x.md'),
            SyncStatus(page_id='b', page_title='B', status='skipped'),
        ]

        with patch.object(sync.SyncOrchestrator, 'run', return_value=results) as run:
            exit_code = sync.main(env_args(env, '--published', '--output-dir', str(env / 'out')))

        assert exit_code == 0
        run.assert_called_once_with(published_only=True)
        assert 'Synced 1 page(s)' in capsys.readouterr().out

    def test_fetch_failure_exit_1(self, env, monkeypatch, capsys):
        monkeypatch.setenv('NOTION_KEY', 'secret_abc')
        monkeypatch.setenv('DATABASE_ID', 'db-1')

        with patch.object(sync.SyncOrchestrator, 'run', side_effect=NetworkFailure('timeout')):
            exit_code = sync.main(env_args(env))

        assert exit_code == 1
        assert 'timeout' in capsys.readouterr().err

    def test_keyboard_interrupt_exit_130(self, env, monkeypatch):
        monkeypatch.setenv('NOTION_KEY', 'secret_abc')
        monkeypatch.setenv('DATABASE_ID', 'db-1')

        with patch.object(sync.SyncOrchestrator, 'run', side_effect=KeyboardInterrupt):
            assert sync.main(env_args(env)) == 130

    def test_error_during_run_is_not_reported_as_configuration_error(self, env, monkeypatch, capsys):
        monkeypatch.setenv('NOTION_KEY', 'secret_abc')
        monkeypatch.setenv('DATABASE_ID', 'db-1')

        with patch.object(sync.SyncOrchestrator, 'run', side_effect=ValueError('bad block')):
            exit_code = sync.main(env_args(env))

        assert exit_code == 1
        err = capsys.readouterr().err
        assert 'Configuration error' not in err
        assert 'bad block' in err

    def test_invalid_log_level_exit_2(self, env, monkeypatch, capsys):
        monkeypatch.setenv('NOTION_KEY', 'secret_abc')
        monkeypatch.setenv('DATABASE_ID', 'db-1')
        config_file = env / 'config.yaml'
        config_file.write_text('logging:\n  level: LOUD\n', encoding='utf-8')

        exit_code = sync.main(env_args(env, '--config', str(config_file)))

        assert exit_code == 2
        assert 'Configuration error' in capsys.readouterr().err

    def test_malformed_config_file_exit_2(self, env, capsys):
        config_file = env / 'config.yaml'
        config_file.write_text('notion: [unclosed\n', encoding='utf-8')

        exit_code = sync.main(env_args(env, '--config', str(config_file)))

        assert exit_code == 2
        assert 'Invalid configuration file' in capsys.readouterr().err
