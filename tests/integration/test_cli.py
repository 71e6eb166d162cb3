# Integration tests for the pitlog command line and its configuration

import pytest
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'pitlog-project'))

import pitlog
from commands import config as config_command, log
from utils import config as config_utils, objects
from conftest import MockArgs, object_path, set_ref


def log_args(**kwargs):
    defaults = {'revision': 'HEAD', 'path': None, 'start': None, 'limit': None}
    defaults.update(kwargs)
    return MockArgs(**defaults)


class TestLogCommand:
    # Tests for `pitlog log`

    def test_prints_page_and_next_link(self, linear_history, capsys):
        repo_root, c = linear_history
        log.run(log_args(limit=2))
        out = capsys.readouterr().out

        assert out.startswith('Log - HEAD\n')
        assert f"commit {c['D']} (master)" in out
        assert f"commit {c['C']}" in out
        assert f"commit {c['B']}" not in out
        assert f"Next: /+log/HEAD?s={c['B']}" in out
        assert 'Previous:' not in out

    def test_resume_with_cursor(self, linear_history, capsys):
        repo_root, c = linear_history
        log.run(log_args(revision='master', start=[c['B'][:8]], limit=2))
        out = capsys.readouterr().out

        assert f"commit {c['B']}" in out
        assert f"commit {c['A']}" in out
        assert 'Previous: /+log/master\n' in out
        assert 'Next:' not in out

    def test_limit_from_config(self, linear_history, capsys):
        repo_root, c = linear_history
        config_utils.write_config('log.limit', '1', repo_root)

        log.run(log_args())
        out = capsys.readouterr().out

        assert out.count('\ncommit ') == 1
        assert f"Next: /+log/HEAD?s={c['C']}" in out

    def test_unknown_revision(self, linear_history, capsys):
        with pytest.raises(SystemExit) as excinfo:
            log.run(log_args(revision='nope'))
        assert excinfo.value.code == 1
        assert 'unknown revision' in capsys.readouterr().err

    def test_bad_cursor(self, linear_history, capsys):
        with pytest.raises(SystemExit) as excinfo:
            log.run(log_args(start=['zzz']))
        assert excinfo.value.code == 1
        assert 'not found' in capsys.readouterr().err

    def test_corrupt_store(self, linear_history, capsys):
        repo_root, c = linear_history
        tag_id = objects.write_tag(repo_root, c['A'], 'v0', 'Bot <bot@example.com> 1700000000 +0000', 'v0')
        set_ref(repo_root, 'refs/tags/v0', tag_id)
        with open(object_path(repo_root, tag_id), 'wb') as f:
            f.write(b'garbage')

        with pytest.raises(SystemExit) as excinfo:
            log.run(log_args())
        assert excinfo.value.code == 128
        assert capsys.readouterr().err.startswith('fatal:')

    def test_not_a_repository(self, temp_dir, capsys):
        os.chdir(temp_dir)
        with pytest.raises(SystemExit) as excinfo:
            log.run(log_args())
        assert excinfo.value.code == 1
        assert 'not a pit repository' in capsys.readouterr().err

    def test_main_entry_point(self, linear_history, capsys):
        repo_root, c = linear_history
        pitlog.main(['log', 'master', '-n', '1'])
        out = capsys.readouterr().out

        assert f"commit {c['D']}" in out
        assert f"Next: /+log/master?s={c['C']}" in out

    def test_main_rejects_negative_limit(self, linear_history):
        with pytest.raises(SystemExit) as excinfo:
            pitlog.main(['log', '-n', '-1'])
        assert excinfo.value.code == 2


class TestConfig:
    # Tests for `pitlog config` and utils/config.get_log_config()

    def test_defaults(self, temp_repo):
        assert config_utils.get_log_config(temp_repo) == {'limit': 100, 'rename_threshold': 50}

    def test_config_command_writes_value(self, temp_repo, capsys):
        config_command.run(MockArgs(key='log.renameThreshold', value='70'))

        assert config_utils.get_log_config(temp_repo)['rename_threshold'] == 70
        assert "Set log.renameThreshold to '70'" in capsys.readouterr().out

    def test_config_command_rejects_non_integer(self, temp_repo):
        with pytest.raises(SystemExit) as excinfo:
            config_command.run(MockArgs(key='log.limit', value='many'))
        assert excinfo.value.code == 1

    def test_invalid_values_in_file(self, temp_repo):
        with open(config_utils.get_config_path(temp_repo), 'a') as f:
            f.write('[log]\nlimit = lots\n')
        with pytest.raises(ValueError):
            config_utils.get_log_config(temp_repo)

    def test_threshold_above_100(self, temp_repo):
        config_utils.write_config('log.renameThreshold', '150', temp_repo)
        with pytest.raises(ValueError):
            config_utils.get_log_config(temp_repo)

    def test_bad_key_format(self, temp_repo):
        with pytest.raises(ValueError):
            config_utils.write_config('nodot', '1', temp_repo)
