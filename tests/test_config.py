"""Settings helpers and logging setup."""
import importlib
import os
import logging
from pathlib import Path

import pytest

import xlib_host
from xlib_host.core import config as config_module
from xlib_host.core.logging_config import configure_logging


class TestEnvHelpers:

    @pytest.mark.parametrize('raw, expected', [('1', True), ('true', True), (' YES ', True), ('on', True), ('0', False), ('no', False), ('', False)])
    def test_env_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv('XLIB_HOST_TEST_FLAG', raw)
        assert config_module._env_flag('XLIB_HOST_TEST_FLAG') is expected

    def test_env_flag_default(self, monkeypatch):
        monkeypatch.delenv('XLIB_HOST_TEST_FLAG', raising=False)
        assert config_module._env_flag('XLIB_HOST_TEST_FLAG', default=True) is True

    def test_env_path(self, monkeypatch):
        monkeypatch.setenv('XLIB_HOST_TEST_DIR', ' /opt/libs ')
        assert config_module._env_path('XLIB_HOST_TEST_DIR') == Path('/opt/libs')
        monkeypatch.setenv('XLIB_HOST_TEST_DIR', '   ')
        assert config_module._env_path('XLIB_HOST_TEST_DIR') is None


def test_version_defaults_to_package_version(monkeypatch):
    assert isinstance(xlib_host.__version__, str) and xlib_host.__version__
    monkeypatch.delenv('XLIB_HOST_VERSION', raising=False)
    reloaded = importlib.reload(config_module)
    try:
        assert reloaded.Settings().version == xlib_host.__version__
    finally:
        monkeypatch.undo()
        importlib.reload(config_module)


def test_settings_read_environment_and_config_file(monkeypatch, tmp_path):
    names = ('XLIB_HOST_LIBRARY_DIR', 'XLIB_HOST_STRICT_AUTOLOAD', 'XLIB_HOST_LOG_LEVEL')
    env_file = tmp_path / 'config.env'
    env_file.write_text(
        f"XLIB_HOST_LIBRARY_DIR={tmp_path / 'libs'}\n"
        'XLIB_HOST_STRICT_AUTOLOAD=true\n'
        'XLIB_HOST_LOG_LEVEL=DEBUG\n'
    )
    # load_dotenv writes straight into os.environ, outside monkeypatch
    saved = {name: os.environ.pop(name, None) for name in names}
    monkeypatch.setenv('XLIB_HOST_CONFIG_FILE', str(env_file))
    monkeypatch.setenv('XLIB_HOST_VERSION', '2.5.0')
    try:
        s = importlib.reload(config_module).settings
        assert s.library_dir == tmp_path / 'libs'
        assert s.strict_autoload is True
        assert s.log_level == 'DEBUG'
        assert s.version == '2.5.0'
    finally:
        for name, value in saved.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value
        monkeypatch.undo()
        importlib.reload(config_module)


class TestLogging:

    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        before, level = list(root.handlers), root.level
        lib_logger = logging.getLogger('xlib_host.libraries')
        lib_level = lib_logger.level
        yield
        for handler in [h for h in root.handlers if h not in before]:
            root.removeHandler(handler)
        root.setLevel(level)
        lib_logger.setLevel(lib_level)

    def test_idempotent(self):
        root = logging.getLogger()
        configure_logging('warning')
        count = len(root.handlers)
        configure_logging('warning')
        assert len(root.handlers) == count
        assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)
        assert root.level == logging.WARNING

    def test_debug_caps_library_chatter(self):
        configure_logging('DEBUG')
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger('xlib_host.libraries').level == logging.INFO

    def test_explicit_library_level(self):
        configure_logging('INFO', library_level='error')
        assert logging.getLogger('xlib_host.libraries').level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self):
        configure_logging('chatty')
        assert logging.getLogger().level == logging.INFO
