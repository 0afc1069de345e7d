"""
Unit tests for config.settings module.
"""
import logging

from config.settings import Settings, configure_logging


class TestSettings:
    """Tests for environment driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        monkeypatch.delenv('DATABASE_URL', raising=False)
        monkeypatch.delenv('TREE_LEVEL_FIELD', raising=False)
        settings = Settings(_env_file=None)

        assert settings.database_url.startswith('sqlite:///')
        assert settings.database_echo is False
        assert settings.tree_parent_field == 'parent'
        assert settings.tree_level_field is None

    def test_environment_override(self, monkeypatch):
        """Test environment variables are read case-insensitively."""
        monkeypatch.setenv('DATABASE_URL', 'sqlite:///:memory:')
        monkeypatch.setenv('tree_level_field', 'level')
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        settings = Settings(_env_file=None)

        assert settings.database_url == 'sqlite:///:memory:'
        assert settings.tree_level_field == 'level'
        assert settings.log_level == 'debug'

    def test_tree_fields(self):
        """Test tree field names dictionary."""
        settings = Settings(_env_file=None, tree_level_field='level')

        assert settings.get_tree_fields() == {'parent': 'parent', 'level': 'level'}


def test_configure_logging(monkeypatch):
    """Test the level is passed to basicConfig uppercased."""
    calls = {}
    monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.update(kwargs))

    configure_logging('debug')

    assert calls['level'] == 'DEBUG'
