"""
Tests for the init_db command line tool.
"""
from sqlalchemy import create_engine, inspect

import init_db


class TestInitDb:
    """Tests for database initialization."""

    def test_creates_tables(self, tmp_path):
        """Test every tree table is created."""
        url = f"sqlite:///{tmp_path / 'tree.db'}"

        assert init_db.main(['--database-url', url]) == 0

        tables = set(inspect(create_engine(url)).get_table_names())
        assert {'categories', 'category_closure', 'sections', 'section_closure'} <= tables

    def test_drop_aborted(self, tmp_path, monkeypatch):
        """Test declining the drop confirmation aborts."""
        url = f"sqlite:///{tmp_path / 'tree.db'}"
        monkeypatch.setattr('builtins.input', lambda prompt: 'no')

        assert init_db.main(['--database-url', url, '--drop-existing']) == 1

    def test_drop_confirmed(self, tmp_path):
        """Test --yes skips the confirmation."""
        url = f"sqlite:///{tmp_path / 'tree.db'}"
        init_db.main(['--database-url', url])

        assert init_db.main(['--database-url', url, '--drop-existing', '--yes']) == 0
