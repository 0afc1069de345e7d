"""
Unit tests for core.models module.
"""
import pytest
from core.models import TreeConfig, HierarchyRow, TreeRecord
from config.settings import Settings
from data.db_models import CategoryClosure, SectionClosure


class TestTreeConfig:
    """Tests for TreeConfig dataclass."""

    def test_defaults(self):
        """Test parent defaults to 'parent' and level is unset."""
        config = TreeConfig(closure=CategoryClosure)

        assert config.closure is CategoryClosure
        assert config.parent == 'parent'
        assert config.level is None
        assert config.has_level_field is False

    def test_level_field(self):
        """Test a configured level field is reported."""
        config = TreeConfig(closure=SectionClosure, level='level')

        assert config.has_level_field is True

    def test_empty_level_is_not_a_level_field(self):
        """Test an empty level name means computed levels."""
        config = TreeConfig(closure=CategoryClosure, level='')

        assert config.has_level_field is False

    def test_from_settings(self):
        """Test field names are taken from settings."""
        settings = Settings(tree_parent_field='parent', tree_level_field='level')
        config = TreeConfig.from_settings(SectionClosure, settings)

        assert config.closure is SectionClosure
        assert config.parent == 'parent'
        assert config.level == 'level'

    def test_from_settings_without_level(self):
        """Test an unset level setting yields computed levels."""
        settings = Settings(tree_level_field='')
        config = TreeConfig.from_settings(CategoryClosure, settings)

        assert config.level is None


class TestHierarchyRow:
    """Tests for HierarchyRow dataclass."""

    def test_to_dict(self):
        """Test conversion keeps every part of the row."""
        row = HierarchyRow(
            edge={'ancestor_id': 1, 'descendant_id': 2, 'depth': 1},
            node={'id': 2, 'title': 'child'},
            parent_id=1,
            level=2
        )

        result = row.to_dict()

        assert result['edge']['depth'] == 1
        assert result['node'] == {'id': 2, 'title': 'child'}
        assert result['parent_id'] == 1
        assert result['level'] == 2

    def test_to_dict_copies(self):
        """Test the returned dict does not alias the row."""
        row = HierarchyRow(edge={}, node={'id': 1}, parent_id=None, level=1)

        row.to_dict()['node']['id'] = 99

        assert row.node['id'] == 1


class TestTreeRecord:
    """Tests for TreeRecord dataclass."""

    def test_children_default_list(self):
        """Test children defaults to an independent empty list."""
        first = TreeRecord(node={'id': 1})
        first.children.append(3)

        second = TreeRecord(node={'id': 2})

        assert first.children == [3]
        assert second.children == []
