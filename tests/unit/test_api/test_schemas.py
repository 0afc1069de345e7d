"""
Unit tests for api.schemas module.
"""
import pytest
from pydantic import ValidationError

from api.schemas import ChildSort, HierarchyOptions, TreeNodeResponse


class TestHierarchyOptions:
    """Tests for hierarchy option schemas."""

    def test_defaults(self):
        """Test options without child sort."""
        options = HierarchyOptions()

        assert options.child_sort is None
        assert options.to_options() == {}

    def test_alias(self):
        """Test the camel case alias is accepted."""
        options = HierarchyOptions.model_validate({'childSort': {'field': 'title', 'dir': 'DESC'}})

        assert options.child_sort.field == 'title'
        assert options.child_sort.dir == 'desc'
        assert options.to_options() == {'childSort': {'field': 'title', 'dir': 'desc'}}

    def test_invalid_direction(self):
        """Test unknown directions are rejected."""
        with pytest.raises(ValidationError):
            ChildSort(field='title', dir='sideways')


class TestTreeNodeResponse:
    """Tests for assembled tree responses."""

    def test_nested_tree(self, category_repo, category_tree):
        """Test an assembled tree validates recursively."""
        tree = category_repo.children_hierarchy(category_tree['food'])

        response = TreeNodeResponse.model_validate(tree[0])

        assert response.title == 'food'
        assert [child.title for child in response.children] == ['fruits', 'vegetables']
        assert response.children[0].children[0].title == 'apple'

    def test_extra_fields_kept(self):
        """Test domain fields pass through."""
        response = TreeNodeResponse.model_validate(
            {'id': 1, 'title': 'root', 'position': 3, 'children': []}
        )

        assert response.model_dump()['position'] == 3
