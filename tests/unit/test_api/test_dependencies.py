"""
Unit tests for api.dependencies module.
"""
from api.dependencies import get_tree_repository
from data.db_models import Category, CategoryClosure


class TestGetTreeRepository:
    """Tests for repository injection."""

    def test_repository_configured(self, test_db_session):
        """Test the repository is bound to the given session and type."""
        repo = get_tree_repository(Category, CategoryClosure, test_db_session)

        assert repo.session is test_db_session
        assert repo.node_class is Category
        assert repo.accessor.closure is CategoryClosure
        assert repo.get_root_nodes() == []
