"""
Pytest configuration and global fixtures.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.models import TreeConfig
from data.database import build_engine
from data.db_models import Base, Category, CategoryClosure, Section, SectionClosure
from data.repositories import ClosureTreeRepository


@pytest.fixture
def test_db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_db_engine):
    return sessionmaker(bind=test_db_engine, autoflush=False)


@pytest.fixture
def test_db_session(session_factory):
    """Create fresh database session for each test."""
    session = session_factory()

    yield session

    # Rollback any uncommitted changes and close
    session.rollback()
    session.close()


@pytest.fixture
def category_config():
    return TreeConfig(closure=CategoryClosure)


@pytest.fixture
def section_config():
    return TreeConfig(closure=SectionClosure, level='level')


@pytest.fixture
def category_repo(test_db_session, category_config):
    return ClosureTreeRepository(test_db_session, Category, category_config)


@pytest.fixture
def section_repo(test_db_session, section_config):
    return ClosureTreeRepository(test_db_session, Section, section_config)


def add_node(repo, title, parent=None, position=0):
    """Persist a node of the repository's type under parent."""
    node = repo.node_class(title=title, parent=parent, position=position)
    return repo.persist(node)


def build_tree(repo):
    """
    Build and commit the fixture tree:

        food
        ├── fruits
        │   ├── apple
        │   └── banana
        └── vegetables
            └── carrot
        drinks
    """
    nodes = {}
    nodes['food'] = add_node(repo, 'food', position=1)
    nodes['fruits'] = add_node(repo, 'fruits', nodes['food'], position=2)
    nodes['apple'] = add_node(repo, 'apple', nodes['fruits'], position=2)
    nodes['banana'] = add_node(repo, 'banana', nodes['fruits'], position=1)
    nodes['vegetables'] = add_node(repo, 'vegetables', nodes['food'], position=1)
    nodes['carrot'] = add_node(repo, 'carrot', nodes['vegetables'])
    nodes['drinks'] = add_node(repo, 'drinks', position=2)
    repo.session.commit()
    return nodes


def closure_edges(session, closure):
    """All closure rows as (ancestor_id, descendant_id, depth) tuples."""
    rows = session.execute(
        select(closure.ancestor_id, closure.descendant_id, closure.depth)
    ).all()
    return {tuple(row) for row in rows}


def expected_edges(session, node_class):
    """Closure rows implied by following parent_id links."""
    parents = dict(session.execute(select(node_class.id, node_class.parent_id)).all())
    edges = set()
    for node_id in parents:
        ancestor, depth = node_id, 0
        while ancestor is not None:
            edges.add((ancestor, node_id, depth))
            ancestor, depth = parents[ancestor], depth + 1
    return edges


def titles(tree):
    """Reduce an assembled tree to (title, children) tuples."""
    return [(node['title'], titles(node['children'])) for node in tree]


@pytest.fixture
def category_tree(category_repo):
    return build_tree(category_repo)


@pytest.fixture
def section_tree(section_repo):
    return build_tree(section_repo)
