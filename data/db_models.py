"""
Database models for closure table trees.

Each managed node type has its own node table with a nullable parent
reference and a companion closure table holding one row per
(ancestor, descendant) pair, including a depth 0 self edge per node.
"""
from sqlalchemy import Column, Integer, String, ForeignKey, Index
from sqlalchemy.orm import declarative_base, declared_attr, relationship

Base = declarative_base()


class ClosureMixin:
    """
    Columns and relationships shared by every closure table.

    Subclasses set ``__node_table__`` and ``__node_class__`` to the node
    table name and mapped class name they index.
    """

    __node_table__ = None
    __node_class__ = None

    depth = Column(Integer, nullable=False)  # 0 = self, 1 = child, etc.

    @declared_attr
    def ancestor_id(cls):
        return Column(
            Integer,
            ForeignKey(f'{cls.__node_table__}.id', ondelete='CASCADE'),
            primary_key=True
        )

    @declared_attr
    def descendant_id(cls):
        return Column(
            Integer,
            ForeignKey(f'{cls.__node_table__}.id', ondelete='CASCADE'),
            primary_key=True
        )

    @declared_attr
    def ancestor(cls):
        return relationship(
            cls.__node_class__,
            foreign_keys=f'{cls.__name__}.ancestor_id'
        )

    @declared_attr
    def descendant(cls):
        return relationship(
            cls.__node_class__,
            foreign_keys=f'{cls.__name__}.descendant_id'
        )

    @declared_attr
    def __table_args__(cls):
        return (
            Index(f'ix_{cls.__tablename__}_descendant', 'descendant_id'),
        )

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'ancestor_id': self.ancestor_id,
            'descendant_id': self.descendant_id,
            'depth': self.depth
        }

    def __repr__(self):
        return (
            f"<{type(self).__name__}(ancestor={self.ancestor_id}, "
            f"descendant={self.descendant_id}, depth={self.depth})>"
        )


class Category(Base):
    """Tree node whose level is computed from its closure edges."""

    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    position = Column(Integer, default=0)

    # Hierarchy
    parent_id = Column(Integer, ForeignKey('categories.id', ondelete='SET NULL'), index=True)
    parent = relationship('Category', remote_side=[id], backref='children')

    def __repr__(self):
        return f"<Category(id={self.id}, title={self.title}, parent_id={self.parent_id})>"

    def to_dict(self):
        """Convert to dictionary for API responses."""
        return {
            'id': self.id,
            'title': self.title,
            'position': self.position,
            'parent_id': self.parent_id
        }


class CategoryClosure(ClosureMixin, Base):
    """Closure edges of the category tree."""

    __tablename__ = 'category_closure'
    __node_table__ = 'categories'
    __node_class__ = 'Category'


class Section(Base):
    """Tree node with a stored level column (roots are level 1)."""

    __tablename__ = 'sections'

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    position = Column(Integer, default=0)
    level = Column(Integer, nullable=False, default=1)

    # Hierarchy
    parent_id = Column(Integer, ForeignKey('sections.id', ondelete='SET NULL'), index=True)
    parent = relationship('Section', remote_side=[id], backref='children')

    def __repr__(self):
        return f"<Section(id={self.id}, title={self.title}, level={self.level})>"

    def to_dict(self):
        """Convert to dictionary for API responses."""
        return {
            'id': self.id,
            'title': self.title,
            'position': self.position,
            'level': self.level,
            'parent_id': self.parent_id
        }


class SectionClosure(ClosureMixin, Base):
    """Closure edges of the section tree."""

    __tablename__ = 'section_closure'
    __node_table__ = 'sections'
    __node_class__ = 'Section'
