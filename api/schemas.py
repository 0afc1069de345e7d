"""
Pydantic schemas for tree request options and responses.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChildSort(BaseModel):
    """Secondary ordering of siblings in a hierarchy."""
    field: str
    dir: Literal['asc', 'desc'] = 'asc'

    @field_validator('dir', mode='before')
    @classmethod
    def lowercase_dir(cls, value):
        return value.lower() if isinstance(value, str) else value


class HierarchyOptions(BaseModel):
    """Options for nodes hierarchy queries."""
    model_config = ConfigDict(populate_by_name=True)

    child_sort: Optional[ChildSort] = Field(default=None, alias='childSort')

    def to_options(self) -> Dict[str, Any]:
        """Convert to the plain options mapping accepted by the query builder."""
        if self.child_sort is None:
            return {}
        return {'childSort': self.child_sort.model_dump()}


class TreeNodeResponse(BaseModel):
    """Response for one node of an assembled tree."""
    model_config = ConfigDict(extra='allow')

    id: int
    title: str
    parent_id: Optional[int] = None
    children: List['TreeNodeResponse'] = Field(default_factory=list)


TreeNodeResponse.model_rebuild()
