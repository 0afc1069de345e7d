"""
Constants shared by the closure tree queries and the hierarchy assembler.
"""

# Alias for the computed level column in the nodes hierarchy query
SUBQUERY_LEVEL = 'level'

# Alias for the immediate parent id column in the nodes hierarchy query
PARENT_ID = 'parent_id'

# Key holding nested children in assembled trees
CHILDREN_KEY = 'children'

# Accepted sort directions (compared lowercase)
SORT_DIRECTIONS = ('asc', 'desc')

DEFAULT_PARENT_FIELD = 'parent'

# Level of a root node, also the level of a self edge's descendant with no ancestors
ROOT_LEVEL = 1
