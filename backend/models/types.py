"""Shared type definitions for type checking.

Uses NewType for IDs to provide compile-time type safety - prevents mixing
different ID types (e.g., passing UserID where OpportunityID expected).

Uses TypeAlias for complex types that are purely structural.
"""

from typing import NewType, TypeAlias

# ID types using NewType for type safety
OpportunityID = NewType("OpportunityID", str)
OrganizationID = NewType("OrganizationID", str)
ProjectID = NewType("ProjectID", str)
UserID = NewType("UserID", str)

# Structural aliases using TypeAlias
TagList: TypeAlias = list[str]
TagSet: TypeAlias = frozenset[str]
JobStats: TypeAlias = dict[str, int]
