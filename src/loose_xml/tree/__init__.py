"""Tree model for loose XML parsing.

Key Components:
    Document: Root container returned by parse calls
    Element: Named container with validated attributes
    Text, Comment, CData: Leaf content nodes
    Declaration, Metadata: Leaf nodes for ``<?...?>`` and ``<!...>`` constructs
    NameMap, NameList: Containers that validate names on insertion
"""

from .collections import NameList, NameMap
from .nodes import (
    CData,
    Comment,
    Container,
    Content,
    Declaration,
    Document,
    Element,
    Metadata,
    Node,
    Text,
)

__all__ = [
    "CData",
    "Comment",
    "Container",
    "Content",
    "Declaration",
    "Document",
    "Element",
    "Metadata",
    "NameList",
    "NameMap",
    "Node",
    "Text",
]
