"""Node model for loosely parsed markup documents.

Containers (``Document``, ``Element``) own an ordered list of children; every
node keeps a weak, non-owning reference back to its parent. Adding a node
that already has a parent moves it, so a node is never in two places.
"""

import weakref
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from loose_xml.character.escaping import escape, escape_value
from loose_xml.character.names import validate_name
from loose_xml.tree.collections import NameList, NameMap

# Default names used when a construct carries no explicit type
DEFAULT_ELEMENT_NAME = "element"
DEFAULT_DECLARATION_TYPE = "declaration"
DEFAULT_METADATA_TYPE = "METADATA"


class Node(ABC):
    """Base class of every node in a parsed tree."""

    node_type = "node"

    def __init__(self) -> None:
        self._parent_ref: Optional["weakref.ReferenceType[Container]"] = None

    @property
    def parent(self) -> Optional["Container"]:
        """Container currently holding this node, if any.

        Parents are held weakly, so this becomes ``None`` once the container
        is garbage-collected. A node taken out of a tree, such as the result
        of ``parse(text).find("b")``, loses its ancestors when nothing else
        references the document; keep the document to keep walking upwards.
        """
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def depth(self) -> int:
        """Number of ancestors above this node."""
        depth = 0
        ancestor = self.parent
        while ancestor is not None:
            depth += 1
            ancestor = ancestor.parent
        return depth

    def iter_ancestors(self) -> Iterator["Container"]:
        """Iterate from the parent up to the root."""
        ancestor = self.parent
        while ancestor is not None:
            yield ancestor
            ancestor = ancestor.parent

    @abstractmethod
    def serialize(self) -> str:
        """Render this node back to markup."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert node to a JSON-friendly dictionary."""

    def __str__(self) -> str:
        return self.serialize()


class Content(Node):
    """Leaf node carrying a single string payload."""

    node_type = "content"

    def __init__(self, content: Any = "") -> None:
        super().__init__()
        self._content = str(content)

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, content: Any) -> None:
        self._content = str(content)

    def serialize(self) -> str:
        return escape(self._content)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.node_type, "content": self._content}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._content!r})"


class Text(Content):
    """Character content between markup constructs."""

    node_type = "text"


class Comment(Content):
    """A ``<!-- ... -->`` comment."""

    node_type = "comment"

    def serialize(self) -> str:
        return f"<!--{escape(self._content)}-->"


class CData(Content):
    """A ``<![CDATA[ ... ]]>`` section; its content is never escaped."""

    node_type = "cdata"

    def serialize(self) -> str:
        # "]]>" would end the section early
        return "<![CDATA[" + self._content.replace("]]>", "]]&gt;") + "]]>"


class Declaration(Node):
    """A ``<?type key="value" ...?>`` declaration."""

    node_type = "declaration"

    def __init__(
        self,
        type: str = DEFAULT_DECLARATION_TYPE,
        pairs: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__()
        self._type = validate_name(type)
        self._pairs = NameMap(pairs)

    @property
    def type(self) -> str:
        return self._type

    @type.setter
    def type(self, value: str) -> None:
        self._type = validate_name(value)

    @property
    def pairs(self) -> NameMap:
        return self._pairs

    def serialize(self) -> str:
        pairs = "".join(
            f' {key}="{escape_value(value)}"' for key, value in self._pairs.items()
        )
        return f"<?{self._type}{pairs}?>"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.node_type, "name": self._type, "pairs": dict(self._pairs)}

    def __repr__(self) -> str:
        return f"Declaration({self._type!r}, {dict(self._pairs)!r})"


class Metadata(Node):
    """A ``<!TYPE name ... "value" ...>`` construct such as DOCTYPE or ENTITY."""

    node_type = "metadata"

    def __init__(
        self,
        type: str = DEFAULT_METADATA_TYPE,
        names: Optional[Iterable[str]] = None,
        values: Optional[Iterable[Any]] = None,
    ) -> None:
        super().__init__()
        self._type = validate_name(type)
        self._names = NameList(names)
        self._values: List[str] = [str(value) for value in values or ()]

    @property
    def type(self) -> str:
        return self._type

    @type.setter
    def type(self, value: str) -> None:
        self._type = validate_name(value)

    @property
    def names(self) -> NameList:
        return self._names

    @property
    def values(self) -> List[str]:
        return self._values

    def serialize(self) -> str:
        parts = [f"<!{self._type}"]
        parts.extend(f" {name}" for name in self._names)
        parts.extend(f' "{escape_value(value)}"' for value in self._values)
        parts.append(">")
        return "".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.node_type,
            "name": self._type,
            "names": list(self._names),
            "values": list(self._values),
        }

    def __repr__(self) -> str:
        return f"Metadata({self._type!r}, {list(self._names)!r}, {self._values!r})"


class Container(Node):
    """Node that owns an ordered sequence of children."""

    def __init__(self, children: Optional[Iterable[Node]] = None) -> None:
        super().__init__()
        self._children: List[Node] = []
        for child in children or ():
            self.add(child)

    @property
    def children(self) -> Tuple[Node, ...]:
        """Snapshot of the direct children in order."""
        return tuple(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[Node]:
        return iter(tuple(self._children))

    def __getitem__(self, index: int) -> Node:
        return self._children[index]

    def add(self, child: Node) -> Node:
        """Append ``child``, detaching it from any previous parent.

        Returns:
            The added child

        Raises:
            TypeError: If ``child`` is not a Node
            ValueError: If ``child`` is this container or one of its ancestors
        """
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")
        if child is self or any(ancestor is child for ancestor in self.iter_ancestors()):
            raise ValueError("Cannot add a node to itself or its descendants")

        previous = child.parent
        if previous is not None:
            previous.remove(child)

        child._parent_ref = weakref.ref(self)
        self._children.append(child)
        return child

    def remove(self, child: Node) -> Optional[Node]:
        """Detach ``child``; does nothing if it belongs to another container.

        Returns:
            The removed child, or None if it was not a child of this container
        """
        if not isinstance(child, Node) or child.parent is not self:
            return None
        self._children = [item for item in self._children if item is not child]
        child._parent_ref = None
        return child

    def iter_elements(self) -> Iterator["Element"]:
        """Iterate over all descendant elements in document order."""
        for child in self._children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_elements()

    def find(self, name: str) -> Optional["Element"]:
        """Find first descendant element with matching name."""
        return next((el for el in self.iter_elements() if el.name == name), None)

    def find_all(self, name: str) -> List["Element"]:
        """Find all descendant elements with matching name."""
        return [el for el in self.iter_elements() if el.name == name]

    @property
    def text(self) -> str:
        """Concatenated text and CDATA content of all descendants."""
        parts: List[str] = []
        for child in self._children:
            if isinstance(child, (Text, CData)):
                parts.append(child.content)
            elif isinstance(child, Container):
                parts.append(child.text)
        return "".join(parts)

    def serialize(self) -> str:
        return "".join(child.serialize() for child in self._children)


class Document(Container):
    """Root container returned by a parse call."""

    node_type = "document"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.node_type,
            "children": [child.to_dict() for child in self._children],
        }

    def __repr__(self) -> str:
        return f"Document(children={len(self._children)})"


class Element(Container):
    """An element with a name, attributes and children."""

    node_type = "element"

    def __init__(
        self,
        name: str = DEFAULT_ELEMENT_NAME,
        attributes: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None,
        children: Optional[Iterable[Node]] = None,
    ) -> None:
        self._name = validate_name(name)
        self._attributes = NameMap(attributes)
        super().__init__(children)

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = validate_name(value)

    @property
    def attributes(self) -> NameMap:
        return self._attributes

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self._attributes.get(key, default)

    def serialize(self) -> str:
        attributes = "".join(
            f' {key}="{escape_value(value)}"'
            for key, value in self._attributes.items()
        )
        if not self._children:
            return f"<{self._name}{attributes}/>"
        return f"<{self._name}{attributes}>{super().serialize()}</{self._name}>"

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": self.node_type,
            "name": self._name,
            "attributes": dict(self._attributes),
        }
        if self._children:
            result["children"] = [child.to_dict() for child in self._children]
        return result

    def __repr__(self) -> str:
        return f"Element({self._name!r}, children={len(self._children)})"
