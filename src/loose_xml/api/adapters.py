"""Conversion between loose_xml trees and ElementTree-compatible libraries.

``to_etree`` targets the standard library's ``xml.etree.ElementTree`` and
``to_lxml`` targets ``lxml.etree``. Both APIs share the element model, so a
single converter serves both. Namespaces are not resolved: lxml rejects
prefixed names such as ``xml:lang`` with a ``ValueError``.
"""

import xml.etree.ElementTree as ET
from typing import Any, Callable, Optional, Union

from lxml import etree as lxml_etree

from loose_xml.api.parser import parse
from loose_xml.character.escaping import escape_value
from loose_xml.shared import get_logger
from loose_xml.tree import (
    CData,
    Comment,
    Declaration,
    Document,
    Element,
    Text,
)

logger = get_logger(__name__, component="adapters")

SourceNode = Union[Document, Element]


def _root_element(node: SourceNode) -> Element:
    if isinstance(node, Element):
        return node
    if isinstance(node, Document):
        root = next((child for child in node if isinstance(child, Element)), None)
        if root is None:
            raise ValueError("Document has no element to convert")
        return root
    raise TypeError(f"Cannot convert {type(node).__name__}; expected Document or Element")


def _append_text(
    target: Any,
    last: Any,
    text: str,
    cdata: Optional[Callable[[str], Any]],
) -> None:
    if last is None:
        if cdata is not None and not target.text:
            target.text = cdata(text)
        else:
            target.text = (target.text or "") + text
    else:
        last.tail = (last.tail or "") + text


def _declaration_data(declaration: Declaration) -> str:
    return " ".join(
        f'{key}="{escape_value(value)}"' for key, value in declaration.pairs.items()
    )


def _convert(
    element: Element,
    etree: Any,
    cdata: Optional[Callable[[str], Any]] = None,
) -> Any:
    target = etree.Element(element.name, dict(element.attributes))
    last = None
    for child in element:
        if isinstance(child, Element):
            last = _convert(child, etree, cdata)
            target.append(last)
        elif isinstance(child, Comment):
            last = etree.Comment(child.content)
            target.append(last)
        elif isinstance(child, Declaration) and child.type.lower() != "xml":
            last = etree.ProcessingInstruction(child.type, _declaration_data(child))
            target.append(last)
        elif isinstance(child, CData):
            _append_text(target, last, child.content, cdata)
        elif isinstance(child, Text):
            _append_text(target, last, child.content, None)
        else:
            logger.debug(
                "Skipping node without element-tree counterpart",
                extra={"node_type": child.node_type},
            )
    return target


def to_etree(node: SourceNode) -> ET.Element:
    """Convert an element, or a document's first element, to ElementTree.

    Examples:
        >>> from loose_xml import parse
        >>> root = to_etree(parse('<a x="1">hi<b/>there</a>'))
        >>> ET.tostring(root, encoding="unicode")
        '<a x="1">hi<b />there</a>'
    """
    return _convert(_root_element(node), ET)


def to_lxml(node: SourceNode) -> Any:
    """Convert an element, or a document's first element, to an lxml element.

    CDATA sections that start an element's text are kept as CDATA.

    Raises:
        ValueError: If lxml rejects a name, e.g. one with a namespace prefix
    """
    return _convert(_root_element(node), lxml_etree, lxml_etree.CDATA)


def _special_node(source: Any) -> Optional[Union[Comment, Declaration]]:
    kind = getattr(source.tag, "__name__", None)
    if kind == "Comment":
        return Comment(source.text or "")
    if kind in ("ProcessingInstruction", "PI"):
        target = getattr(source, "target", None)
        data = source.text or ""
        if target is None:
            # ElementTree keeps "target data" together in .text
            target, _, data = data.partition(" ")
        document = parse(f"<?{target} {data}?>")
        return document.remove(document[0])  # type: ignore[return-value]
    return None


def from_etree(source: Any) -> Element:
    """Convert an ElementTree or lxml element into an ``Element`` subtree.

    Raises:
        InvalidNameError: If a tag or attribute name is not a valid name,
            including namespace-qualified ``{uri}local`` names
        ValueError: If ``source`` is a comment or processing instruction
    """
    if not isinstance(source.tag, str):
        raise ValueError("Only elements can be converted")

    element = Element(source.tag, dict(source.attrib))
    if source.text:
        element.add(Text(source.text))
    for child in source:
        if isinstance(child.tag, str):
            element.add(from_etree(child))
        else:
            special = _special_node(child)
            if special is not None:
                element.add(special)
        if child.tail:
            element.add(Text(child.tail))
    return element
