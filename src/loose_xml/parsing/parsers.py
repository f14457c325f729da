"""Parsers for each markup construct.

Every parser is stateless; a single instance can serve any number of
concurrent parse calls. Parsers read the input in place and return the offset
where the next construct starts.
"""

import re
from typing import Optional, Tuple

from loose_xml.character.escaping import unescape
from loose_xml.character.names import NAME_PATTERN
from loose_xml.tree import CData, Comment, Declaration, Element, Metadata, Text

from .base import OffsetParser, ParseContext

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
DECLARATION_OPEN = "<?"
DECLARATION_CLOSE = "?>"
METADATA_OPEN = "<!"
CLOSING_TAG_OPEN = "</"

_LEADING_NAME = re.compile(NAME_PATTERN, re.ASCII)
_ELEMENT_START = re.compile(r"<\w", re.ASCII)
_CLOSING_TAG = re.compile(r"</\s*(?P<name>" + NAME_PATTERN + r")?", re.ASCII)
_WHITESPACE = re.compile(r"\s*")

# key="value" pairs inside a declaration
_PAIR = re.compile(r"""([^\s="']+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")

# Next '>' that is not inside a double-quoted string
_METADATA_END = re.compile(r'"[^"]*"|>')
_QUOTED_VALUE = re.compile(r'"([^"]*)"')

_ATTRIBUTE = re.compile(
    r"""
    (?P<key>[^\s=/>"']+)
    (?:
        \s*=\s*
        (?:
            "(?P<double>[^"]*)"
          | '(?P<single>[^']*)'
          | (?P<bare>[^\s>"']+?)(?=\s|/?>|$)
        )
    )?
    """,
    re.VERBOSE,
)

# Anything inside a start tag that is not an attribute: a quoted run or one char
_STRAY = re.compile(r""""[^"]*"?|'[^']*'?|.""", re.DOTALL)


def _leading_name(content: str) -> Optional[str]:
    match = _LEADING_NAME.match(content)
    return match.group(0) if match else None


class TextParser(OffsetParser):
    """Character content up to the next ``<``."""

    component = "text"

    def can_start_at(self, text: str, pos: int) -> bool:
        return pos < len(text) and text[pos] != "<"

    def parse_at(self, text: str, pos: int, context: ParseContext) -> Tuple[Text, int]:
        end = text.find("<", pos)
        if end < 0:
            end = len(text)
        return Text(unescape(text[pos:end])), end


class CommentParser(OffsetParser):
    """``<!-- ... -->`` comments."""

    component = "comment"

    def can_start_at(self, text: str, pos: int) -> bool:
        return text.startswith(COMMENT_OPEN, pos)

    def parse_at(self, text: str, pos: int, context: ParseContext) -> Tuple[Comment, int]:
        start = pos + len(COMMENT_OPEN)
        end = text.find(COMMENT_CLOSE, start)
        if end < 0:
            context.warn("Unterminated comment", self.component, pos)
            return Comment(unescape(text[start:])), len(text)
        return Comment(unescape(text[start:end])), end + len(COMMENT_CLOSE)


class CDataParser(OffsetParser):
    """``<![CDATA[ ... ]]>`` sections, kept verbatim."""

    component = "cdata"

    def can_start_at(self, text: str, pos: int) -> bool:
        return text.startswith(CDATA_OPEN, pos)

    def parse_at(self, text: str, pos: int, context: ParseContext) -> Tuple[CData, int]:
        start = pos + len(CDATA_OPEN)
        end = text.find(CDATA_CLOSE, start)
        if end < 0:
            context.warn("Unterminated CDATA section", self.component, pos)
            return CData(text[start:]), len(text)
        return CData(text[start:end]), end + len(CDATA_CLOSE)


class DeclarationParser(OffsetParser):
    """``<?type key="value" ...?>`` declarations and processing instructions."""

    component = "declaration"

    def can_start_at(self, text: str, pos: int) -> bool:
        return text.startswith(DECLARATION_OPEN, pos)

    def parse_at(
        self, text: str, pos: int, context: ParseContext
    ) -> Tuple[Declaration, int]:
        start = pos + len(DECLARATION_OPEN)
        end = text.find(DECLARATION_CLOSE, start)
        if end < 0:
            context.warn("Unterminated declaration", self.component, pos)
            content, next_pos = text[start:].strip(), len(text)
        else:
            content = text[start:end].strip()
            next_pos = end + len(DECLARATION_CLOSE)

        name = _leading_name(content)
        declaration = Declaration(name) if name else Declaration()
        pairs_content = content[len(name):] if name else content
        for key, double, single in _PAIR.findall(pairs_content):
            # findall yields "" for the quote style that did not match
            declaration.pairs[key] = unescape(double or single)
        return declaration, next_pos


class MetadataParser(OffsetParser):
    """``<!TYPE name ... "value" ...>`` constructs such as DOCTYPE.

    Must be registered after the comment and CDATA parsers, whose prefixes
    also start with ``<!``.
    """

    component = "metadata"

    def can_start_at(self, text: str, pos: int) -> bool:
        return text.startswith(METADATA_OPEN, pos)

    def parse_at(self, text: str, pos: int, context: ParseContext) -> Tuple[Metadata, int]:
        start = pos + len(METADATA_OPEN)
        end = -1
        for match in _METADATA_END.finditer(text, start):
            if match.group(0) == ">":
                end = match.start()
                break

        if end < 0:
            context.warn("Unterminated metadata", self.component, pos)
            content, next_pos = text[start:].strip(), len(text)
        else:
            content, next_pos = text[start:end].strip(), end + 1

        name = _leading_name(content)
        metadata = Metadata(name) if name else Metadata()
        rest = content[len(name):] if name else content
        metadata.values.extend(unescape(value) for value in _QUOTED_VALUE.findall(rest))
        metadata.names.extend(_QUOTED_VALUE.sub(" ", rest).split())
        return metadata, next_pos


class ElementParser(OffsetParser):
    """Elements, their attributes and, recursively, their children.

    Closing tags are matched leniently: the first ``</...>`` after the
    children closes the element whatever name it carries.
    """

    component = "element"

    def can_start_at(self, text: str, pos: int) -> bool:
        return _ELEMENT_START.match(text, pos) is not None

    def parse_at(self, text: str, pos: int, context: ParseContext) -> Tuple[Element, int]:
        name = _LEADING_NAME.match(text, pos + 1)
        element = Element(name.group(0) if name else "")
        position = name.end() if name else pos + 1

        terminator = None
        while position < len(text):
            position = _WHITESPACE.match(text, position).end()
            if text.startswith("/>", position):
                terminator = "/>"
                break
            if text.startswith(">", position):
                terminator = ">"
                break
            if position >= len(text):
                break
            position = self._read_attribute(text, position, element, context)

        if terminator is None:
            context.warn(
                f"Unterminated start tag <{element.name}",
                self.component,
                pos,
                details={"element": element.name},
            )
            return element, len(text)

        position += len(terminator)
        if terminator == "/>":
            return element, position

        position = context.registry.dispatch_at(
            text, position, element, context, stop_at_close=True
        )
        if position >= len(text):
            context.warn(
                f"Element <{element.name}> is never closed",
                self.component,
                pos,
                details={"element": element.name},
            )
            return element, position

        return element, self._consume_closing_tag(text, position, element, context)

    def _read_attribute(
        self, text: str, position: int, element: Element, context: ParseContext
    ) -> int:
        attribute = _ATTRIBUTE.match(text, position)
        if attribute is None:
            stray = _STRAY.match(text, position)
            context.warn(
                f"Skipped unexpected characters in <{element.name}>",
                self.component,
                position,
                details={"element": element.name, "skipped": stray.group(0)},
            )
            return stray.end()

        key = attribute.group("key")
        for group in ("double", "single", "bare"):
            value = attribute.group(group)
            if value is not None:
                element.attributes[key] = unescape(value)
                break
        else:
            # Bare token, e.g. <input disabled>
            element.attributes[key] = key
        return attribute.end()

    def _consume_closing_tag(
        self, text: str, position: int, element: Element, context: ParseContext
    ) -> int:
        closing = _CLOSING_TAG.match(text, position)
        closing_name = closing.group("name") if closing else None
        if closing_name != element.name:
            context.warn(
                f"Closing tag </{closing_name or ''}> does not match <{element.name}>",
                self.component,
                position,
                details={"element": element.name, "closing": closing_name},
            )

        end = text.find(">", position)
        if end < 0:
            context.warn(
                f"Unterminated closing tag for <{element.name}>",
                self.component,
                position,
                details={"element": element.name},
            )
            return len(text)
        return end + 1
