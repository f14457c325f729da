"""Tests for the node model."""

import gc

import pytest

from loose_xml.shared.errors import InvalidNameError
from loose_xml.tree.nodes import (
    CData,
    Comment,
    Declaration,
    Document,
    Element,
    Metadata,
    Text,
)


class TestContentNodes:
    """Test text, comment and CDATA leaf nodes."""

    def test_text_serialization_escapes(self):
        """Test that text content is escaped."""
        assert Text("a < b & c").serialize() == "a &lt; b &amp; c"

    def test_text_keeps_quotes(self):
        """Test that quotes are not escaped in character content."""
        assert Text("say \"hi\"").serialize() == "say \"hi\""

    def test_comment_serialization(self):
        """Test comment delimiters."""
        assert Comment(" note ").serialize() == "<!-- note -->"

    def test_cdata_not_escaped(self):
        """Test that CDATA content is written verbatim."""
        assert CData(" a <b> & c ").serialize() == "<![CDATA[ a <b> & c ]]>"

    def test_cdata_terminator_split(self):
        """Test that an embedded terminator cannot end the section early."""
        assert CData("x]]>y").serialize() == "<![CDATA[x]]&gt;y]]>"

    def test_content_coerced_to_str(self):
        """Test that payloads are stored as strings."""
        text = Text(5)
        text.content = 6

        assert text.content == "6"
        assert str(text) == "6"

    def test_to_dict(self):
        """Test dictionary conversion of leaf content."""
        assert Comment("c").to_dict() == {"type": "comment", "content": "c"}


class TestDeclaration:
    """Test declaration nodes."""

    def test_defaults(self):
        """Test default type and empty pairs."""
        declaration = Declaration()

        assert declaration.type == "declaration"
        assert dict(declaration.pairs) == {}
        assert declaration.serialize() == "<?declaration?>"

    def test_serialization(self):
        """Test pair rendering with escaped values."""
        declaration = Declaration("xml", {"version": "1.0", "note": "a\"b"})

        assert declaration.serialize() == '<?xml version="1.0" note="a&quot;b"?>'

    def test_invalid_type(self):
        """Test type validation, including through the setter."""
        with pytest.raises(InvalidNameError):
            Declaration("x m l")
        declaration = Declaration("xml")
        with pytest.raises(InvalidNameError):
            declaration.type = ""
        assert declaration.type == "xml"

    def test_invalid_pair_key(self):
        """Test that pair keys are validated on assignment."""
        declaration = Declaration("xml")

        with pytest.raises(InvalidNameError):
            declaration.pairs["bad key"] = "1"


class TestMetadata:
    """Test metadata nodes."""

    def test_defaults(self):
        """Test default type."""
        assert Metadata().type == "METADATA"
        assert Metadata().serialize() == "<!METADATA>"

    def test_serialization(self):
        """Test names followed by quoted values."""
        metadata = Metadata(
            "DOCTYPE", ["html", "PUBLIC"], ["-//W3C//DTD XHTML 1.0//EN", "x.dtd"]
        )

        assert metadata.serialize() == (
            '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0//EN" "x.dtd">'
        )

    def test_invalid_name_token(self):
        """Test that name tokens are validated."""
        metadata = Metadata("DOCTYPE")

        with pytest.raises(InvalidNameError):
            metadata.names.append("[internal")

    def test_to_dict(self):
        """Test dictionary conversion."""
        assert Metadata("DOCTYPE", ["html"]).to_dict() == {
            "type": "metadata",
            "name": "DOCTYPE",
            "names": ["html"],
            "values": [],
        }


class TestElement:
    """Test element nodes."""

    def test_default_name(self):
        """Test the default element name."""
        assert Element().name == "element"

    def test_self_closing_when_empty(self):
        """Test that childless elements use the self-closing form."""
        element = Element("root", {"a": "1", "b": "x<y"})

        assert element.serialize() == '<root a="1" b="x&lt;y"/>'

    def test_open_close_with_children(self):
        """Test serialization with children."""
        element = Element("p", children=[Text("Hi "), Element("b", children=[Text("there")])])

        assert element.serialize() == "<p>Hi <b>there</b></p>"

    def test_attribute_access(self):
        """Test attribute get with default."""
        element = Element("root", {"id": "main"})

        assert element.get("id") == "main"
        assert element.get("missing", "none") == "none"

    def test_invalid_name(self):
        """Test element name validation."""
        with pytest.raises(InvalidNameError):
            Element("")
        element = Element("a")
        with pytest.raises(InvalidNameError):
            element.name = "a b"
        element.name = "b"
        assert element.serialize() == "<b/>"

    def test_invalid_attribute_key(self):
        """Test attribute key validation."""
        with pytest.raises(InvalidNameError):
            Element("root", {"on click": "x"})

    def test_to_dict(self):
        """Test dictionary conversion, omitting empty children."""
        element = Element("root", {"a": "1"}, [Element("child")])

        assert element.to_dict() == {
            "type": "element",
            "name": "root",
            "attributes": {"a": "1"},
            "children": [{"type": "element", "name": "child", "attributes": {}}],
        }


class TestContainerOperations:
    """Test add/remove and parent tracking."""

    def test_add_returns_child_and_sets_parent(self):
        """Test that add links the child to the container."""
        root = Element("root")
        child = root.add(Element("child"))

        assert child.parent is root
        assert root.children == (child,)
        assert len(root) == 1

    def test_add_moves_child_between_parents(self):
        """Test that adding an attached child detaches it first."""
        first = Element("first")
        second = Element("second")
        child = first.add(Text("x"))
        first.add(Text("y"))

        second.add(child)

        assert len(first) == 1
        assert child not in first.children
        assert child.parent is second
        assert second.children == (child,)

    def test_add_rejects_non_nodes(self):
        """Test type checking of children."""
        with pytest.raises(TypeError, match="Child must be a Node instance"):
            Element("root").add("text")  # type: ignore[arg-type]

    def test_add_rejects_cycles(self):
        """Test that a node cannot become its own descendant."""
        root = Element("root")
        child = root.add(Element("child"))

        with pytest.raises(ValueError, match="Cannot add a node to itself"):
            root.add(root)
        with pytest.raises(ValueError, match="Cannot add a node to itself"):
            child.add(root)

    def test_remove(self):
        """Test detaching a child."""
        root = Element("root")
        child = root.add(Text("x"))

        assert root.remove(child) is child
        assert child.parent is None
        assert len(root) == 0

    def test_remove_foreign_child_is_noop(self):
        """Test that removing a node owned elsewhere changes nothing."""
        owner = Element("owner")
        child = owner.add(Text("x"))

        assert Element("other").remove(child) is None
        assert child.parent is owner

    def test_parent_reference_is_weak(self):
        """Test that children do not keep their parent alive."""
        root = Element("root")
        child = root.add(Text("x"))

        del root
        gc.collect()

        assert child.parent is None

    def test_found_node_outlives_document(self):
        """Test that a node kept without its document loses its ancestors."""
        document = Document([Element("a", children=[Element("b")])])
        found = document.find("b")

        assert found.parent.parent is document

        del document
        gc.collect()

        assert found.parent is None
        assert found.name == "b"

    def test_depth_and_ancestors(self):
        """Test ancestor traversal."""
        document = Document()
        root = document.add(Element("root"))
        leaf = root.add(Element("leaf"))

        assert leaf.depth == 2
        assert list(leaf.iter_ancestors()) == [root, document]

    def test_iteration_is_snapshot(self):
        """Test that children can be moved while iterating."""
        source = Element("source", children=[Text("a"), Text("b")])
        target = Element("target")

        for child in source:
            target.add(child)

        assert len(source) == 0
        assert [child.content for child in target] == ["a", "b"]


class TestContainerQueries:
    """Test search and text helpers."""

    @pytest.fixture
    def document(self):
        """Small document with nested elements."""
        return Document([
            Comment("c"),
            Element("root", children=[
                Element("item", {"n": "1"}, [Text("one")]),
                Element("group", children=[Element("item", {"n": "2"}, [CData("two")])]),
            ]),
        ])

    def test_find(self, document):
        """Test finding the first matching element."""
        assert document.find("item").get("n") == "1"
        assert document.find("missing") is None

    def test_find_all(self, document):
        """Test finding elements in document order."""
        assert [el.get("n") for el in document.find_all("item")] == ["1", "2"]

    def test_iter_elements(self, document):
        """Test depth-first element traversal."""
        names = [el.name for el in document.iter_elements()]

        assert names == ["root", "item", "group", "item"]

    def test_text(self, document):
        """Test concatenated text, skipping comments."""
        assert document.text == "onetwo"

    def test_document_serialization(self, document):
        """Test that a document concatenates its children."""
        assert document.serialize() == (
            '<!--c--><root><item n="1">one</item>'
            '<group><item n="2"><![CDATA[two]]></item></group></root>'
        )
        assert document.to_dict()["type"] == "document"
