"""Tests for ElementTree and lxml adapters."""

import xml.etree.ElementTree as ET

import pytest
from lxml import etree as lxml_etree

from loose_xml.api.adapters import from_etree, to_etree, to_lxml
from loose_xml.api.parser import parse
from loose_xml.shared import InvalidNameError
from loose_xml.tree import Comment, Declaration, Document, Element, Text


class TestToEtree:
    """Test conversion to xml.etree.ElementTree."""

    def test_text_and_tail(self):
        """Test that text nodes become .text and .tail."""
        root = to_etree(parse('<a x="1">hi<b/>there</a>'))

        assert root.tag == "a"
        assert root.attrib == {"x": "1"}
        assert root.text == "hi"
        assert root[0].tag == "b"
        assert root[0].tail == "there"
        assert ET.tostring(root, encoding="unicode") == '<a x="1">hi<b />there</a>'

    def test_uses_first_element_of_document(self):
        """Test that leading declarations and metadata are skipped."""
        document = parse('<?xml version="1.0"?><!DOCTYPE r><!--c--><r><s/></r>')

        root = to_etree(document)

        assert root.tag == "r"
        assert [child.tag for child in root] == ["s"]

    def test_comments_and_processing_instructions(self):
        """Test special nodes inside elements."""
        root = to_etree(parse('<a><!--note--><?pi k="v"?><?xml version="1.0"?></a>'))

        assert ET.tostring(root, encoding="unicode") == '<a><!--note--><?pi k="v"?></a>'

    def test_cdata_becomes_text(self):
        """Test that CDATA merges into character content."""
        root = to_etree(parse("<a>x<![CDATA[<y>]]></a>"))

        assert root.text == "x<y>"

    def test_metadata_skipped(self):
        """Test that nodes without a counterpart are dropped."""
        root = to_etree(parse("<a><!ENTITY e>t</a>"))

        assert len(root) == 0
        assert root.text == "t"

    def test_document_without_element(self):
        """Test that a document with no element cannot be converted."""
        with pytest.raises(ValueError, match="no element to convert"):
            to_etree(parse("just text"))

    def test_unsupported_node(self):
        """Test that leaf nodes cannot be converted."""
        with pytest.raises(TypeError, match="Cannot convert Text"):
            to_etree(Text("x"))  # type: ignore[arg-type]


class TestToLxml:
    """Test conversion to lxml.etree."""

    def test_structure(self):
        """Test element structure and attributes."""
        root = to_lxml(Element("root", {"id": "1"}, [Element("child", children=[Text("t")])]))

        assert lxml_etree.tostring(root) == b'<root id="1"><child>t</child></root>'

    def test_cdata_preserved(self):
        """Test that a leading CDATA section stays CDATA."""
        root = to_lxml(parse("<a><![CDATA[<raw> & text]]></a>"))

        assert lxml_etree.tostring(root) == b"<a><![CDATA[<raw> & text]]></a>"
        assert root.text == "<raw> & text"

    def test_comment(self):
        """Test comment conversion."""
        root = to_lxml(parse("<a>x<!--c-->y</a>"))

        assert lxml_etree.tostring(root) == b"<a>x<!--c-->y</a>"


class TestFromEtree:
    """Test conversion from ElementTree-compatible elements."""

    def test_from_lxml(self):
        """Test a tree with text, tails, comments and instructions."""
        source = lxml_etree.fromstring('<a x="1">hi<b>in</b>tail<!--c--><?pi k="v"?></a>')

        element = from_etree(source)

        assert element.serialize() == '<a x="1">hi<b>in</b>tail<!--c--><?pi k="v"?></a>'
        assert isinstance(element[3], Comment)
        assert isinstance(element[4], Declaration)
        assert element[4].pairs["k"] == "v"

    def test_from_elementtree(self):
        """Test a standard library tree built by hand."""
        source = ET.Element("root", {"lang": "en"})
        child = ET.SubElement(source, "item")
        child.text = "1 < 2"
        child.tail = "!"
        source.append(ET.ProcessingInstruction("style", 'href="a.css"'))

        element = from_etree(source)

        assert element.name == "root"
        assert element.get("lang") == "en"
        assert element.find("item").text == "1 < 2"
        assert element[2].type == "style"
        assert element[2].pairs["href"] == "a.css"
        assert element.serialize() == (
            '<root lang="en"><item>1 &lt; 2</item>!<?style href="a.css"?></root>'
        )

    def test_roundtrip_through_elementtree(self):
        """Test that a parsed tree survives conversion both ways."""
        text = '<a x="1">hi<b>in</b>tail</a>'

        assert from_etree(to_etree(parse(text))).serialize() == text

    def test_instruction_values_with_quotes(self):
        """Test that quoted pair values survive conversion both ways."""
        source = Element("a", children=[Declaration("pi", {"note": 'say "hi" & <bye>'})])

        instruction = to_etree(source)[0]
        element = from_etree(to_etree(source))

        assert ET.tostring(instruction, encoding="unicode") == (
            '<?pi note="say &quot;hi&quot; &amp; &lt;bye&gt;"?>'
        )
        assert element[0].pairs["note"] == 'say "hi" & <bye>'
        assert element.serialize() == source.serialize()

    def test_namespaced_tag_rejected(self):
        """Test that resolved namespace names are not valid names."""
        with pytest.raises(InvalidNameError):
            from_etree(ET.Element("{urn:x}a"))

    def test_comment_rejected(self):
        """Test that only elements can be converted."""
        with pytest.raises(ValueError, match="Only elements"):
            from_etree(ET.Comment("c"))

    def test_result_is_detached(self):
        """Test that the converted element has no parent."""
        element = from_etree(ET.Element("a"))

        assert element.parent is None
        assert isinstance(Document([element])[0], Element)
