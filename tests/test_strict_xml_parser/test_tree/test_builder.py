"""Tests for XMLElement and the recursive-descent tree builder."""

import pytest

from strict_xml_parser.shared import TreeConfig, XMLSyntaxError
from strict_xml_parser.shared.config import MAX_DEPTH_LIMIT
from strict_xml_parser.tokenization import TokenPosition, tokenize
from strict_xml_parser.tree import XMLElement, XMLTreeBuilder


def build(text: str, config: TreeConfig = None) -> XMLElement:
    return XMLTreeBuilder(tokenize(text).tokens, config).build()


class TestXMLElement:
    """Test XMLElement functionality and navigation methods."""

    def test_element_creation_with_valid_data(self) -> None:
        """Test creating XMLElement with valid data."""
        element = XMLElement("root", {"id": "test"}, "content")
        assert element.tag == "root"
        assert element.get_attribute("id") == "test"
        assert element.value == "content"
        assert element.children == []

    def test_element_creation_with_empty_tag_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Element tag cannot be empty"):
            XMLElement("")

    def test_element_creation_with_value_and_children_raises_error(self) -> None:
        with pytest.raises(ValueError, match="both a value and children"):
            XMLElement("a", value="x", children=[XMLElement("b")])

    def test_attribute_access(self) -> None:
        """Test attribute helpers and insertion order."""
        element = XMLElement("a")
        element.set_attribute("z", "1")
        element.set_attribute("y", "2")
        element.set_attribute("z", "3")

        assert element.has_attribute("z")
        assert not element.has_attribute("missing")
        assert element.get_attribute("missing", "default") == "default"
        assert list(element.iter_attributes()) == [("z", "3"), ("y", "2")]

    def test_set_attribute_rejects_non_strings(self) -> None:
        with pytest.raises(TypeError):
            XMLElement("a").set_attribute("x", 1)  # type: ignore[arg-type]

    def test_add_child_to_valued_element_raises_error(self) -> None:
        """Test a node with a value cannot gain children."""
        element = XMLElement("a", value="text")
        with pytest.raises(ValueError, match="cannot hold children"):
            element.add_child(XMLElement("b"))

    def test_set_value_on_container_raises_error(self) -> None:
        """Test a node with children cannot gain a value."""
        element = XMLElement("a")
        element.add_child(XMLElement("b"))
        with pytest.raises(ValueError, match="cannot hold a value"):
            element.set_value("text")
        element.set_value(None)

    def test_add_child_type_check(self) -> None:
        with pytest.raises(TypeError):
            XMLElement("a").add_child("b")  # type: ignore[arg-type]

    def test_navigation(self) -> None:
        """Test find helpers over direct children and descendants."""
        root = build("<r><a><b>1</b></a><b>2</b><c/></r>")

        assert root.find_child("b").value == "2"
        assert [e.value for e in root.find_children("b")] == ["2"]
        assert root.find("b").value == "1"
        assert [e.value for e in root.find_all("b")] == ["1", "2"]
        assert root.find("r") is None
        assert root.find_child("missing") is None
        assert [e.tag for e in root.iter()] == ["r", "a", "b", "b", "c"]

    def test_to_dict(self) -> None:
        root = build('<r k="v"><a>1</a><b/></r>')
        assert root.to_dict() == {
            "tag": "r",
            "attributes": {"k": "v"},
            "children": [
                {"tag": "a", "attributes": {}, "value": "1"},
                {"tag": "b", "attributes": {}},
            ],
        }

    def test_structural_equality(self) -> None:
        assert XMLElement("a", {"x": "1"}, "v") == XMLElement("a", {"x": "1"}, "v")
        assert XMLElement("a", value="v") != XMLElement("a", value="w")


class TestXMLTreeBuilder:
    """Test well-formed documents build the expected trees."""

    def test_leaf_with_attributes(self) -> None:
        """Test a single leaf element with two attributes."""
        root = build('<a x="1" y="2">hi</a>')
        assert root == XMLElement("a", {"x": "1", "y": "2"}, "hi")

    def test_nested_children_in_order(self) -> None:
        root = build("<a><b>1</b><c>2</c></a>")
        assert root.value is None
        assert [(c.tag, c.value) for c in root.children] == [("b", "1"), ("c", "2")]

    def test_self_closing_equals_empty_pair(self) -> None:
        """Test <a/> and <a></a> build the same element."""
        assert build("<a/>") == build("<a></a>") == XMLElement("a")
        assert build("<a />") == XMLElement("a")

    def test_self_closing_with_attributes(self) -> None:
        assert build('<a k="v" />') == XMLElement("a", {"k": "v"})

    def test_whitespace_only_body_is_empty(self) -> None:
        assert build("<a>\n   </a>") == XMLElement("a")

    def test_entities_decoded_in_text_and_attributes(self) -> None:
        root = build('<a t="&lt;&amp;">&quot;hi&quot; &apos;x&apos;</a>')
        assert root.get_attribute("t") == "<&"
        assert root.value == "\"hi\" 'x'"

    def test_entities_kept_when_decoding_disabled(self) -> None:
        root = build("<a>&lt;b&gt;</a>", TreeConfig(decode_entities=False))
        assert root.value == "&lt;b&gt;"

    def test_attribute_order_and_duplicates(self) -> None:
        """Test attributes keep source order and a repeated name replaces the value."""
        root = build('<a b="1" a="2" b="3"/>')
        assert list(root.attributes) == ["b", "a"]
        assert root.attributes == {"b": "3", "a": "2"}

    def test_leading_text_whitespace_dropped(self) -> None:
        assert build("<a>  hi  </a>").value == "hi  "

    def test_indented_document(self) -> None:
        """Test whitespace between elements is ignored."""
        text = "\n<root>\n  <item id=\"1\">one</item>\n  <item id=\"2\">two</item>\n</root>\n"
        root = build(text)
        assert [c.get_attribute("id") for c in root.children] == ["1", "2"]
        assert [c.value for c in root.children] == ["one", "two"]

    def test_comments_are_ignored(self) -> None:
        """Test comments before, inside and after the root are skipped."""
        text = "<!-- head --><r><!-- a --><a>1</a>\n<!-- b --> <b/></r><!-- tail -->\n"
        assert build(text) == XMLElement("r", children=[
            XMLElement("a", value="1"),
            XMLElement("b"),
        ])

    def test_comment_only_body_is_empty(self) -> None:
        assert build("<r><!-- x --></r>") == XMLElement("r")

    @pytest.mark.parametrize("text, attributes", [
        ("<a >hi</a>", {}),
        ('<a x="1" >hi</a>', {"x": "1"}),
        ('<a x="1"\n   y="2"\n>hi</a>', {"x": "1", "y": "2"}),
    ])
    def test_leaf_with_spacing_before_header_end(self, text: str, attributes) -> None:
        """Test a leaf whose start tag has whitespace before '>'."""
        assert build(text) == XMLElement("a", attributes, "hi")

    def test_comment_before_text(self) -> None:
        """Test a comment between the start tag and the text is skipped."""
        assert build("<a><!-- c -->hi</a>") == XMLElement("a", value="hi")
        assert build("<a><!-- c -->  hi</a>") == XMLElement("a", value="hi")

    def test_deep_nesting_within_limit(self) -> None:
        depth = 100
        text = "<n>" * depth + "x" + "</n>" * depth
        element = build(text)
        for _ in range(depth - 1):
            element = element.children[0]
        assert element.value == "x"


class TestTreeBuilderErrors:
    """Test malformed token sequences are rejected."""

    @pytest.mark.parametrize("text", ["", "   \n", "<!-- only a comment -->"])
    def test_empty_document(self, text: str) -> None:
        with pytest.raises(XMLSyntaxError, match="Document is empty"):
            build(text)

    def test_mismatched_leaf_closing_tag(self) -> None:
        """Test the closing name is checked for leaves."""
        with pytest.raises(XMLSyntaxError) as exc_info:
            build("<a>x</b>")
        error = exc_info.value
        assert error.message == "Closing tag doesn't match opening tag: <a> vs </b>"
        assert error.expected == "</a>"
        assert error.found == "</b>"
        assert error.position == TokenPosition(1, 7, 6)

    def test_mismatched_container_closing_tag(self) -> None:
        with pytest.raises(XMLSyntaxError, match="<a> vs </c>"):
            build("<a><b>x</b></c>")

    def test_closing_tag_is_case_sensitive(self) -> None:
        with pytest.raises(XMLSyntaxError, match="<a> vs </A>"):
            build("<a>x</A>")

    @pytest.mark.parametrize("text, found", [
        ("<a><b>x</b>", "end of input"),
        ("<a>", "end of input"),
        ("<a>x", "VALUE 'x'"),
    ])
    def test_missing_closing_tag(self, text: str, found: str) -> None:
        """Test a missing closing tag names the opening tag."""
        with pytest.raises(XMLSyntaxError, match="Missing closing tag for <a>") as exc_info:
            build(text)
        assert exc_info.value.found == found

    def test_content_after_root(self) -> None:
        with pytest.raises(XMLSyntaxError, match="Unexpected content after root element </a>"):
            build("<a>x</a><b>y</b>")

    def test_malformed_start_tag(self) -> None:
        """Test an attribute name without a value is rejected."""
        with pytest.raises(XMLSyntaxError, match="Malformed start tag <a>, found IDENTIFIER 'x'"):
            build("<a x/>")

    def test_closing_tag_without_opening(self) -> None:
        with pytest.raises(XMLSyntaxError, match="Expected start of a new tag"):
            build("</a>")

    def test_max_depth_exceeded(self) -> None:
        """Test nesting beyond the configured depth raises a syntax error."""
        text = "<a><b><c><d>x</d></c></b></a>"
        assert build(text, TreeConfig(max_depth=4)).find("d").value == "x"
        with pytest.raises(XMLSyntaxError, match="Maximum nesting depth of 3 exceeded at <d>"):
            build(text, TreeConfig(max_depth=3))

    def test_default_depth_limit_prevents_recursion_error(self) -> None:
        depth = 600
        text = "<n>" * depth + "</n>" * depth
        with pytest.raises(XMLSyntaxError, match="Maximum nesting depth of 500"):
            build(text)

    def test_depth_limit_at_ceiling_prevents_recursion_error(self) -> None:
        """Test the largest accepted max_depth still fails with a syntax error."""
        depth = MAX_DEPTH_LIMIT + 50
        text = "<n>" * depth + "</n>" * depth
        with pytest.raises(XMLSyntaxError, match=f"Maximum nesting depth of {MAX_DEPTH_LIMIT}"):
            build(text, TreeConfig(max_depth=MAX_DEPTH_LIMIT))

    def test_error_position_in_message(self) -> None:
        with pytest.raises(XMLSyntaxError, match=r"\(line 2, column 3\)"):
            build("<a>\n</b>")

    def test_tree_config_validation(self) -> None:
        with pytest.raises(ValueError, match="max_depth must be > 0"):
            TreeConfig(max_depth=0)
