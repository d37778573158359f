import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from lxml import etree


logger = logging.getLogger(__name__)


XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class XmlSyntaxError(Exception):
    pass


class XmlNode:
    """Base of the parsed tree: a text-only element or a structured element.

    Every child lookup goes through a sequence of occurrences, because any
    element may repeat. `first()` is the one place that picks an occurrence.
    """

    text: Optional[str]

    @property
    def attributes(self) -> Mapping[str, str]:
        return {}

    @property
    def namespaces(self) -> Mapping[str, str]:
        return {}

    @property
    def children(self) -> Mapping[str, Tuple["XmlNode", ...]]:
        return {}

    def __contains__(self, name: str) -> bool:
        return name in self.children

    def all(self, name: str) -> Tuple["XmlNode", ...]:
        return self.children.get(name, ())

    def first(self, name: str) -> Optional["XmlNode"]:
        """Return the first occurrence of child `name`, or None"""
        occurrences = self.children.get(name)
        if not occurrences:
            return None
        return occurrences[0]

    def first_text(self, name: str) -> Optional[str]:
        """Text of the first occurrence of child `name`, if it carries any"""
        node = self.first(name)
        if node is None:
            return None
        return node.text

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    @property
    def value(self) -> Union[str, Dict[str, str]]:
        """Text when the element carries text, otherwise its attribute mapping"""
        if self.text is not None:
            return self.text
        return dict(self.attributes)


@dataclass(frozen=True)
class TextNode(XmlNode):
    """Element with neither attributes nor children, e.g. <title>Hi</title>"""

    text: str


@dataclass(frozen=True)
class ElementNode(XmlNode):
    """Element with attributes and/or children.

    `text` holds the element's own character data when it is not just
    whitespace. `element` keeps the source subtree so it can be re-serialized.
    """

    attrs: Mapping[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    kids: Mapping[str, Tuple[XmlNode, ...]] = field(default_factory=dict)
    declared: Mapping[str, str] = field(default_factory=dict)
    element: Any = field(default=None, compare=False, repr=False)

    @property
    def attributes(self) -> Mapping[str, str]:
        return self.attrs

    @property
    def namespaces(self) -> Mapping[str, str]:
        """Namespace declarations made on this element, keyed by prefix ("" for default)"""
        return self.declared

    @property
    def children(self) -> Mapping[str, Tuple[XmlNode, ...]]:
        return self.kids


def _make_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    return etree.XMLParser(
        encoding=encoding,
        recover=False,
        huge_tree=True,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _qualified_name(el) -> str:
    qname = etree.QName(el)
    if el.prefix:
        return f"{el.prefix}:{qname.localname}"
    return qname.localname


def _attribute_name(key: str, nsmap: Mapping[Optional[str], str]) -> str:
    if not key.startswith("{"):
        return key
    qname = etree.QName(key)
    if qname.namespace == XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _declared_namespaces(el) -> Dict[str, str]:
    parent = el.getparent()
    inherited = parent.nsmap if parent is not None else {}
    return {
        prefix or "": uri
        for prefix, uri in el.nsmap.items()
        if inherited.get(prefix) != uri
    }


class _Pending:
    """An element whose children are still being built"""

    def __init__(self, el) -> None:
        self.element = el
        self.remaining = iter(el)
        self.kids: Dict[str, list] = {}
        self.chunks = [el.text or ""]

    def finish(self) -> XmlNode:
        el = self.element
        attrs = {_attribute_name(key, el.nsmap): value for key, value in el.attrib.items()}
        declared = _declared_namespaces(el)
        text = "".join(self.chunks)

        if not attrs and not self.kids and not declared:
            return TextNode(text)
        return ElementNode(
            attrs=attrs,
            text=text if text.strip() else None,
            kids={name: tuple(nodes) for name, nodes in self.kids.items()},
            declared=declared,
            element=el,
        )


def _build(root) -> XmlNode:
    # explicit stack: huge_tree documents can nest deeper than the recursion limit
    stack = [_Pending(root)]
    while True:
        pending = stack[-1]
        child = next(pending.remaining, None)
        if child is not None:
            pending.chunks.append(child.tail or "")
            # entity references left unresolved show up as non-element children
            if isinstance(child.tag, str):
                stack.append(_Pending(child))
            continue

        stack.pop()
        node = pending.finish()
        if not stack:
            return node
        stack[-1].kids.setdefault(_qualified_name(pending.element), []).append(node)


def parse_xml(content: Union[str, bytes]) -> ElementNode:
    """Parse an XML document into a node tree.

    The returned document node has a single child: the root element, keyed
    by its qualified name (e.g. "rss", "feed", "rdf:RDF").
    """
    try:
        if isinstance(content, str):
            # the declared encoding no longer applies to already decoded text
            root = etree.fromstring(content.encode("utf-8"), _make_parser("utf-8"))
        else:
            root = etree.fromstring(content, _make_parser())
    except etree.XMLSyntaxError as exc:
        raise XmlSyntaxError(f"Invalid XML: {exc}") from exc
    except ValueError as exc:
        raise XmlSyntaxError(f"Parse error: {exc}") from exc

    logger.debug("Parsed XML document with root <%s>", _qualified_name(root))
    return ElementNode(kids={_qualified_name(root): (_build(root),)})
