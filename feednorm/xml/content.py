import copy
import re
from html import unescape
from typing import Union

from lxml import etree

from feednorm.xml.tree import XmlNode


WRAPPER_TAG = "div"

_TAG_RE = re.compile(r"<(?:.|\n)*?>")


def render_content(content: Union[XmlNode, str]) -> str:
    """Render a content node as literal text or as a serialized XML fragment.

    Feeds carry rich content either as escaped HTML text or as real nested
    markup. Text is returned verbatim; markup is re-serialized under a
    synthetic <div> that takes over the source element's attributes.
    """
    if isinstance(content, str):
        return content
    if content.text is not None:
        return content.text

    source = getattr(content, "element", None)
    if source is None:
        return ""

    wrapper = etree.Element(WRAPPER_TAG)
    for key, value in source.attrib.items():
        wrapper.set(key, value)
    wrapper.text = source.text
    for child in source:
        wrapper.append(copy.deepcopy(child))
    etree.cleanup_namespaces(wrapper)
    return etree.tostring(wrapper, encoding="unicode")


def strip_html(text: str) -> str:
    return _TAG_RE.sub("", text)


def get_snippet(html: str) -> str:
    """Plain-text rendering of an HTML string: tags removed, entities decoded"""
    return unescape(strip_html(html)).strip()
