from typing import Any, MutableMapping, Optional, Sequence, Tuple, Union

from feednorm.xml.tree import XmlNode


# A bare name copies as-is; a (source, destination) pair renames on copy
FieldDeclaration = Union[str, Tuple[str, str]]


FEED_FIELDS: Tuple[FieldDeclaration, ...] = (
    ("author", "creator"),
    ("dc:publisher", "publisher"),
    ("dc:creator", "creator"),
    ("dc:source", "source"),
    ("dc:title", "title"),
    ("dc:type", "type"),
    "title",
    "description",
    "author",
    "pubDate",
    "webMaster",
    "managingEditor",
    "generator",
    "link",
)

ITEM_FIELDS: Tuple[FieldDeclaration, ...] = (
    ("author", "creator"),
    ("dc:creator", "creator"),
    ("dc:date", "date"),
    ("dc:language", "language"),
    ("dc:rights", "rights"),
    ("dc:source", "source"),
    ("dc:title", "title"),
    "title",
    "link",
    "pubDate",
    "author",
    "content:encoded",
    "enclosure",
    "dc:creator",
    "dc:date",
)


def _itunes(name: str) -> Tuple[str, str]:
    return (f"itunes:{name}", name)


PODCAST_FEED_FIELDS: Tuple[FieldDeclaration, ...] = tuple(
    _itunes(name) for name in ("author", "subtitle", "summary", "explicit")
)

PODCAST_ITEM_FIELDS: Tuple[FieldDeclaration, ...] = tuple(
    _itunes(name) for name in ("author", "subtitle", "summary", "explicit", "duration", "image")
)

# Item date sources, most specific first
DATE_FIELDS: Tuple[str, ...] = ("dc:date", "dcterms:issued", "pubDate")


def copy_fields(source: XmlNode, dest: MutableMapping[str, Any],
                fields: Sequence[FieldDeclaration]) -> None:
    """Copy the first occurrence of each declared field from `source` into `dest`.

    Declarations are applied in order, so when two of them target the same
    destination key the later one wins.
    """
    for declaration in fields:
        if isinstance(declaration, str):
            from_name = to_name = declaration
        else:
            from_name, to_name = declaration
        node = source.first(from_name)
        if node is not None:
            dest[to_name] = node.value


def first_present(*values: Optional[Any]) -> Optional[Any]:
    """Return the first value that is neither None nor empty"""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def first_present_text(source: XmlNode, names: Sequence[str]) -> Optional[str]:
    """Text of the first child among `names` that carries non-empty text"""
    return first_present(*(source.first_text(name) for name in names))
