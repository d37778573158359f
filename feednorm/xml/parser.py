import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from feednorm.config import ParserOptions
from feednorm.dates import DateParseError, normalize_date
from feednorm.fields import (
    DATE_FIELDS,
    FEED_FIELDS,
    ITEM_FIELDS,
    copy_fields,
    first_present,
    first_present_text,
)
from feednorm.models import FEED_VERSION, Author, Feed
from feednorm.xml.content import get_snippet, render_content
from feednorm.xml.podcast import declares_podcast_namespace, decorate_podcast
from feednorm.xml.tree import XmlNode, parse_xml


logger = logging.getLogger(__name__)


ATOM = "atom"
RSS1 = "rss1"
RSS2 = "rss2"


class UnrecognizedFeedFormat(Exception):
    pass


class MissingRequiredFieldError(Exception):
    pass


def detect_dialect(document: XmlNode) -> str:
    """Classify a parsed document as Atom, RSS 2.0 or RSS 1.0 (first match wins)"""
    if "feed" in document:
        return ATOM
    rss = document.first("rss")
    if rss is not None and (rss.attr("version") or "").startswith("2"):
        return RSS2
    if "rdf:RDF" in document:
        return RSS1
    raise UnrecognizedFeedFormat("Feed not recognized as Atom, RSS 1.0 or RSS 2.0")


class FeedParser:
    """Normalizes Atom, RSS 1.0 and RSS 2.0 documents into one feed model"""

    def __init__(self, options: Optional[ParserOptions] = None):
        self.options = options or ParserOptions()
        custom = self.options.custom_fields
        self.feed_fields = list(FEED_FIELDS) + list(custom.feed)
        self.item_fields = list(ITEM_FIELDS) + list(custom.item)

    def parse_string(self, xml: Union[str, bytes]) -> Feed:
        return self.parse_document(parse_xml(xml))

    def parse_document(self, document: XmlNode) -> Feed:
        dialect = detect_dialect(document)
        if dialect == ATOM:
            data = self._parse_atom(document.first("feed"))
        elif dialect == RSS2:
            data = self._parse_rss2(document.first("rss"))
        else:
            data = self._parse_rss1(document.first("rdf:RDF"))

        logger.debug("Parsed %d %s items", len(data["items"]), dialect)
        return Feed.model_validate(data)

    def _parse_atom(self, feed: XmlNode) -> Dict[str, Any]:
        data: Dict[str, Any] = {"version": FEED_VERSION, "items": []}

        # Positional: first link is the site, second the feed itself
        links = feed.all("link")
        if len(links) > 0 and links[0].attr("href"):
            data["home_page_url"] = links[0].attr("href")
        if len(links) > 1 and links[1].attr("href"):
            data["feed_url"] = links[1].attr("href")

        title = feed.first_text("title")
        if title:
            data["title"] = title

        for entry in feed.all("entry"):
            data["items"].append(self._parse_atom_entry(entry))
        return data

    def _parse_atom_entry(self, entry: XmlNode) -> Dict[str, Any]:
        item: Dict[str, Any] = {}

        title = entry.first_text("title")
        if title:
            item["title"] = title

        link = entry.first("link")
        if link is not None and link.attr("href") is not None:
            item["url"] = link.attr("href")

        # Atom dates are always UTC; a bad one fails the whole parse
        if "updated" in entry:
            item["date_published"] = normalize_date(entry.first_text("updated"), utc=True)

        author = entry.first("author")
        if author is not None:
            name = author.first_text("name")
            if name is not None:
                item["author"] = Author(name=name)

        content = entry.first("content")
        if content is not None:
            item["content_html"] = render_content(content)

        entry_id = entry.first_text("id")
        if entry_id is not None:
            item["id"] = entry_id
        return item

    def _parse_rss1(self, rdf: XmlNode) -> Dict[str, Any]:
        channel = rdf.first("channel")
        if channel is None:
            raise MissingRequiredFieldError("RSS 1.0 document has no channel")
        # RSS 1.0 items are siblings of the channel, not children
        data, _ = self._parse_rss(channel, rdf.all("item"))
        return data

    def _parse_rss2(self, rss: XmlNode) -> Dict[str, Any]:
        channel = rss.first("channel")
        if channel is None:
            raise MissingRequiredFieldError("RSS document has no channel")
        raw_items = channel.all("item")
        data, items = self._parse_rss(channel, raw_items)

        atom_link = channel.first("atom:link")
        if atom_link is not None and atom_link.attr("href"):
            data["feed_url"] = atom_link.attr("href")

        if declares_podcast_namespace(rss):
            decorate_podcast(data, channel, raw_items, items)
        return data

    def _parse_rss(self, channel: XmlNode,
                   raw_items: Sequence[XmlNode]) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        title = channel.first_text("title")
        if title is None:
            raise MissingRequiredFieldError("RSS channel has no title")

        data: Dict[str, Any] = {"version": FEED_VERSION, "title": title}

        home_page_url = channel.first_text("link")
        if home_page_url is not None:
            data["home_page_url"] = home_page_url

        feed_url = first_present(_self_link(channel), channel.attr("rdf:about"))
        if feed_url:
            data["feed_url"] = feed_url

        copy_fields(channel, data, self.feed_fields)

        items = [self._parse_rss_item(raw) for raw in raw_items]
        data["items"] = items
        return data, items

    def _parse_rss_item(self, raw: XmlNode) -> Dict[str, Any]:
        item: Dict[str, Any] = {}

        enclosure = raw.first("enclosure")
        if enclosure is not None:
            item["enclosure"] = dict(enclosure.attributes)
            item["attachments"] = item["enclosure"]

        description = raw.first("description")
        if description is not None:
            item["content_html"] = render_content(description)
            item["summary"] = get_snippet(item["content_html"])

        title = raw.first_text("title")
        if title is not None:
            item["title"] = title

        link = raw.first_text("link")
        if link is not None:
            item["url"] = link

        # guid text is taken as-is; isPermaLink is not interpreted
        guid = raw.first_text("guid")
        if guid is not None:
            item["id"] = guid

        categories = raw.all("category")
        if categories:
            item["tags"] = [category.text or "" for category in categories]

        date = first_present_text(raw, DATE_FIELDS)
        if date:
            try:
                item["date_published"] = normalize_date(date.strip())
            except DateParseError as exc:
                logger.debug("Ignoring item date: %s", exc)

        copy_fields(raw, item, self.item_fields)
        if enclosure is not None:
            # enclosure stays the attribute mapping even when the element has text
            item["enclosure"] = item["attachments"]
        return item


def _self_link(channel: XmlNode) -> Optional[str]:
    for link in channel.all("atom:link"):
        if link.attr("rel") == "self" and link.attr("href"):
            return link.attr("href")
    return None
