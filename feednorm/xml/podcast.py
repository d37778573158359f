import logging
from typing import Any, Dict, List, Optional, Sequence

from feednorm.fields import PODCAST_FEED_FIELDS, PODCAST_ITEM_FIELDS, copy_fields
from feednorm.xml.tree import XmlNode


logger = logging.getLogger(__name__)


PODCAST_PREFIX = "itunes"


class PodcastAlignmentError(Exception):
    pass


def declares_podcast_namespace(rss: XmlNode) -> bool:
    return PODCAST_PREFIX in rss.namespaces


def _image_href(node: XmlNode) -> Optional[str]:
    image = node.first("itunes:image")
    if image is None:
        return None
    return image.attr("href")


def decorate_podcast(feed: Dict[str, Any], channel: XmlNode,
                     raw_items: Sequence[XmlNode], items: List[Dict[str, Any]]) -> None:
    """Add itunes metadata to an already normalized RSS 2.0 feed.

    `raw_items[i]` must be the source of `items[i]`; the two are walked in
    lockstep and a length mismatch is an error rather than a silent shift.
    """
    if len(raw_items) != len(items):
        raise PodcastAlignmentError(
            f"{len(raw_items)} source items but {len(items)} normalized items"
        )

    podcast: Dict[str, Any] = {}
    owner_node = channel.first("itunes:owner")
    if owner_node is not None:
        owner = {}
        name = owner_node.first_text("itunes:name")
        if name is not None:
            owner["name"] = name
        email = owner_node.first_text("itunes:email")
        if email is not None:
            owner["email"] = email

        image = _image_href(channel)
        if image:
            podcast["image"] = image
        podcast["owner"] = owner

    copy_fields(channel, podcast, PODCAST_FEED_FIELDS)
    feed["podcast"] = podcast

    for raw, item in zip(raw_items, items):
        entry: Dict[str, Any] = {}
        copy_fields(raw, entry, PODCAST_ITEM_FIELDS)
        image = _image_href(raw)
        if image:
            entry["image"] = image
        item["podcast"] = entry

    logger.debug("Added podcast metadata to %d items", len(items))
