from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


FEED_VERSION = "1.0.0"


class Author(BaseModel):
    name: str


class PodcastOwner(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class FeedPodcast(BaseModel):
    model_config = ConfigDict(extra="allow")

    owner: Optional[PodcastOwner] = None
    image: Optional[str] = None
    author: Optional[Any] = None
    subtitle: Optional[Any] = None
    summary: Optional[Any] = None
    explicit: Optional[Any] = None


class ItemPodcast(BaseModel):
    model_config = ConfigDict(extra="allow")

    author: Optional[Any] = None
    subtitle: Optional[Any] = None
    summary: Optional[Any] = None
    explicit: Optional[Any] = None
    duration: Optional[Any] = None
    # href string, or the raw attribute mapping when the image has no href
    image: Optional[Any] = None


class Item(BaseModel):
    """One normalized feed entry.

    Extra keys written by field declarations (e.g. "creator",
    "content:encoded", custom destinations) are kept alongside the
    canonical fields.
    """

    model_config = ConfigDict(extra="allow")

    title: Optional[Union[str, Dict[str, str]]] = None
    url: Optional[str] = None
    id: Optional[str] = None
    date_published: Optional[str] = None
    author: Optional[Union[Author, str, Dict[str, str]]] = None
    content_html: Optional[str] = None
    summary: Optional[str] = None
    enclosure: Optional[Union[Dict[str, str], str]] = None
    attachments: Optional[Union[Dict[str, str], str]] = None
    tags: Optional[List[str]] = None
    podcast: Optional[ItemPodcast] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Feed(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: str = FEED_VERSION
    title: Optional[Union[str, Dict[str, str]]] = None
    home_page_url: Optional[str] = None
    feed_url: Optional[str] = None
    podcast: Optional[FeedPodcast] = None
    items: List[Item] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form; absent optional fields are left out"""
        return self.model_dump(exclude_none=True)
