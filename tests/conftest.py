"""Shared feed documents for the test suite."""

import pytest


RSS2_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:atom="http://www.w3.org/2005/Atom"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example News</title>
    <link>https://example.com/</link>
    <description>All the news</description>
    <generator>handwritten</generator>
    <atom:link href="https://example.com/feed.xml" rel="self" type="application/rss+xml"/>
    <item>
      <title>First &amp; foremost</title>
      <link>https://example.com/1</link>
      <description>&lt;p&gt;Hello &amp;amp; &lt;b&gt;world&lt;/b&gt;&lt;/p&gt;</description>
      <guid isPermaLink="false">item-1</guid>
      <category>news</category>
      <category>tech</category>
      <pubDate>Thu, 02 Jan 2020 03:04:05 +0200</pubDate>
      <dc:creator>Jane Doe</dc:creator>
      <content:encoded><![CDATA[<p>Full text</p>]]></content:encoded>
      <enclosure url="https://example.com/1.mp3" length="1234" type="audio/mpeg"/>
    </item>
    <item>
      <title>Second</title>
      <link>https://example.com/2</link>
      <description><![CDATA[<p>Plain <i>cdata</i></p>]]></description>
      <guid>https://example.com/2</guid>
      <pubDate>not-a-date</pubDate>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <link href="https://example.org/"/>
  <link href="https://example.org/atom.xml" rel="self"/>
  <updated>2020-01-02T03:04:05Z</updated>
  <entry>
    <title type="text">Atom entry</title>
    <link href="https://example.org/entry/1"/>
    <id>urn:uuid:1</id>
    <updated>2020-01-02T03:04:05+02:00</updated>
    <author><name>John Smith</name></author>
    <content type="html">&lt;p&gt;Rich&lt;/p&gt;</content>
    <summary>Not used</summary>
  </entry>
  <entry>
    <title>Structured</title>
    <link href="https://example.org/entry/2"/>
    <id>urn:uuid:2</id>
    <updated>2020-01-03T00:00:00Z</updated>
    <content type="xhtml"><div xmlns="http://www.w3.org/1999/xhtml"><p>Hi</p></div></content>
  </entry>
</feed>
"""

RSS1_FEED = """<?xml version="1.0"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns="http://purl.org/rss/1.0/"
         xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel rdf:about="https://example.net/rss">
    <title>Example RDF</title>
    <link>https://example.net/</link>
    <description>RDF feed</description>
    <dc:publisher>Example Inc</dc:publisher>
  </channel>
  <item rdf:about="https://example.net/a">
    <title>RDF item</title>
    <link>https://example.net/a</link>
    <description>Some &lt;em&gt;text&lt;/em&gt;</description>
    <dc:date>2020-01-02T03:04:05+02:00</dc:date>
    <dc:creator>Ann</dc:creator>
  </item>
</rdf:RDF>
"""

PODCAST_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>Pod</title>
    <link>https://pod.example/</link>
    <itunes:author>Host</itunes:author>
    <itunes:subtitle>Weekly talk</itunes:subtitle>
    <itunes:summary>A show</itunes:summary>
    <itunes:explicit>no</itunes:explicit>
    <itunes:owner>
      <itunes:name>Owner</itunes:name>
      <itunes:email>owner@pod.example</itunes:email>
    </itunes:owner>
    <itunes:image href="https://pod.example/cover.jpg"/>
    <item>
      <title>Episode 1</title>
      <itunes:duration>10:00</itunes:duration>
      <itunes:image href="https://pod.example/1.jpg"/>
      <enclosure url="https://pod.example/1.mp3" length="100" type="audio/mpeg"/>
    </item>
    <item>
      <title>Episode 2</title>
      <itunes:author>Guest</itunes:author>
      <itunes:duration>20:00</itunes:duration>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def rss2_feed() -> str:
    return RSS2_FEED


@pytest.fixture
def atom_feed() -> str:
    return ATOM_FEED


@pytest.fixture
def rss1_feed() -> str:
    return RSS1_FEED


@pytest.fixture
def podcast_feed() -> str:
    return PODCAST_FEED


@pytest.fixture
def feed_file(tmp_path):
    """Write a feed document to a temporary file and return its path."""

    def write(content: str, name: str = "feed.xml") -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write
