"""Shared pytest fixtures for the XSLT derivative tests."""

from datetime import datetime

import pytest

from xslt_derivative import ActionConfig, ContentItem, Term
from xslt_derivative.host import InMemoryMediaService, InMemoryTermService, LocalFileStore


A_TO_B_XSL = b"""<?xml version="1.0"?>
<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="html"/>
  <xsl:template match="a"><b><xsl:apply-templates/></b></xsl:template>
</xsl:stylesheet>
"""

SOURCE_XML = b"<a>hello</a>"


@pytest.fixture
def a_to_b_xsl() -> bytes:
    """Stylesheet converting <a> to <b>."""
    return A_TO_B_XSL


@pytest.fixture
def store(tmp_path):
    """Local file store with public, temporary and fedora schemes."""
    return LocalFileStore(
        {scheme: tmp_path / scheme for scheme in ("public", "temporary", "fedora")},
        default_scheme="public",
    )


@pytest.fixture
def source_term() -> Term:
    return Term(tid=1, name="Original File", uri="urn:source", vid="islandora_media_use")


@pytest.fixture
def dest_term() -> Term:
    return Term(tid=2, name="Service File", uri="urn:dest", vid="islandora_media_use")


@pytest.fixture
def terms(source_term, dest_term):
    return InMemoryTermService([source_term, dest_term])


@pytest.fixture
def media(store):
    return InMemoryMediaService(store, media_types=["file", "document"])


@pytest.fixture
def node() -> ContentItem:
    return ContentItem(nid=42, title="Finding aid", uuid="6f1c-42", type="collection")


@pytest.fixture
def stylesheet(store):
    """Permanent stylesheet file record."""
    record = store.create("public://finding_aid.xsl", A_TO_B_XSL, "application/xslt+xml")
    record.set_permanent()
    return store.save(record)


@pytest.fixture
def source_file(store):
    return store.create("public://source/42.xml", SOURCE_XML, "application/xml")


@pytest.fixture
def source_media(media, node, source_file, source_term):
    """Source media on node 42 tagged urn:source."""
    return media.add_media(node, source_file, source_term, bundle="file")


@pytest.fixture
def config(stylesheet) -> ActionConfig:
    return ActionConfig.defaults("public").with_values(
        transform_file=stylesheet.fid,
        source_term_uri="urn:source",
        dest_term_uri="urn:dest",
        dest_media_type="document",
        dest_scheme="fedora",
        dest_path="[node:nid]_out.html",
    )


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 3, 7, 9, 5, 1)
