# src/rssit/dom/builder.py
import logging
from typing import List, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

logger = logging.getLogger(__name__)

Node = Union[Tag, NavigableString]


class DocumentBuilder:
    """
    Builds the read-only document tree the inference engine works on and
    offers the few traversal helpers every stage shares.
    """

    @staticmethod
    def parse_doc(html: str) -> BeautifulSoup:
        """
        Parses raw HTML into a BeautifulSoup tree.

        Args:
            html (str): The raw HTML string. May be empty.

        Returns:
            BeautifulSoup: The parsed document (empty for empty input).
        """
        if not html:
            return BeautifulSoup("", "html.parser")
        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = html.replace('\ufeff', '').strip()
        return BeautifulSoup(clean_html, "html.parser")

    @staticmethod
    def get_root(soup: Union[BeautifulSoup, Tag]) -> Tag:
        """
        Returns the <body> element. Fragments without a body are treated as
        if the whole markup were the body.
        """
        if isinstance(soup, Tag) and soup.name == "body":
            return soup
        body = soup.find("body")
        if body is None:
            logger.debug("Document has no <body>; using the document itself as root.")
            return soup
        return body

    @staticmethod
    def is_text_node(node) -> bool:
        # Comments, CDATA, doctypes and processing instructions carry no visible text.
        return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)

    @staticmethod
    def text_nodes_under(el: Tag) -> List[NavigableString]:
        """Returns all non-blank text leaves below `el` in document order."""
        return [
            node for node in el.descendants
            if DocumentBuilder.is_text_node(node) and node.strip()
        ]
