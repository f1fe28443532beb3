"""
Generic table extraction from the HTML source the TC4400 serves.

None of the tables on the modem's pages have an id, class or caption that we could key off of,
    so tables are identified by position only: 1st, 2nd, 3rd ... table in the document.
"""

import structlog
from bs4 import BeautifulSoup, Tag

log = structlog.get_logger(__name__)

# Each table is a list of rows, each row is a list of trimmed cell strings
Table = list[list[str]]

# html5lib builds the same tree a browser does. Importantly, it inserts the implicit <tbody>
#   that the modem's hand-written HTML omits. html.parser does not, which would leave every row
#   outside of a row group.
HTML_PARSER = "html5lib"

_ROW_GROUPS = ("thead", "tbody")
_CELLS = ("th", "td")


def make_soup(html: bytes | str) -> BeautifulSoup:
    """Parse raw page source. Any error from the parser propagates unchanged."""
    return BeautifulSoup(html, HTML_PARSER)


def extract_tables(soup: BeautifulSoup | Tag) -> list[Table]:
    """Every <table> in the document, in document order.

    find_all() walks the tree depth-first, pre-order so nested tables come out right after the
        table that contains them. A nested table is its own entry; its text also ends up in the
        outer table's cell that holds it.
    """
    tables = [_extract_table(table) for table in soup.find_all("table")]
    log.debug("Extracted tables", count=len(tables), rows=[len(t) for t in tables])
    return tables


def parse_tables(html: bytes | str) -> list[Table]:
    """Wrapper"""
    return extract_tables(make_soup(html))


def _extract_table(table: Tag) -> Table:
    # Only rows directly inside a <thead> or <tbody> count; a <tfoot> or a stray <tr>
    #   elsewhere in the table is ignored.
    rows = []
    for group in table.find_all(_ROW_GROUPS, recursive=False):
        for row in group.find_all("tr", recursive=False):
            rows.append([cell_text(cell) for cell in row.find_all(_CELLS, recursive=False)])
    return rows


def cell_text(cell: Tag) -> str:
    """All text under the cell glued together, then trimmed.

    Inline markup adds no separators: <td>35<b>.5</b> dB</td> -> '35.5 dB'
    """
    return cell.get_text().strip()
