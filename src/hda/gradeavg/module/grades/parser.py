import math
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4 import Tag
from loguru import logger

from hda.gradeavg.model import OverviewRow
from hda.gradeavg.model import PageLayout

FAIL_GRADE = 5.0
STATISTICS_LINK_PREFIX = "javascript:Statistik('"
STATISTICS_LINK_SUFFIX = "')"


def _child_tags(tag: Tag) -> List[Tag]:
    return [child for child in tag.children if isinstance(child, Tag)]


def _first_link(cell: Tag) -> Optional[str]:
    children = _child_tags(cell)
    if not children:
        return None
    href = children[0].get("href")
    return str(href) if href else None


def parse_login_tan(html_content: str) -> str:
    """Extracts the one-time LoginTAN from the login form. Empty if absent."""
    soup = BeautifulSoup(html_content, "html.parser")
    tan_input = soup.select_one('input[name="LoginTAN"]')
    if tan_input is None:
        return ""
    return str(tan_input.get("value") or "")


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parses a number that may use a decimal comma. '4,5' -> 4.5"""
    if not text:
        return None
    try:
        value = float(text.strip().replace(",", ".", 1))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_statistics_id(href: Optional[str]) -> Optional[str]:
    """Extracts the statistics id from "javascript:Statistik('<id>')"."""
    if not href:
        return None
    stat_id = href.strip().removeprefix(STATISTICS_LINK_PREFIX).removesuffix(STATISTICS_LINK_SUFFIX)
    return stat_id or None


def parse_row(cells: List[Tag], layout: PageLayout) -> Optional[OverviewRow]:
    """
    Parses the cells of one grade overview row.

    All column positions come from the layout. Returns None for header, footer
    and malformed rows, failed modules, skipped names and rows without usable
    credit points.

    Args:
        cells: The <td>/<th> children of the row, in order.
        layout: The page layout describing the column positions.

    Returns:
        The parsed row, or None if the row does not qualify.
    """
    if len(cells) != layout.column_count:
        return None
    if layout.require_td_first and cells[0].name != "td":
        return None

    statistics_id = parse_statistics_id(_first_link(cells[layout.statistics_column]))
    if statistics_id is None:
        return None

    if layout.grade_column is not None:
        grade = parse_number(cells[layout.grade_column].get_text(strip=True))
        if grade == FAIL_GRADE:
            return None

    name = cells[layout.name_column].get_text(strip=True)
    if any(marker in name for marker in layout.skip_markers):
        return None

    if layout.credit_points_column is not None:
        credit_points = parse_number(cells[layout.credit_points_column].get_text(strip=True))
        if credit_points is None or credit_points <= 0:
            return None
        return OverviewRow(name=name, statistics_id=statistics_id, credit_points=credit_points)

    if layout.detail_link_column is None:
        return None
    detail_url = _first_link(cells[layout.detail_link_column])
    if detail_url is None:
        return None
    return OverviewRow(name=name, statistics_id=statistics_id, detail_url=detail_url)


def parse_overview_html(html_content: str, layout: PageLayout) -> List[OverviewRow]:
    """
    Parses the grade overview page into its qualifying rows.

    The first and last rows of the table are the header and the footer and
    are always skipped.
    """
    soup = BeautifulSoup(html_content, "html.parser")
    rows = soup.select(layout.row_selector)

    result: List[OverviewRow] = []
    for i, row in enumerate(rows):
        if i == 0 or i == len(rows) - 1:
            continue

        cells = row.find_all(["td", "th"], recursive=False)
        parsed = parse_row(cells, layout)
        if parsed is None:
            logger.debug(f"Skipped overview row {i}: {row.get_text(' ', strip=True)[:80]!r}")
            continue
        result.append(parsed)

    logger.debug(f"Parsed {len(result)} of {len(rows)} overview rows.")
    return result


def parse_threshold(title: str) -> Optional[Tuple[int, float]]:
    """Parses a statistics title "<cumulative count> <= <grade>". '3 <= 2,0' -> (3, 2.0)"""
    parts = title.split(" <= ")
    if len(parts) != 2:
        return None
    try:
        count = int(parts[0].strip())
    except ValueError:
        return None
    grade = parse_number(parts[1])
    if grade is None:
        return None
    return count, grade


def compute_statistics_average(entries: Iterable[Tuple[int, float]]) -> Optional[float]:
    """
    Computes the average grade from cumulative (count, grade) threshold entries.

    Each entry adds `count - previous count` students with its grade. Failed
    grades are left out of the sum but still count in the denominator, which is
    the final cumulative count.

    Returns:
        The average grade, or None if no student has been graded.
    """
    previous = 0
    total = 0.0
    for count, grade in entries:
        if grade != FAIL_GRADE:
            total += grade * (count - previous)
        previous = count

    if previous <= 0:
        return None
    return total / previous


def parse_statistics_html(html_content: str) -> Optional[float]:
    """Parses a grade statistics page. None if it has no grade distribution."""
    soup = BeautifulSoup(html_content, "html.parser")
    spans = soup.select("span > span")
    if not spans:
        return None

    entries = []
    for span in spans:
        title = span.get("title")
        if not title:
            continue
        entry = parse_threshold(str(title))
        if entry is None:
            logger.debug(f"Ignored malformed statistics entry {title!r}")
            continue
        entries.append(entry)

    return compute_statistics_average(entries)


def parse_detail_credit_points(html_content: str, layout: PageLayout) -> Optional[float]:
    """Reads the credit points from the fixed cell of a module detail page."""
    soup = BeautifulSoup(html_content, "html.parser")
    rows = soup.select(layout.detail_row_selector)
    if len(rows) <= layout.detail_row:
        return None
    cells = _child_tags(rows[layout.detail_row])
    if len(cells) <= layout.detail_column:
        return None

    return parse_number(cells[layout.detail_column].get_text(strip=True))
