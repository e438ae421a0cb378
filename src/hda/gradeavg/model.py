import codecs
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
import json
from pathlib import Path
from typing import Optional

from loguru import logger
import yaml

from hda.gradeavg.error import ConfigError


@dataclass
class ModuleGrade:
    name: str
    average: float
    credit_points: float


@dataclass
class OverviewRow:
    """One qualifying row of the grade overview table.

    `credit_points` is None when the layout resolves them from the module
    detail page at `detail_url`.
    """

    name: str
    statistics_id: str
    credit_points: Optional[float] = None
    detail_url: Optional[str] = None


@dataclass(frozen=True)
class PageLayout:
    """Column layout and encoding of an OBS grade overview page.

    Column indices are zero-based. A `credit_points_column` of None means the
    credit points are read from the module detail page linked in
    `detail_link_column`, at `detail_row`/`detail_column` of the rows matched
    by `detail_row_selector`.

    The default selectors match rows with and without an explicit <tbody>.
    """

    name: str = "grades"
    encoding: Optional[str] = None
    row_selector: str = "#formAlleNoten tbody tr, #formAlleNoten table > tr"
    column_count: int = 10
    require_td_first: bool = True
    name_column: int = 3
    statistics_column: int = 7
    credit_points_column: Optional[int] = 8
    detail_link_column: Optional[int] = None
    grade_column: Optional[int] = None
    skip_markers: tuple[str, ...] = ()
    detail_row_selector: str = "#content table tbody > tr, #content table > tr"
    detail_row: int = 6
    detail_column: int = 1


GRADES_LAYOUT = PageLayout()

LEGACY_LAYOUT = PageLayout(
    name="legacy",
    encoding="windows-1252",
    column_count=9,
    require_td_first=False,
    credit_points_column=None,
    detail_link_column=4,
    grade_column=6,
    skip_markers=("(PVL)",),
)

LAYOUTS = {layout.name: layout for layout in (GRADES_LAYOUT, LEGACY_LAYOUT)}


def load_layout(value: str) -> PageLayout:
    """Resolve a layout preset name or a layout file.

    Files may be YAML (.yaml/.yml) or JSON (.json). Their keys override the
    `grades` preset, so a file only needs to list what differs.
    """
    if value in LAYOUTS:
        return LAYOUTS[value]

    path = Path(value)
    if path.suffix not in (".yaml", ".yml", ".json"):
        raise ConfigError(
            f"Unknown layout {value!r}. Use one of {', '.join(LAYOUTS)} or a .yaml/.json file."
        )
    if not path.exists():
        logger.error(f"Layout file {path} not found.")
        raise ConfigError(f"Layout file {path} not found.")

    logger.info(f"Loading page layout from {path}")
    with open(path, "r") as f:
        if path.suffix == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigError(f"Layout file {path} must contain a mapping.")

    known = {f.name for f in fields(PageLayout)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown layout keys in {path}: {', '.join(sorted(unknown))}")

    # YAML/JSON have no tuples
    if isinstance(data.get("skip_markers"), list):
        data["skip_markers"] = tuple(data["skip_markers"])
    elif data.get("skip_markers", ()) is None:
        data["skip_markers"] = ()
    data.setdefault("name", path.stem)

    layout = replace(GRADES_LAYOUT, **data)
    _validate_layout(layout, path)
    return layout


def _validate_layout(layout: PageLayout, path: Path):
    """Checks value types and that every column index fits the column count."""

    def fail(message: str):
        raise ConfigError(f"Invalid layout in {path}: {message}")

    def is_int(value) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    for key in ("name", "row_selector", "detail_row_selector"):
        if not isinstance(getattr(layout, key), str) or not getattr(layout, key):
            fail(f"{key} must be a non-empty string.")
    if not isinstance(layout.require_td_first, bool):
        fail("require_td_first must be true or false.")
    if not isinstance(layout.skip_markers, tuple) or not all(
        isinstance(marker, str) for marker in layout.skip_markers
    ):
        fail("skip_markers must be a list of strings.")

    if layout.encoding is not None:
        if not isinstance(layout.encoding, str):
            fail("encoding must be a string.")
        try:
            codecs.lookup(layout.encoding)
        except LookupError:
            fail(f"unknown encoding {layout.encoding!r}.")

    for key in ("column_count", "detail_row", "detail_column"):
        if not is_int(getattr(layout, key)) or getattr(layout, key) < 0:
            fail(f"{key} must be a non-negative integer.")
    if layout.column_count == 0:
        fail("column_count must be positive.")

    for key in (
        "name_column",
        "statistics_column",
        "credit_points_column",
        "detail_link_column",
        "grade_column",
    ):
        value = getattr(layout, key)
        if value is None and key not in ("name_column", "statistics_column"):
            continue
        if not is_int(value) or not 0 <= value < layout.column_count:
            fail(f"{key} must be an integer from 0 to {layout.column_count - 1}.")

    if layout.credit_points_column is None and layout.detail_link_column is None:
        fail("either credit_points_column or detail_link_column must be set.")
