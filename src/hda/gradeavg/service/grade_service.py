from typing import Optional

from loguru import logger

from hda.gradeavg.model import OverviewRow
from hda.gradeavg.model import PageLayout
from hda.gradeavg.module.grades.parser import parse_detail_credit_points
from hda.gradeavg.module.grades.parser import parse_overview_html
from hda.gradeavg.module.grades.parser import parse_statistics_html
from hda.gradeavg.obs.obs import Obs
from hda.gradeavg.obs.path import Path


class GradeService:
    """Service for scraping module grades from the OBS portal.

    Fetches the grade overview page, resolves the credit points of each
    qualifying module (from the overview or from the module detail page,
    depending on the layout) and computes each module's average grade from
    its statistics page. Requests are made sequentially on the shared session.
    """

    def __init__(self, obs: Obs, layout: PageLayout) -> None:
        self.obs = obs
        self.layout = layout

    def fetch_overview(self) -> list[OverviewRow]:
        """Fetches and parses the grade overview page.

        The page is decoded with the layout's encoding when one is set.
        """
        content = self.obs.get(Path.GRADES, encoding=self.layout.encoding)
        rows = parse_overview_html(content, self.layout)
        logger.info(f"Found {len(rows)} modules on the grade overview page.")
        return rows

    def fetch_credit_points(self, row: OverviewRow) -> Optional[float]:
        """Returns the row's credit points, fetching the module detail page if needed.

        Returns:
            float | None: The credit points, or None if they are missing or not positive.
        """
        if row.credit_points is not None:
            return row.credit_points
        if row.detail_url is None:
            return None

        content = self.obs.get(row.detail_url)
        credit_points = parse_detail_credit_points(content, self.layout)
        if credit_points is None or credit_points <= 0:
            logger.debug(f"No credit points on the detail page of '{row.name}'.")
            return None
        return credit_points

    def fetch_module_statistics(self, statistics_id: str) -> Optional[float]:
        """Fetches a module's grade statistics and computes its average grade.

        Returns:
            float | None: The average grade, or None if the module has too few graded members.
        """
        content = self.obs.get(Path.STATISTICS + statistics_id)
        return parse_statistics_html(content)
