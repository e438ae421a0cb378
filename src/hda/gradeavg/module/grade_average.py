from typing import Optional

from loguru import logger

from hda.gradeavg.config import Config
from hda.gradeavg.error import LoginError
from hda.gradeavg.error import NoDataError
from hda.gradeavg.model import ModuleGrade
from hda.gradeavg.model import PageLayout
from hda.gradeavg.model import load_layout
from hda.gradeavg.module.grades.aggregate import compute_weighted_average
from hda.gradeavg.module.grades.aggregate import format_summary
from hda.gradeavg.module.grades.aggregate import total_credit_points
from hda.gradeavg.obs.obs import Obs
from hda.gradeavg.service.grade_service import GradeService


class GradeAverage:
    """Computes the credit-point-weighted grade average of an OBS account.

    Logs in, walks the grade overview, fetches each module's statistics and
    prints one progress line per module followed by the overall average.
    Errors are not handled here; they end the run in the caller.
    """

    def __init__(
        self,
        conf: Config | None = None,
        layout: PageLayout | None = None,
        obs: Obs | None = None,
    ):
        self.conf = conf if conf is not None else Config()
        self.layout = layout if layout is not None else load_layout(self.conf.layout)
        self.obs = obs if obs is not None else Obs(self.conf)
        self.grade_service = GradeService(self.obs, self.layout)

    def start(self, username: str, password: str) -> Optional[float]:
        """Runs the whole pipeline.

        Returns:
            float | None: The weighted average, or None if no module has a grade average.

        Raises:
            LoginError: If the portal rejects the login.
            TransportError: If any request fails.
        """
        try:
            self._auth(username, password)
            return self._run()
        finally:
            self.obs.close()

    def _auth(self, username: str, password: str):
        print("Logging in... ", end="", flush=True)
        if not self.obs.login(username, password):
            print("failed")
            raise LoginError("Login failed. Check your username and password.")
        print("success")

    def _run(self) -> Optional[float]:
        print("Gathering average grades per module")
        logger.info(f"Using page layout '{self.layout.name}'.")

        grades: list[ModuleGrade] = []
        for row in self.grade_service.fetch_overview():
            credit_points = self.grade_service.fetch_credit_points(row)
            if credit_points is None:
                continue

            print(f"Module '{row.name}' ({credit_points:.1f} cp)...", end="", flush=True)
            average = self.grade_service.fetch_module_statistics(row.statistics_id)
            if average is None:
                print(" not enough module members.")
                continue
            print(f" {average:.2f}")

            grades.append(ModuleGrade(name=row.name, average=average, credit_points=credit_points))

        try:
            total_average = compute_weighted_average(grades)
        except NoDataError as e:
            logger.warning(e)
            print("No graded modules found.")
            return None

        print(format_summary(total_average, total_credit_points(grades)))
        logger.success(f"Computed average over {len(grades)} modules.")
        return total_average
