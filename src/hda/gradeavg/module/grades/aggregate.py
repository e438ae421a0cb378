from typing import Iterable

from hda.gradeavg.error import NoDataError
from hda.gradeavg.model import ModuleGrade


def total_credit_points(records: Iterable[ModuleGrade]) -> float:
    return sum(record.credit_points for record in records)


def compute_weighted_average(records: Iterable[ModuleGrade]) -> float:
    """
    Computes the credit-point-weighted average of the module averages.

    Raises:
        NoDataError: If there are no credit points to weight by.
    """
    records = list(records)
    credit_points = total_credit_points(records)
    if credit_points <= 0:
        raise NoDataError("No graded modules with credit points to average.")

    weighted = sum(record.credit_points * record.average for record in records)
    return weighted / credit_points


def format_summary(average: float, credit_points: float) -> str:
    return f"The total average is {average:.2f} at currently {credit_points:.1f} cp."
