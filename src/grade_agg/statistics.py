# ABOUTME: Derives pass-rate statistics from a set of composite averages.
# ABOUTME: Counts subjects, those strictly above the threshold, and the passing percentage.

from __future__ import annotations

import math
from typing import Iterable, Union

from src.common.schemas import LearnerAverage, PopulationStatistic

DEFAULT_THRESHOLD = 70.0


def compute_statistics(
    averages: Iterable[Union[float, LearnerAverage]],
    threshold: float = DEFAULT_THRESHOLD,
    exclude_undefined: bool = False,
) -> PopulationStatistic:
    """
    Reduce composite averages into ``total``, ``above_threshold`` and ``percentage``.

    NaN composites count toward ``total`` but never pass the threshold. Set
    ``exclude_undefined`` to drop them from ``total`` as well. An empty input yields
    zeros throughout.
    """

    total = 0
    above = 0
    for item in averages:
        value = item.avg if isinstance(item, LearnerAverage) else item
        undefined = value is None or math.isnan(value)
        if undefined and exclude_undefined:
            continue
        total += 1
        if not undefined and value > threshold:
            above += 1

    percentage = (above / total) * 100 if total else 0.0
    return PopulationStatistic(total=total, above_threshold=above, percentage=percentage, threshold=threshold)
