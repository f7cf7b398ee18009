"""Summary statistics of a decoded data unit.

Pure numpy, no format logic: works on :class:`~basic_fits.data.Data` or on
any array-like.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from basic_fits.data import Data


@dataclass(frozen=True)
class DataStats:
    count: int
    sum: float
    mean: float
    std: float
    min: float
    max: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def describe(data: Data | Any) -> DataStats:
    """Sum, mean, population std, min and max over finite values.

    NaN and infinities (blank pixels in float images) are ignored.

    Raises
    ------
    ValueError
        If there is no finite value at all.
    """

    values = data.values if isinstance(data, Data) else data
    a = np.asarray(values, dtype=np.float64).ravel()
    a = a[np.isfinite(a)]
    if a.size == 0:
        raise ValueError("no finite values to describe")

    mean = float(np.mean(a))
    return DataStats(
        count=int(a.size),
        sum=float(np.sum(a)),
        mean=mean,
        std=float(np.sqrt(np.mean((a - mean) ** 2))),
        min=float(np.min(a)),
        max=float(np.max(a)),
    )
