#!/usr/bin/env python3
"""
Numeric parameters shared by the LPC/LSP converters.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Union

import numpy as np


# Largest LPC order handled (matches the codec's LPC_MAX)
MAX_ORDER = 20

DEFAULT_ORDER = 10
DEFAULT_SUBDIVISIONS = 4
DEFAULT_GRID_STEP = 0.02

PRECISIONS = {
    'float32': np.float32,
    'float64': np.float64,
}


def resolve_dtype(precision: Union[str, type, np.dtype]) -> type:
    """Return the numpy scalar type for a precision name or dtype."""
    if isinstance(precision, str):
        try:
            return PRECISIONS[precision]
        except KeyError:
            raise ValueError(f"Unsupported precision: {precision!r} "
                             f"(expected one of {sorted(PRECISIONS)})") from None
    scalar = np.dtype(precision).type
    if scalar not in PRECISIONS.values():
        raise ValueError(f"Unsupported precision: {np.dtype(precision).name}")
    return scalar


def check_order(order: int) -> int:
    """Validate a filter order and return half of it."""
    if isinstance(order, bool) or not isinstance(order, (int, np.integer)):
        raise ValueError(f"Order must be an integer, got {order!r}")
    if order < 0 or order % 2:
        raise ValueError(f"Order must be even and non-negative, got {order}")
    if order > MAX_ORDER:
        raise ValueError(f"Order {order} exceeds maximum supported order {MAX_ORDER}")
    return int(order) // 2


def check_grid_step(grid_step: float, dtype: type) -> None:
    """Reject scan spacings that cannot move x across the whole sweep in dtype."""
    if not grid_step > 0:
        raise ValueError(f"Grid step must be positive, got {grid_step}")
    # float spacing is coarsest just below x = -1
    lower = dtype(-1.0)
    if lower - dtype(grid_step) == lower:
        raise ValueError(f"Grid step {grid_step} is below the {np.dtype(dtype).name} "
                         f"resolution near x = -1")


@dataclass
class LspConfig:
    """Complete set of parameters for an LPC <-> LSP conversion."""
    order: int = DEFAULT_ORDER
    subdivisions: int = DEFAULT_SUBDIVISIONS  # bisection steps = subdivisions + 1
    grid_step: float = DEFAULT_GRID_STEP      # x-domain scan spacing
    precision: str = 'float32'                # 'float32' (codec reference) or 'float64'

    def validate(self) -> 'LspConfig':
        check_order(self.order)
        if self.subdivisions < 0:
            raise ValueError(f"Subdivisions must be >= 0, got {self.subdivisions}")
        check_grid_step(self.grid_step, resolve_dtype(self.precision))
        return self

    @property
    def dtype(self) -> type:
        return resolve_dtype(self.precision)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'LspConfig':
        return cls(**d).validate()
