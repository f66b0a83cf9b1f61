#!/usr/bin/env python3
"""
LPC to LSP Conversion - Chebyshev Grid Search
=============================================

A(z) of order p is split into a symmetric and an antisymmetric part

    P(z) = A(z) + z^-(p+1) A(z^-1)
    Q(z) = A(z) - z^-(p+1) A(z^-1)

so that A(z) = [P(z) + Q(z)] / 2. Both have all of their zeros on the unit
circle, and those zeros interlace. Removing the trivial zeros at z = -1 and
z = +1 leaves P'(z) and Q'(z) of order p/2, which are evaluated on the real
axis x = cos(w) as Chebyshev series.

The search sweeps x from +1 down to -1 on a fixed grid, alternating between
P' and Q' after every root, and refines each sign change by bisection. The
roots come out decreasing in x, i.e. increasing in frequency.

The search itself runs in the working precision. The final arccos is taken
in double precision and rounded back, which gives the correctly rounded
single-precision result in practice; numpy's own float32 arccos can differ
from libm acosf by an ulp.
"""

import logging
from enum import Enum
from typing import Optional, Tuple, Sequence

import numpy as np

from .chebyshev import cheb_poly_eval
from .config import (LspConfig, check_order, check_grid_step, resolve_dtype,
                     DEFAULT_ORDER, DEFAULT_SUBDIVISIONS, DEFAULT_GRID_STEP)


class SlotState(Enum):
    SCANNING = 'scanning'
    BISECTING = 'bisecting'
    RECORDED = 'recorded'


def derive_pq(a: np.ndarray, order: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the Chebyshev coefficients of P'(z) = P(z)/(1 + z^-1) and
    Q'(z) = Q(z)/(1 - z^-1).

    Parameters
    ----------
    a : np.ndarray
        LPC coefficients a[0..order]; a[0] is not read.
    order : int
        Even LPC order

    Returns
    -------
    P, Q : np.ndarray
        Length order/2 + 1 each, in the dtype of a, laid out for
        cheb_poly_eval (P[0] weights the highest basis term).
    """
    m = order // 2
    P = np.empty(m + 1, dtype=a.dtype)
    Q = np.empty(m + 1, dtype=a.dtype)
    P[0] = 1
    Q[0] = 1
    for i in range(1, m + 1):
        P[i] = (a[i] + a[order + 1 - i]) - P[i - 1]
        Q[i] = (a[i] - a[order + 1 - i]) + Q[i - 1]

    # cos(k w) terms carry a factor 2, the constant term does not
    P[:m] *= 2
    Q[:m] *= 2
    return P, Q


def _as_vector(values: Sequence[float], length: int, name: str, dtype: type) -> np.ndarray:
    vec = np.asarray(values, dtype=dtype)
    if vec.shape != (length,):
        raise ValueError(f"{name} must have shape ({length},), got {vec.shape}")
    return vec


def lpc_to_lsp(
    a: Sequence[float],
    order: int,
    subdivisions: int = DEFAULT_SUBDIVISIONS,
    grid_step: float = DEFAULT_GRID_STEP,
    precision: str = 'float32',
    out: Optional[np.ndarray] = None,
    log: Optional[logging.Logger] = None
) -> Tuple[np.ndarray, int]:
    """
    Convert LPC coefficients to LSP frequencies.

    Parameters
    ----------
    a : sequence of float
        LPC coefficients a[0..order], A(z) = sum_k a[k] z^-k
    order : int
        Even LPC order (10 in the codec)
    subdivisions : int
        Bisection refinements per root minus one (4 in the codec)
    grid_step : float
        Scan spacing in the x = cos(w) domain (0.02 in the codec)
    precision : str
        'float32' (codec reference arithmetic) or 'float64'
    out : np.ndarray, optional
        Buffer of shape (order,) to receive the frequencies
    log : Logger
        Optional logger

    Returns
    -------
    freq : np.ndarray
        LSP frequencies in radians, increasing. Slots for which no root was
        found hold NaN.
    roots : int
        Number of roots found. Less than order means the grid was too coarse
        for this filter (or the filter is degenerate); the caller decides
        what to do with the frame.
    """
    if log is None:
        log = logging.getLogger(__name__)

    check_order(order)
    if subdivisions < 0:
        raise ValueError(f"Subdivisions must be >= 0, got {subdivisions}")

    dtype = resolve_dtype(precision)
    check_grid_step(grid_step, dtype)
    a = _as_vector(a, order + 1, "LPC vector", dtype)
    if out is not None and out.shape != (order,):
        raise ValueError(f"Output buffer must have shape ({order},), got {out.shape}")

    P, Q = derive_pq(a, order)

    delta = dtype(grid_step)
    half = dtype(0.5)
    lower = dtype(-1.0)

    freq = np.full(order, np.nan, dtype=dtype)
    roots = 0
    xl = dtype(1.0)
    xr = dtype(0.0)  # carried over between slots

    for j in range(order):
        # P' and Q' roots interlace
        coef = Q if j % 2 else P
        psuml = cheb_poly_eval(coef, xl, order)
        state = SlotState.SCANNING

        while state is SlotState.SCANNING and xr >= lower:
            xr = xl - delta
            psumr = cheb_poly_eval(coef, xr, order)

            if psumr * psuml < 0 or psumr == 0:
                state = SlotState.BISECTING
                roots += 1
                xm = xl
                for _ in range(subdivisions + 1):
                    xm = (xl + xr) * half
                    psumm = cheb_poly_eval(coef, xm, order)
                    if psumm * psuml > 0:
                        psuml = psumm
                        xl = xm
                    else:
                        psumr = psumm
                        xr = xm
                freq[j] = xm
                xl = xm
                state = SlotState.RECORDED
            else:
                psuml = psumr
                xl = xr

        if state is SlotState.RECORDED:
            log.debug("Slot %d (%s'): root at x = %.7f", j, 'Q' if j % 2 else 'P', freq[j])
        else:
            log.debug("Slot %d (%s'): no sign change above x = -1", j, 'Q' if j % 2 else 'P')

    # x domain to radians, once. A bracket straddling -1 can leave a root
    # just below it; arccos turns that into NaN like the unfound slots.
    with np.errstate(invalid='ignore'):
        freq = np.arccos(freq.astype(np.float64)).astype(dtype)

    if roots < order:
        log.warning("LSP search found %d of %d roots (grid step %.4g too coarse "
                    "or degenerate filter)", roots, order, grid_step)

    if out is not None:
        out[:] = freq
        return out, roots
    return freq, roots


class LpcToLspConverter:
    """
    Converter bound to one set of search parameters.
    """

    def __init__(
        self,
        order: int = DEFAULT_ORDER,
        subdivisions: int = DEFAULT_SUBDIVISIONS,
        grid_step: float = DEFAULT_GRID_STEP,
        precision: str = 'float32'
    ):
        self.config = LspConfig(order, subdivisions, grid_step, precision).validate()
        self.log = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: LspConfig) -> 'LpcToLspConverter':
        return cls(config.order, config.subdivisions, config.grid_step, config.precision)

    @property
    def order(self) -> int:
        return self.config.order

    def convert(self, a: Sequence[float], out: Optional[np.ndarray] = None) -> Tuple[np.ndarray, int]:
        """Convert one LPC vector; returns (freq, roots)."""
        return lpc_to_lsp(
            a, self.config.order,
            subdivisions=self.config.subdivisions,
            grid_step=self.config.grid_step,
            precision=self.config.precision,
            out=out,
            log=self.log
        )
