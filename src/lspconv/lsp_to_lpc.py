#!/usr/bin/env python3
"""
LSP to LPC synthesis by clocking an impulse through

    A(z) = 0.5 [P(z)(1 + z^-1) + Q(z)(1 - z^-1)]

where P'(z) and Q'(z) are cascades of second-order sections
1 - 2 x_i z^-1 + z^-2, one per LSP, with x_i = cos(w_i). The first
order + 1 samples of the impulse response are the LPC coefficients.

The cosines are computed in double precision and rounded to the working
dtype; everything after that runs in the working dtype.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .config import LspConfig, check_order, resolve_dtype, DEFAULT_ORDER


@dataclass
class SecondOrderSection:
    """
    Delay taps of one section of the P/Q cascade.

    p1, p2 hold the last two inputs of the P branch, q1, q2 those of the
    Q branch.
    """
    p1: float = 0.0
    p2: float = 0.0
    q1: float = 0.0
    q2: float = 0.0

    @classmethod
    def zeros(cls, dtype: type = np.float64) -> 'SecondOrderSection':
        z = dtype(0.0)
        return cls(z, z, z, z)

    def clock(self, xin1: float, xin2: float, xp: float, xq: float) -> Tuple[float, float]:
        """
        Push one sample through both branches.

        Parameters
        ----------
        xin1, xin2 : float
            P and Q branch inputs
        xp, xq : float
            Cosines of the LSPs owned by this section (P and Q branch)

        Returns
        -------
        (xout1, xout2)
        """
        xout1 = (xin1 - (xp + xp) * self.p1) + self.p2
        xout2 = (xin2 - (xq + xq) * self.q1) + self.q2
        self.p2 = self.p1
        self.q2 = self.q1
        self.p1 = xin1
        self.q1 = xin2
        return xout1, xout2


def lsp_to_lpc(
    lsp: Sequence[float],
    order: int,
    precision: str = 'float32',
    out: Optional[np.ndarray] = None,
    log: Optional[logging.Logger] = None
) -> np.ndarray:
    """
    Convert LSP frequencies (radians) to LPC coefficients.

    Parameters
    ----------
    lsp : sequence of float
        order LSP frequencies in radians, increasing
    order : int
        Even LPC order
    precision : str
        'float32' (codec reference arithmetic) or 'float64'
    out : np.ndarray, optional
        Buffer of shape (order + 1,) to receive the coefficients
    log : Logger
        Optional logger

    Returns
    -------
    np.ndarray
        a[0..order] with a[0] == 1
    """
    if log is None:
        log = logging.getLogger(__name__)

    m = check_order(order)
    dtype = resolve_dtype(precision)
    lsp = np.asarray(lsp, dtype=dtype)
    if lsp.shape != (order,):
        raise ValueError(f"LSP vector must have shape ({order},), got {lsp.shape}")
    if out is not None and out.shape != (order + 1,):
        raise ValueError(f"Output buffer must have shape ({order + 1},), got {out.shape}")

    # double-precision cos rounded to dtype; numpy's float32 cos is not cosf
    x = np.cos(lsp.astype(np.float64)).astype(dtype)
    half = dtype(0.5)
    zero = dtype(0.0)

    sections: List[SecondOrderSection] = [SecondOrderSection.zeros(dtype) for _ in range(m)]
    # trailing taps for the (1 + z^-1) and (1 - z^-1) factors
    tail1 = zero
    tail2 = zero

    ak = np.empty(order + 1, dtype=dtype)
    xin1 = dtype(1.0)
    xin2 = dtype(1.0)
    for j in range(order + 1):
        for i, section in enumerate(sections):
            xin1, xin2 = section.clock(xin1, xin2, x[2 * i], x[2 * i + 1])
        xout1 = xin1 + tail1
        xout2 = xin2 - tail2
        ak[j] = (xout1 + xout2) * half
        tail1 = xin1
        tail2 = xin2
        xin1 = zero
        xin2 = zero

    log.debug("Synthesized order-%d LPC: %s", order, ak)

    if out is not None:
        out[:] = ak
        return out
    return ak


class LspToLpcSynthesizer:
    """
    Synthesizer bound to one order and precision.
    """

    def __init__(self, order: int = DEFAULT_ORDER, precision: str = 'float32'):
        self.config = LspConfig(order=order, precision=precision).validate()
        self.log = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: LspConfig) -> 'LspToLpcSynthesizer':
        return cls(config.order, config.precision)

    @property
    def order(self) -> int:
        return self.config.order

    def synthesize(self, lsp: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        return lsp_to_lpc(lsp, self.config.order, precision=self.config.precision,
                          out=out, log=self.log)
