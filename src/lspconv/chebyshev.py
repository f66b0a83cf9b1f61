#!/usr/bin/env python3
"""
Chebyshev series evaluation for the half-order LSP polynomials.
"""

from typing import Sequence


def cheb_poly_eval(coef: Sequence[float], x: float, order: int) -> float:
    """
    Evaluate a series of Chebyshev polynomials at x.

    Parameters
    ----------
    coef : sequence of float
        Series coefficients, at least order/2 + 1 of them. coef[0] weights
        the highest basis term T_{order/2} and coef[order/2] weights T_0.
    x : float
        Evaluation point. Nominally in [-1, 1] but not clamped.
    order : int
        LPC order; the series has degree order/2.

    Returns
    -------
    float
        sum_i coef[order/2 - i] * T_i(x), accumulated from i = 0 upwards
        in the type of coef and x.

    Notes
    -----
    T_0 = 1, T_1 = x and T_i = 2x T_{i-1} - T_{i-2}. The basis terms are
    produced by the recurrence as the sum is formed, so no work buffer is
    needed.
    """
    m = order // 2
    # 1 in the type of x (python float, numpy scalar or 0-d array)
    one = x - x + 1
    two_x = x + x

    total = coef[m] * one
    if m == 0:
        return total

    t_prev = one
    t_cur = x
    total = total + coef[m - 1] * t_cur
    for i in range(2, m + 1):
        t_prev, t_cur = t_cur, two_x * t_cur - t_prev
        total = total + coef[m - i] * t_cur
    return total
