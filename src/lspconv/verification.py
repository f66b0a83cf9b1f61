#!/usr/bin/env python3
"""
Verification tools for LPC/LSP conversions.
"""

import logging
import numpy as np
from scipy import signal
import matplotlib.pyplot as plt
from typing import Dict, Any, Optional, Sequence

from .config import LspConfig
from .lpc_to_lsp import lpc_to_lsp
from .lsp_to_lpc import lsp_to_lpc


def is_stable(a: Sequence[float]) -> bool:
    """True if every zero of A(z) lies strictly inside the unit circle."""
    a = np.asarray(a, dtype=np.float64)
    if len(a) < 2:
        return True
    zeros = np.roots(a)
    return bool(np.all(np.abs(zeros) < 1.0))


def lsp_ordered(lsp: Sequence[float]) -> bool:
    """True if the LSPs are finite, strictly increasing and inside (0, pi)."""
    lsp = np.asarray(lsp, dtype=np.float64)
    if not np.all(np.isfinite(lsp)):
        return False
    if len(lsp) and (lsp[0] <= 0 or lsp[-1] >= np.pi):
        return False
    return bool(np.all(np.diff(lsp) > 0))


def compare_lpc_envelopes(
    a_ref: Sequence[float],
    a_test: Sequence[float],
    n_points: int = 512,
    plot: bool = False
) -> Dict[str, Any]:
    """
    Compare the all-pole spectral envelopes 1/|A(e^jw)| of two filters.

    Parameters
    ----------
    a_ref : sequence of float
        Reference LPC coefficients
    a_test : sequence of float
        LPC coefficients under test
    n_points : int
        Number of frequency points on [0, pi)
    plot : bool
        Whether to plot both envelopes

    Returns
    -------
    dict
        'spectral_distortion_db' (RMS log-spectral distance) and
        'max_deviation_db'
    """
    w, h_ref = signal.freqz(1.0, np.asarray(a_ref, dtype=np.float64), worN=n_points)
    _, h_test = signal.freqz(1.0, np.asarray(a_test, dtype=np.float64), worN=n_points)
    ref_db = 20 * np.log10(np.abs(h_ref) + 1e-300)
    test_db = 20 * np.log10(np.abs(h_test) + 1e-300)
    diff_db = test_db - ref_db

    results = {
        'spectral_distortion_db': float(np.sqrt(np.mean(diff_db ** 2))),
        'max_deviation_db': float(np.max(np.abs(diff_db))),
    }

    if plot:
        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(w, ref_db, label='Reference', linewidth=2)
        ax.plot(w, test_db, label='Round trip', linewidth=1, alpha=0.7)
        ax.set_xlabel('Frequency (radians)')
        ax.set_ylabel('Magnitude (dB)')
        ax.set_title(f"LPC Envelope (SD {results['spectral_distortion_db']:.3f} dB)")
        ax.grid(True, alpha=0.3)
        ax.legend()
        plt.show()

    return results


def verify_lsp_conversion(
    a: Sequence[float],
    config: Optional[LspConfig] = None,
    tolerance: float = 1e-3,
    plot: bool = False,
    log: Optional[logging.Logger] = None
) -> Dict[str, Any]:
    """
    Run LPC -> LSP -> LPC on one filter and check the result.

    Parameters
    ----------
    a : sequence of float
        LPC coefficients a[0..order]
    config : LspConfig
        Conversion parameters (defaults to LspConfig(order=len(a) - 1))
    tolerance : float
        Largest accepted coefficient error, relative to max(1, |a|)
    plot : bool
        Whether to plot the envelopes and LSP positions
    log : Logger
        Optional logger

    Returns
    -------
    dict
        Verification results
    """
    if log is None:
        log = logging.getLogger(__name__)
    if config is None:
        config = LspConfig(order=len(a) - 1)
    config.validate()

    a = np.asarray(a, dtype=np.float64)
    freq, roots = lpc_to_lsp(a, config.order, config.subdivisions, config.grid_step,
                             config.precision, log=log)
    complete = roots == config.order

    results = {
        'roots': roots,
        'complete': complete,
        'ordered': lsp_ordered(freq) if complete else False,
        'stable': is_stable(a),
        'lsp': freq,
    }

    if complete:
        a_rt = lsp_to_lpc(freq, config.order, config.precision, log=log).astype(np.float64)
        scale = np.maximum(1.0, np.abs(a))
        results['roundtrip_max_error'] = float(np.max(np.abs(a_rt - a) / scale))
        results.update(compare_lpc_envelopes(a, a_rt, plot=False))
    else:
        a_rt = None
        results['roundtrip_max_error'] = np.inf
        results['spectral_distortion_db'] = np.inf
        results['max_deviation_db'] = np.inf

    results['meets_tolerance'] = results['roundtrip_max_error'] <= tolerance
    results['passed'] = (results['complete'] and results['ordered']
                         and results['meets_tolerance'])

    log.info("Roots: %d/%d, ordered: %s, stable: %s, round-trip error: %.2e, SD: %.4f dB",
             roots, config.order, results['ordered'], results['stable'],
             results['roundtrip_max_error'], results['spectral_distortion_db'])

    if plot:
        w, h = signal.freqz(1.0, a, worN=512)
        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(w, 20 * np.log10(np.abs(h) + 1e-300), label='1/|A|', linewidth=2)
        if a_rt is not None:
            _, h_rt = signal.freqz(1.0, a_rt, worN=512)
            ax.plot(w, 20 * np.log10(np.abs(h_rt) + 1e-300), label='Round trip', alpha=0.7)
        # P' roots red, Q' roots green
        for k, f in enumerate(freq):
            if np.isfinite(f):
                ax.axvline(f, color='r' if k % 2 == 0 else 'g', linestyle='--', alpha=0.5)
        ax.set_xlabel('Frequency (radians)')
        ax.set_ylabel('Magnitude (dB)')
        ax.set_title(f'LSP positions ({roots}/{config.order} roots)')
        ax.grid(True, alpha=0.3)
        ax.legend()
        plt.show()

    return results
