"""Pytest configuration and shared fixtures for lspconv tests."""

import os
import sys

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))


def reference_lpc(lsp: np.ndarray) -> np.ndarray:
    """
    LPC coefficients for a set of LSPs by direct polynomial products.

    P'(z) and Q'(z) are products of 1 - 2cos(w)z^-1 + z^-2 over the even and
    odd LSPs; A(z) = [P'(z)(1 + z^-1) + Q'(z)(1 - z^-1)] / 2.
    """
    lsp = np.asarray(lsp, dtype=np.float64)
    P = np.array([1.0])
    Q = np.array([1.0])
    for w in lsp[0::2]:
        P = np.convolve(P, [1.0, -2 * np.cos(w), 1.0])
    for w in lsp[1::2]:
        Q = np.convolve(Q, [1.0, -2 * np.cos(w), 1.0])
    P = np.convolve(P, [1.0, 1.0])
    Q = np.convolve(Q, [1.0, -1.0])
    return 0.5 * (P + Q)[:len(lsp) + 1]


def random_stable_lpc(rng: np.random.Generator, order: int = 10) -> np.ndarray:
    """Order-`order` LPC vector with well separated resonances inside |z| < 0.9."""
    n = order // 2
    angles = np.linspace(0.3, 2.8, n) + rng.uniform(-0.1, 0.1, n)
    radii = rng.uniform(0.5, 0.9, n)
    poles = radii * np.exp(1j * angles)
    return np.real(np.poly(np.concatenate([poles, poles.conj()])))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Deterministic numpy RNG, seed from TEST_RNG_SEED (default: 0)."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture
def codec_lsp() -> np.ndarray:
    """Order-10 LSPs spread well beyond the codec grid step."""
    return np.linspace(0.25, 2.9, 10)
