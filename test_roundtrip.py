#!/usr/bin/env python3
"""
Round-trip and verification tests: LPC -> LSP -> LPC.
"""

import numpy as np
import pytest

from conftest import reference_lpc, random_stable_lpc
from lspconv import (lpc_to_lsp, lsp_to_lpc, LspConfig, verify_lsp_conversion,
                     compare_lpc_envelopes, is_stable, lsp_ordered)


FINE = LspConfig(order=10, subdivisions=30, grid_step=0.002, precision='float64')


def test_random_stable_filters_round_trip(rng):
    for _ in range(20):
        a = random_stable_lpc(rng)
        assert is_stable(a)
        freq, roots = lpc_to_lsp(a, 10, FINE.subdivisions, FINE.grid_step, FINE.precision)
        assert roots == 10
        assert np.all(np.diff(freq) > 0)
        a_rt = lsp_to_lpc(freq, 10, FINE.precision)
        np.testing.assert_allclose(a_rt, a, rtol=1e-3, atol=1e-6)


def test_codec_parameters_preserve_envelope(codec_lsp):
    """Codec grid and single precision keep the envelope within a fraction of a dB."""
    a = reference_lpc(codec_lsp)
    freq, roots = lpc_to_lsp(a, 10)
    assert roots == 10
    result = compare_lpc_envelopes(a, lsp_to_lpc(freq, 10))
    assert result['spectral_distortion_db'] < 0.5


def test_envelope_identical_filters():
    a = np.array([1.0, -0.9, 0.4])
    result = compare_lpc_envelopes(a, a)
    assert result['spectral_distortion_db'] == 0.0
    assert result['max_deviation_db'] == 0.0


def test_is_stable():
    assert is_stable([1.0, -0.5])
    assert not is_stable([1.0, -1.5])
    assert is_stable([1.0])


def test_lsp_ordered(codec_lsp):
    assert lsp_ordered(codec_lsp)
    assert not lsp_ordered(codec_lsp[::-1])
    assert not lsp_ordered(np.r_[0.0, codec_lsp[1:]])
    assert not lsp_ordered(np.r_[codec_lsp[:-1], np.nan])
    assert not lsp_ordered(np.r_[codec_lsp[:-1], np.pi])


def test_verify_passes_on_stable_filter(rng):
    results = verify_lsp_conversion(random_stable_lpc(rng), FINE)
    assert results['passed']
    assert results['complete'] and results['ordered'] and results['stable']
    assert results['roundtrip_max_error'] < 1e-6
    assert results['spectral_distortion_db'] < 1e-3


def test_verify_flags_incomplete_search():
    lsp = np.concatenate([np.arccos([0.996, 0.995, 0.994]), np.linspace(0.5, 2.9, 7)])
    results = verify_lsp_conversion(reference_lpc(lsp), LspConfig(order=10))
    assert not results['passed']
    assert not results['complete']
    assert results['roots'] == 6
    assert results['roundtrip_max_error'] == np.inf


def test_verify_default_config_uses_vector_length(codec_lsp):
    results = verify_lsp_conversion(reference_lpc(codec_lsp[:8]), tolerance=0.05)
    assert results['roots'] == 8
    assert len(results['lsp']) == 8


def test_config_round_trip():
    config = LspConfig(order=12, subdivisions=8, grid_step=0.01, precision='float64')
    assert LspConfig.from_dict(config.to_dict()) == config
    assert config.dtype is np.float64


@pytest.mark.parametrize("kwargs", [
    {'order': 11},
    {'order': 40},
    {'subdivisions': -1},
    {'grid_step': -0.02},
    {'grid_step': float('nan')},
    {'grid_step': 1e-9},
    {'grid_step': 1e-20, 'precision': 'float64'},
    {'precision': 'int8'},
])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        LspConfig(**kwargs).validate()
