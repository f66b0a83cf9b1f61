#!/usr/bin/env python3
"""
Example: LSP round trip with the codec grid, and what a too-coarse grid does.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from lspconv import lsp_to_lpc, LspConfig, verify_lsp_conversion
import numpy as np
import logging


def main():
    # Setup logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    print("LSP round trip with codec parameters (order 10, 4 subdivisions, grid 0.02)")
    print()

    # Formant-like LSPs: pairs close together around each resonance
    lsp = np.array([0.20, 0.28, 0.62, 0.71, 1.15, 1.30, 1.80, 1.98, 2.50, 2.70])
    a = lsp_to_lpc(lsp, 10, precision='float64')

    results = verify_lsp_conversion(a, LspConfig(), plot='--plot' in sys.argv)

    print("\nVerification Results:")
    print("-" * 50)
    print(f"Roots found: {results['roots']}/10")
    print(f"Ordered: {results['ordered']}")
    print(f"Round-trip error: {results['roundtrip_max_error']:.2e}")
    print(f"Spectral distortion: {results['spectral_distortion_db']:.4f} dB")

    print("\nGrid step vs. roots found:")
    print("-" * 50)
    print("Grid step | Roots | SD (dB)")
    print("----------|-------|--------")
    for grid_step in [0.002, 0.01, 0.02, 0.05, 0.1]:
        config = LspConfig(grid_step=grid_step, subdivisions=10, precision='float64')
        r = verify_lsp_conversion(a, config)
        print(f"{grid_step:<9} | {r['roots']:>5} | {r['spectral_distortion_db']:.4f}")


if __name__ == '__main__':
    main()
