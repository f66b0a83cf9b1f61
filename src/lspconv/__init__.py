"""
lspconv - LPC <-> Line Spectrum Pair conversion for speech coding.
"""

from .config import LspConfig, MAX_ORDER
from .chebyshev import cheb_poly_eval
from .lpc_to_lsp import lpc_to_lsp, derive_pq, LpcToLspConverter
from .lsp_to_lpc import lsp_to_lpc, SecondOrderSection, LspToLpcSynthesizer
from .verification import verify_lsp_conversion, compare_lpc_envelopes, is_stable, lsp_ordered

__version__ = "0.1.0"
__all__ = [
    "LspConfig",
    "MAX_ORDER",
    "cheb_poly_eval",
    "lpc_to_lsp",
    "derive_pq",
    "LpcToLspConverter",
    "lsp_to_lpc",
    "SecondOrderSection",
    "LspToLpcSynthesizer",
    "verify_lsp_conversion",
    "compare_lpc_envelopes",
    "is_stable",
    "lsp_ordered",
]
