#!/usr/bin/env python3
"""
LPC <-> LSP Coefficient Converter
=================================

Converts files of coefficient frames (one frame per row, .npy or plain
text) between LPC and LSP form.

CLI examples
------------
# LPC frames (order 10, 11 values per row) to LSPs with the codec grid:
python3 -m lspconv.cli lpc2lsp frames_lpc.npy

# Finer grid, double precision, verify every frame:
python3 -m lspconv.cli lpc2lsp frames_lpc.txt \
    --grid-step 0.005 --subdivisions 10 --precision float64 --verify

# LSP frames back to LPC:
python3 -m lspconv.cli lsp2lpc frames_lsp.npy --basename decoded --format both
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional, Sequence, Tuple

import numpy as np

from .config import (LspConfig, PRECISIONS, DEFAULT_SUBDIVISIONS,
                     DEFAULT_GRID_STEP)
from .lpc_to_lsp import lpc_to_lsp
from .lsp_to_lpc import lsp_to_lpc
from .verification import verify_lsp_conversion, lsp_ordered


def load_frames(path: Path) -> np.ndarray:
    """Load coefficient frames as a 2-D float64 array (frames, values)."""
    if path.suffix == '.npy':
        frames = np.load(path)
    else:
        frames = np.loadtxt(path, ndmin=2)
    frames = np.asarray(frames, dtype=np.float64)
    if frames.ndim == 1:
        frames = frames[np.newaxis, :]
    if frames.ndim != 2:
        raise ValueError(f"Expected 1-D or 2-D coefficient array, got shape {frames.shape}")
    return frames


def infer_order(mode: str, width: int) -> int:
    """LPC rows carry order + 1 values, LSP rows carry order values."""
    return width - 1 if mode == 'lpc2lsp' else width


def convert_frames(
    frames: np.ndarray,
    mode: str,
    config: LspConfig,
    log: logging.Logger
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert every frame.

    Returns
    -------
    result : np.ndarray
        Converted frames
    roots : np.ndarray
        Roots found per frame (lpc2lsp) or order for every frame (lsp2lpc)
    """
    n_frames = frames.shape[0]
    dtype = config.dtype
    roots = np.full(n_frames, config.order, dtype=np.int64)

    if mode == 'lpc2lsp':
        result = np.empty((n_frames, config.order), dtype=dtype)
        for n in range(n_frames):
            _, roots[n] = lpc_to_lsp(frames[n], config.order, config.subdivisions,
                                     config.grid_step, config.precision,
                                     out=result[n], log=log)
        incomplete = np.flatnonzero(roots < config.order)
        if len(incomplete):
            log.warning("%d of %d frames have incomplete LSP sets (first: frame %d)",
                        len(incomplete), n_frames, incomplete[0])
    else:
        result = np.empty((n_frames, config.order + 1), dtype=dtype)
        for n in range(n_frames):
            if not lsp_ordered(frames[n]):
                log.warning("Frame %d: LSPs not strictly increasing in (0, pi)", n)
            lsp_to_lpc(frames[n], config.order, config.precision, out=result[n], log=log)

    log.info("Converted %d frames (%s, order %d)", n_frames, mode, config.order)
    return result, roots


def verify_frames(
    lpc_frames: np.ndarray,
    config: LspConfig,
    log: logging.Logger
) -> bool:
    """Run the round-trip verification on every LPC frame."""
    log.info("Running verification on %d frames...", len(lpc_frames))
    failed = 0
    for n, a in enumerate(lpc_frames):
        results = verify_lsp_conversion(a, config, log=log)
        if not results['passed']:
            failed += 1
            log.error("Frame %d FAILED (roots %d/%d, error %.2e)", n,
                      results['roots'], config.order, results['roundtrip_max_error'])
    if failed:
        log.error("%d of %d frames failed verification", failed, len(lpc_frames))
    else:
        log.info("All %d frames passed verification", len(lpc_frames))
    return failed == 0


def save_frames(
    result: np.ndarray,
    metadata: Dict[str, Any],
    basename: str,
    save_format: str,
    log: logging.Logger
) -> None:
    """Save converted frames with metadata."""

    if save_format in ['npy', 'both']:
        npy_path = f"{basename}.npy"
        np.save(npy_path, result)
        log.info("Saved frames to %s", npy_path)

    if save_format in ['npz', 'both']:
        npz_path = f"{basename}.npz"

        save_metadata = metadata.copy()
        save_metadata['command_line'] = ' '.join(sys.argv)
        save_metadata['numpy_version'] = np.__version__

        np.savez(npz_path,
                 frames=result,
                 roots=save_metadata.pop('roots'),
                 metadata=save_metadata)

        log.info("Saved frames and metadata to %s", npz_path)


def setup_logging(debug: bool, log_file: Optional[str]) -> logging.Logger:
    log_handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
        log_handlers.append(logging.FileHandler(log_file, mode='w'))
    else:
        log_format = "%(levelname)s: %(message)s"

    logging.basicConfig(
        handlers=log_handlers,
        level=logging.DEBUG if debug else logging.INFO,
        format=log_format,
        force=True
    )
    return logging.getLogger('lspconv')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lspconv',
        description="Convert LPC coefficient frames to LSP frequencies and back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split('CLI examples', 1)[1]
    )

    parser.add_argument('mode', choices=['lpc2lsp', 'lsp2lpc'],
                        help='Conversion direction')
    parser.add_argument('input', type=Path,
                        help='Input frames (.npy, or text with one frame per row)')
    parser.add_argument('--order', '-p', type=int,
                        help='LPC order (default: inferred from the row length)')

    g = parser.add_argument_group("Search")
    g.add_argument('--subdivisions', '-n', type=int, default=DEFAULT_SUBDIVISIONS,
                   help=f'Bisection refinements minus one (default: {DEFAULT_SUBDIVISIONS})')
    g.add_argument('--grid-step', '-g', type=float, default=DEFAULT_GRID_STEP,
                   help=f'Scan spacing in the cos(w) domain (default: {DEFAULT_GRID_STEP})')
    g.add_argument('--precision', choices=sorted(PRECISIONS), default='float32',
                   help='Arithmetic precision (default: float32, the codec reference)')

    g = parser.add_argument_group("Output")
    g.add_argument('--format', '-f', choices=['npy', 'npz', 'both'], default='npz')
    g.add_argument('--basename', type=str,
                   help='Output file stem (default: <input stem>_<lsp|lpc>)')
    g.add_argument('--verify', '-v', action='store_true',
                   help='Round-trip every LPC frame and fail if any check fails')

    g = parser.add_argument_group("Misc")
    g.add_argument('--debug', '-d', action='store_true',
                   help='Enable DEBUG-level logging (per-root detail)')
    g.add_argument('--log-file', type=str,
                   help='Write log output to this file as well as the console')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logging(args.debug, args.log_file)

    try:
        frames = load_frames(args.input)
    except (OSError, ValueError) as e:
        log.error("Cannot read %s: %s", args.input, e)
        return 2

    order = args.order if args.order is not None else infer_order(args.mode, frames.shape[1])
    config = LspConfig(order, args.subdivisions, args.grid_step, args.precision)
    try:
        config.validate()
        result, roots = convert_frames(frames, args.mode, config, log)
    except ValueError as e:
        log.error("Invalid input: %s", e)
        return 2

    ok = True
    if args.verify:
        lpc_frames = frames if args.mode == 'lpc2lsp' else result.astype(np.float64)
        ok = verify_frames(lpc_frames, config, log)

    if args.basename:
        basename = args.basename
    else:
        suffix = 'lsp' if args.mode == 'lpc2lsp' else 'lpc'
        basename = str(args.input.with_suffix('')) + f'_{suffix}'

    metadata = {
        'mode': args.mode,
        'config': config.to_dict(),
        'frames': int(frames.shape[0]),
        'roots': roots,
        'verified': bool(args.verify and ok),
    }
    save_frames(result, metadata, basename, args.format, log)

    print(f"\nConverted {frames.shape[0]} frames: {basename}")
    print(f"  Mode: {args.mode}")
    print(f"  Order: {config.order}")
    if args.mode == 'lpc2lsp':
        print(f"  Complete frames: {int(np.sum(roots == config.order))}/{frames.shape[0]}")
        print(f"  Grid step: {config.grid_step}, subdivisions: {config.subdivisions}")

    return 0 if ok else 1


if __name__ == '__main__':
    try:
        sys.exit(main())
    except Exception as e:
        logging.error("Fatal: %s", e)
        logging.debug("Traceback:", exc_info=True)
        sys.exit(1)
