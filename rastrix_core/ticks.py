from __future__ import annotations

from decimal import Decimal, InvalidOperation
import math

import numpy as np


NICE_FRACTIONS = (1.0, 2.0, 5.0, 10.0)
DEFAULT_NUM_TICKS = 10
DEGENERATE_HALF_SPAN = 0.5
DEGENERATE_RELATIVE_SPAN = 1e-9


def nice_step(raw_step: float) -> float:
    """Round `raw_step` up to the nearest 1, 2 or 5 times a power of ten.

    Returns nan for non-finite or non-positive input.
    """
    if not math.isfinite(raw_step) or raw_step <= 0:
        return math.nan
    magnitude = 10.0 ** math.floor(math.log10(raw_step))
    for frac in NICE_FRACTIONS:
        # Tolerance absorbs log10 drift on exact powers of ten.
        if frac * magnitude >= raw_step * (1.0 - 1e-12):
            return frac * magnitude
    return 10.0 * magnitude


def widen_degenerate(center: float) -> tuple[float, float]:
    """Non-empty interval around `center` for a zero-width range.

    Half-width is 0.5, grown with the magnitude of `center` so that the
    bounds stay distinct where 0.5 is below float resolution.
    """
    half = max(DEGENERATE_HALF_SPAN, abs(center) * DEGENERATE_RELATIVE_SPAN)
    return center - half, center + half


def compute_ticks(vmin: float, vmax: float, num_ticks: int = DEFAULT_NUM_TICKS) -> np.ndarray:
    """Nice ticks inside [vmin, vmax].

    Falls back to the covering sequence when fewer than two ticks land
    inside the range, so the result always has at least two entries for a
    finite, non-empty range.
    """
    prepared = _prepare(vmin, vmax, num_ticks)
    if prepared is None:
        return np.empty(0, dtype=np.float64)
    lo, hi, step = prepared
    if math.isnan(step):
        return np.asarray([lo, hi], dtype=np.float64)
    start = math.ceil(lo / step - 1e-9)
    stop = math.floor(hi / step + 1e-9)
    if stop - start + 1 >= 2:
        ticks = _snap(np.arange(start, stop + 1, dtype=np.float64) * step, step)
        if ticks.size >= 2:
            return ticks
    return _covering(lo, hi, step)


def compute_covering_ticks(vmin: float, vmax: float, num_ticks: int = DEFAULT_NUM_TICKS) -> np.ndarray:
    """Nice ticks from floor(vmin/step)*step through ceil(vmax/step)*step."""
    prepared = _prepare(vmin, vmax, num_ticks)
    if prepared is None:
        return np.empty(0, dtype=np.float64)
    lo, hi, step = prepared
    if math.isnan(step):
        return np.asarray([lo, hi], dtype=np.float64)
    return _covering(lo, hi, step)


def _prepare(vmin: float, vmax: float, num_ticks: int) -> tuple[float, float, float] | None:
    if not (math.isfinite(vmin) and math.isfinite(vmax)):
        return None
    lo, hi = (vmin, vmax) if vmin <= vmax else (vmax, vmin)
    if lo == hi:
        lo, hi = widen_degenerate(lo)
    return lo, hi, nice_step((hi - lo) / max(1, int(num_ticks)))


def _covering(lo: float, hi: float, step: float) -> np.ndarray:
    start = math.floor(lo / step + 1e-9)
    stop = max(math.ceil(hi / step - 1e-9), start + 1)
    ticks = _snap(np.arange(start, stop + 1, dtype=np.float64) * step, step)
    if ticks.size < 2:
        return np.asarray([lo, hi], dtype=np.float64)
    return ticks


def _snap(ticks: np.ndarray, step: float) -> np.ndarray:
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return np.unique(ticks)


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = decimals_for_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e9 or abs_v < 1e-6):
        return f"{value:.3e}"

    d = Decimal(repr(float(value)))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if step is None and "." in out:
        out = out.rstrip("0").rstrip(".")
    if out.startswith("-") and out.strip("-0.") == "":
        out = out[1:]
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def decimals_for_step(step: float | None) -> int:
    """Fewest decimal places that represent `step` exactly (capped at 6)."""
    if step is None or not np.isfinite(step) or step <= 0:
        return 0
    for decimals in range(7):
        if abs(round(step, decimals) - step) <= step * 1e-6:
            return decimals
    return 6
