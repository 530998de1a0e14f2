"""
Table-Driven Double-Double Transcendentals
==========================================

Every function evaluates in DOUBLE-DOUBLE arithmetic: a value is carried
as an unevaluated sum (hi, lo) of two doubles, giving ~106 bits. The
final hi is the double nearest the double-double result, so results are
within 0.5 ULP plus a tiny fraction.

KERNEL LAYOUT:
    exp     x = k ln2 + j/1024 + r,  exp(x) = 2^k * T[j] * (1 + expm1(r))
    log     x = 2^e * m,  m = c (1 + t), c = 1 + j/1024
            log(x) = e ln2 + L[j] + log1p(t)
    sin/cos x = k pi/2 + r,  r = i/8 + d,  angle addition with S[i], C[i]
    atan    t = i/8 + ...,  atan(t) = A[i] + atan((t - c) / (1 + t c))

TABLES:
    Built once at import from decimal arithmetic and stored as (hi, lo)
    pairs. pi comes from Machin's formula in integer arithmetic; the same
    integer gives the ~1400-bit image of 2/pi used to reduce trigonometric
    arguments of any size exactly.

SPECIAL VALUES:
    Follow the Java/C99 conventions: pow(x, 0) = 1 for every x (NaN
    included), pow(+-1, +-inf) = NaN, signed zeros for sin, tan, atan,
    sinh, tanh, atan2 sign table, log(0) = -inf, log(x < 0) = NaN.
"""

import logging
import math
import time
from decimal import Decimal, localcontext
from fractions import Fraction
from typing import List, Tuple

from ..spec.constants import SAFE_MIN

logger = logging.getLogger(__name__)

DD = Tuple[float, float]

PI = math.pi
E = math.e

_INF = math.inf
_NAN = math.nan

_SPLITTER = 134217729.0              # 2^27 + 1, Dekker split
_TWO_POW_28 = 2.0 ** 28
_TWO_POW_M28 = 2.0 ** -28
_TWO_POW_60 = 2.0 ** 60
_TWO_POW_52 = 2.0 ** 52
_TWO_POW_53 = 2.0 ** 53
_LOG1P_SERIES_MAX = 2.0 ** -10

# ln2 with a short high part: k * _LN2_HI is exact for |k| < 2^11
_LN2_HI = 6.93147180369123816490e-01
_LN2_LO = 1.90821492927058770002e-10
_INV_LN2 = 1.4426950408889634

_EXP_OVERFLOW = 709.79               # beyond: exp overflows for sure
_EXP_UNDERFLOW = -746.0              # below: exp rounds to +0.0
_EXPM1_SATURATION = -40.0            # below: expm1 rounds to -1.0
_HYPERBOLIC_LARGE = 22.0             # beyond: e^-x is negligible
_HYPERBOLIC_OVERFLOW = 711.0
_SQRT_HALF = 0.7071067811865476
_PI_4 = 0.7853981633974483

_EXP_TABLE_HALF = 512                # T[j] = exp(j/1024), j in [-512, 512]
_LOG_TABLE_HALF = 512                # L[j] = ln(1 + j/1024), j in [-512, 512]
_TRIG_TABLE_SIZE = 9                 # S[i], C[i], A[i] at i/8, i in [0, 8]

_PI_BITS = 1700
_TWO_OVER_PI_BITS = 1400
_PI_OVER_2_BITS = 200
_MACHIN_GUARD = 64


# =============================================================================
# ERROR-FREE TRANSFORMATIONS
# =============================================================================

def _split(a: float) -> DD:
    c = _SPLITTER * a
    hi = c - (c - a)
    return hi, a - hi


def two_sum(a: float, b: float) -> DD:
    """s + e == a + b exactly, with s = fl(a + b)."""
    s = a + b
    bb = s - a
    return s, (a - (s - bb)) + (b - bb)


def fast_two_sum(a: float, b: float) -> DD:
    """As two_sum, valid when |a| >= |b| (or a == 0)."""
    s = a + b
    return s, b - (s - a)


def two_product(a: float, b: float) -> DD:
    """p + e == a * b exactly, with p = fl(a * b), for |a|, |b| < 2^996."""
    p = a * b
    ah, al = _split(a)
    bh, bl = _split(b)
    return p, ((ah * bh - p) + ah * bl + al * bh) + al * bl


def _dd_add(ah: float, al: float, bh: float, bl: float) -> DD:
    s, e = two_sum(ah, bh)
    e += al + bl
    return fast_two_sum(s, e)


def _dd_mul(ah: float, al: float, bh: float, bl: float) -> DD:
    p, e = two_product(ah, bh)
    e += ah * bl + al * bh
    return fast_two_sum(p, e)


def _dd_div(ah: float, al: float, bh: float, bl: float) -> DD:
    q1 = ah / bh
    ph, pl = two_product(q1, bh)
    pl += q1 * bl
    rh, rl = _dd_add(ah, al, -ph, -pl)
    return fast_two_sum(q1, rh / bh)


def _dd_sqrt(h: float, l: float) -> DD:
    if h == 0.0:
        return 0.0, 0.0
    s = math.sqrt(h)
    p, pe = two_product(s, s)
    return fast_two_sum(s, ((h - p) - pe + l) / (2.0 * s))


def _ratio_to_dd(num: int, den: int) -> DD:
    """Exact rational num/den rounded to a double-double."""
    hi = num / den
    n, d = hi.as_integer_ratio()
    lo = (num * d - n * den) / (den * d)
    return hi, lo


# =============================================================================
# TABLES (built at import)
# =============================================================================

def _machin_pi(bits: int) -> int:
    """floor(pi * 2^bits), via pi = 16 atan(1/5) - 4 atan(1/239)."""
    unity = 1 << (bits + _MACHIN_GUARD)

    def atan_inv(n: int) -> int:
        x = unity // n
        total = x
        n2 = n * n
        k = 3
        sign = -1
        while x:
            x //= n2
            total += sign * (x // k)
            sign = -sign
            k += 2
        return total

    return (16 * atan_inv(5) - 4 * atan_inv(239)) >> _MACHIN_GUARD


def _dec_to_dd(d: Decimal) -> DD:
    hi = float(d)
    return hi, float(d - Decimal(hi))


def _dec_sin_cos(x: Decimal) -> Tuple[Decimal, Decimal]:
    s = term_s = x
    c = term_c = Decimal(1)
    x2 = x * x
    n = 1
    while True:
        term_c = -term_c * x2 / ((2 * n - 1) * (2 * n))
        term_s = -term_s * x2 / ((2 * n) * (2 * n + 1))
        if term_c + c == c and term_s + s == s:
            return s, c
        c += term_c
        s += term_s
        n += 1


def _dec_atan(x: Decimal) -> Decimal:
    # two halvings, atan(x) = 2 atan(x / (1 + sqrt(1 + x^2))), bring x below 0.2
    for _ in range(2):
        x = x / (1 + (1 + x * x).sqrt())
    result = term = x
    x2 = x * x
    n = 1
    while True:
        term = -term * x2
        delta = term / (2 * n + 1)
        if result + delta == result:
            return 4 * result
        result += delta
        n += 1


def _build_tables():
    start = time.perf_counter()
    pi_int = _machin_pi(_PI_BITS)
    two_over_pi = (1 << (_TWO_OVER_PI_BITS + _PI_BITS + 1)) // pi_int
    pi_over_2 = pi_int >> (_PI_BITS - _PI_OVER_2_BITS + 1)

    with localcontext() as ctx:
        ctx.prec = 40
        exp_table = [_dec_to_dd((Decimal(j) / 1024).exp())
                     for j in range(-_EXP_TABLE_HALF, _EXP_TABLE_HALF + 1)]
        log_table = [_dec_to_dd((1 + Decimal(j) / 1024).ln())
                     for j in range(-_LOG_TABLE_HALF, _LOG_TABLE_HALF + 1)]
        sin_table: List[DD] = []
        cos_table: List[DD] = []
        atan_table: List[DD] = []
        for i in range(_TRIG_TABLE_SIZE):
            s, c = _dec_sin_cos(Decimal(i) / 8)
            sin_table.append(_dec_to_dd(s))
            cos_table.append(_dec_to_dd(c))
            atan_table.append(_dec_to_dd(_dec_atan(Decimal(i) / 8)))
        ln2 = _dec_to_dd(Decimal(2).ln())
        log10_e = _dec_to_dd(1 / Decimal(10).ln())

    tables = {
        "pi_int": pi_int,
        "two_over_pi": two_over_pi,
        "pi_over_2": pi_over_2,
        "pi": _ratio_to_dd(pi_int, 1 << _PI_BITS),
        "pi_2": _ratio_to_dd(pi_int, 1 << (_PI_BITS + 1)),
        "deg_to_rad": _ratio_to_dd(pi_int, 180 << _PI_BITS),
        "rad_to_deg": _ratio_to_dd(180 << _PI_BITS, pi_int),
        "exp": exp_table,
        "log": log_table,
        "sin": sin_table,
        "cos": cos_table,
        "atan": atan_table,
        "ln2": ln2,
        "log10_e": log10_e,
    }
    logger.debug("fastmath tables built in %.1f ms", 1e3 * (time.perf_counter() - start))
    return tables


_TABLES = _build_tables()
_TWO_OVER_PI = _TABLES["two_over_pi"]
_PI_OVER_2 = _TABLES["pi_over_2"]
_EXP_T = _TABLES["exp"]
_LOG_T = _TABLES["log"]
_SIN_T = _TABLES["sin"]
_COS_T = _TABLES["cos"]
_ATAN_T = _TABLES["atan"]
_PI_H, _PI_L = _TABLES["pi"]
_PI_2_H, _PI_2_L = _TABLES["pi_2"]
_LN2_H, _LN2_L = _TABLES["ln2"]
_LOG10_E_H, _LOG10_E_L = _TABLES["log10_e"]
_DEG_H, _DEG_L = _TABLES["deg_to_rad"]
_RAD_H, _RAD_L = _TABLES["rad_to_deg"]


# =============================================================================
# EXPONENTIAL FAMILY
# =============================================================================

def _exp_core(xh: float, xl: float) -> Tuple[int, float, float]:
    """exp(xh + xl) = 2^k * (hi + lo), with hi + lo in [0.7, 1.42]."""
    k = int(round(xh * _INV_LN2))
    t = xh - k * _LN2_HI
    p, pe = two_product(float(k), _LN2_LO)
    yh, yl = two_sum(t, -p)
    yh, yl = two_sum(yh, yl + (xl - pe))

    j = int(round(yh * 1024))
    rh, rl = two_sum(yh - j / 1024, yl)

    # expm1(r), |r| <= 2^-11
    q = rh * rh * (0.5 + rh * (1 / 6 + rh * (1 / 24 + rh * (1 / 120 + rh / 720))))
    mh, ml = fast_two_sum(rh, q)
    ml += rl

    th, tl = _EXP_T[j + _EXP_TABLE_HALF]
    ph, pl = two_product(th, mh)
    pl += th * ml + tl * mh
    sh, sl = fast_two_sum(th, ph)
    sl += tl + pl
    hi, lo = fast_two_sum(sh, sl)
    return k, hi, lo


def _scale(hi: float, lo: float, k: int) -> float:
    """Correctly rounded (hi + lo) * 2^k, hi being the rounded double-double."""
    try:
        result = math.ldexp(hi, k)
    except OverflowError:
        return math.copysign(_INF, hi)
    if math.fabs(result) >= SAFE_MIN or hi == 0.0:
        return result
    # subnormal: round the exact value to a multiple of 2^-1074
    n = round((Fraction(hi) + Fraction(lo)) * Fraction(2) ** (k + 1074))
    return math.ldexp(float(n), -1074)


def exp(x: float) -> float:
    """e^x."""
    if x != x:
        return x
    if x > _EXP_OVERFLOW:
        return _INF
    if x < _EXP_UNDERFLOW:
        return 0.0
    k, hi, lo = _exp_core(x, 0.0)
    return _scale(hi, lo, k)


def _expm1_dd(x: float) -> DD:
    """expm1(x) as a double-double for -40 <= x <= 700."""
    if math.fabs(x) <= 0.5:
        j = int(round(x * 1024))
        r = x - j / 1024
        q = r * r * (0.5 + r * (1 / 6 + r * (1 / 24 + r * (1 / 120 + r / 720))))
        mh, ml = fast_two_sum(r, q)
        th, tl = _EXP_T[j + _EXP_TABLE_HALF]
        ah, al = two_sum(th - 1.0, tl)
        bh, bl = two_product(th, mh)
        bl += th * ml + tl * mh
        return _dd_add(ah, al, bh, bl)
    k, hi, lo = _exp_core(x, 0.0)
    return _dd_add(math.ldexp(hi, k), math.ldexp(lo, k), -1.0, 0.0)


def expm1(x: float) -> float:
    """e^x - 1, accurate for x near 0."""
    if x != x or x == 0.0:
        return x
    if x > 700.0:
        return exp(x)
    if x < _EXPM1_SATURATION:
        return -1.0
    return _expm1_dd(x)[0]


def _log_dd(xh: float, xl: float) -> DD:
    """ln(xh + xl) as a double-double, for a finite positive double-double."""
    m, e = math.frexp(xh)
    ml = math.ldexp(xl, -e)
    if m < _SQRT_HALF:
        m *= 2.0
        ml *= 2.0
        e -= 1

    j = int(round((m - 1.0) * 1024))
    c = 1.0 + j / 1024
    dh, dl = two_sum(m - c, ml)
    th, tl = _dd_div(dh, dl, c, 0.0)

    # log1p(t), |t| < 2^-10
    q = th * th * (-0.5 + th * (1 / 3 + th * (-0.25 + th * (0.2 + th * (-1 / 6 + th / 7)))))
    q -= th * tl
    ph, pl = fast_two_sum(th, q)
    pl += tl

    lh, ll = _LOG_T[j + _LOG_TABLE_HALF]
    sh, sl = _dd_add(lh, ll, ph, pl)
    if e == 0:
        return sh, sl
    eh, el = two_product(float(e), _LN2_H)
    el += e * _LN2_L
    return _dd_add(eh, el, sh, sl)


def log(x: float) -> float:
    """Natural logarithm; log(0) = -inf, log(x < 0) = NaN."""
    if x != x or x == _INF:
        return x
    if x == 0.0:
        return -_INF
    if x < 0.0:
        return _NAN
    if x == 1.0:
        return 0.0
    return _log_dd(x, 0.0)[0]


def log10(x: float) -> float:
    """Base-10 logarithm."""
    if x != x or x == _INF:
        return x
    if x == 0.0:
        return -_INF
    if x < 0.0:
        return _NAN
    if x == 1.0:
        return 0.0
    h, l = _log_dd(x, 0.0)
    return _dd_mul(h, l, _LOG10_E_H, _LOG10_E_L)[0]


def _log1p_dd(wh: float, wl: float) -> DD:
    sh, sl = two_sum(1.0, wh)
    return _log_dd(sh, sl + wl)


def log1p(x: float) -> float:
    """ln(1 + x), accurate for x near 0."""
    if x != x or x == _INF or x == 0.0:
        return x
    if x == -1.0:
        return -_INF
    if x < -1.0:
        return _NAN
    if math.fabs(x) < _LOG1P_SERIES_MAX:
        q = x * x * (-0.5 + x * (1 / 3 + x * (-0.25 + x * (0.2 + x * (-1 / 6 + x / 7)))))
        return fast_two_sum(x, q)[0]
    return _log1p_dd(x, 0.0)[0]


def _is_integer(y: float) -> bool:
    return math.isfinite(y) and y == math.floor(y)


def _is_odd_integer(y: float) -> bool:
    return _is_integer(y) and math.fabs(y) < _TWO_POW_53 and int(y) % 2 == 1


def pow(x: float, y: float) -> float:
    """
    x raised to the power y.

    Special cases follow the Java conventions, which differ from C99 for
    pow(1, NaN) and pow(+-1, +-inf): both are NaN here.
    """
    if y == 0.0:
        return 1.0
    if x != x or y != y:
        return _NAN

    if x == 0.0:
        negative_zero = math.copysign(1.0, x) < 0.0
        if y < 0.0:
            return -_INF if negative_zero and _is_odd_integer(y) else _INF
        return -0.0 if negative_zero and _is_odd_integer(y) else 0.0

    if math.isinf(x):
        if x > 0.0:
            return 0.0 if y < 0.0 else _INF
        if y < 0.0:
            return -0.0 if _is_odd_integer(y) else 0.0
        return -_INF if _is_odd_integer(y) else _INF

    if math.isinf(y):
        x2 = x * x
        if x2 == 1.0:
            return _NAN
        if x2 > 1.0:
            return _INF if y > 0.0 else 0.0
        return 0.0 if y > 0.0 else _INF

    if x < 0.0:
        if not _is_integer(y):
            return _NAN
        result = _pow_positive(-x, y)
        return -result if _is_odd_integer(y) else result

    return _pow_positive(x, y)


def _pow_positive(x: float, y: float) -> float:
    lh, ll = _log_dd(x, 0.0)
    wh = y * lh
    if wh > _EXP_OVERFLOW:
        return _INF
    if wh < _EXP_UNDERFLOW:
        return 0.0
    wh, wl = two_product(y, lh)
    wl += y * ll
    k, hi, lo = _exp_core(wh, wl)
    return _scale(hi, lo, k)


# =============================================================================
# TRIGONOMETRIC
# =============================================================================

def _reduce_quadrant(x: float) -> Tuple[int, float, float]:
    """x = k pi/2 + r with |r| <= pi/4, exactly; returns (k mod 4, r hi, r lo)."""
    m, e = math.frexp(x)
    mantissa = int(math.ldexp(m, 53))
    shift = _TWO_OVER_PI_BITS - (e - 53)
    z = mantissa * _TWO_OVER_PI
    k = (z + (1 << (shift - 1))) >> shift
    frac = z - (k << shift)
    rh, rl = _ratio_to_dd(frac * _PI_OVER_2, 1 << (shift + _PI_OVER_2_BITS))
    return k & 3, rh, rl


def _sin_cos_dd(rh: float, rl: float) -> Tuple[DD, DD]:
    """(sin r, cos r) as double-doubles for |r| <= pi/4."""
    negative = rh < 0.0
    if negative:
        rh, rl = -rh, -rl

    i = int(round(rh * 8))
    dh, dl = two_sum(rh - i / 8, rl)
    d2 = dh * dh

    s_tail = dh * d2 * (-1 / 6 + d2 * (1 / 120 + d2 * (-1 / 5040 + d2 / 362880)))
    sh, sl = fast_two_sum(dh, s_tail)
    sl += dl

    ph, pl = two_product(dh, dh)
    c_tail = d2 * d2 * (1 / 24 + d2 * (-1 / 720 + d2 * (1 / 40320 - d2 / 3628800)))
    ch, cl = fast_two_sum(1.0, -0.5 * ph)
    cl += (c_tail - 0.5 * pl) - dh * dl

    if i == 0:
        sin_r, cos_r = fast_two_sum(sh, sl), fast_two_sum(ch, cl)
    else:
        th, tl = _SIN_T[i]
        uh, ul = _COS_T[i]
        sin_r = _dd_add(*_dd_mul(th, tl, ch, cl), *_dd_mul(uh, ul, sh, sl))
        ah, al = _dd_mul(uh, ul, ch, cl)
        bh, bl = _dd_mul(th, tl, sh, sl)
        cos_r = _dd_add(ah, al, -bh, -bl)

    if negative:
        sin_r = (-sin_r[0], -sin_r[1])
    return sin_r, cos_r


def _trig(x: float) -> Tuple[int, DD, DD]:
    if math.fabs(x) <= _PI_4:
        quadrant, rh, rl = 0, x, 0.0
    else:
        quadrant, rh, rl = _reduce_quadrant(x)
    s, c = _sin_cos_dd(rh, rl)
    return quadrant, s, c


def sin(x: float) -> float:
    """Sine, sin(-0.0) = -0.0."""
    if x == 0.0 or x != x:
        return x
    if math.isinf(x):
        return _NAN
    quadrant, s, c = _trig(x)
    return (s[0], c[0], -s[0], -c[0])[quadrant]


def cos(x: float) -> float:
    """Cosine."""
    if x != x:
        return x
    if math.isinf(x):
        return _NAN
    quadrant, s, c = _trig(x)
    return (c[0], -s[0], -c[0], s[0])[quadrant]


def tan(x: float) -> float:
    """Tangent, tan(-0.0) = -0.0."""
    if x == 0.0 or x != x:
        return x
    if math.isinf(x):
        return _NAN
    quadrant, s, c = _trig(x)
    if quadrant & 1:
        return -_dd_div(c[0], c[1], s[0], s[1])[0]
    return _dd_div(s[0], s[1], c[0], c[1])[0]


def _atan_unit_dd(th: float, tl: float) -> DD:
    """atan(t) as a double-double for 0 <= t <= 1."""
    i = int(round(th * 8))
    c = i / 8
    nh, nl = two_sum(th - c, tl)
    ph, pl = two_product(th, c)
    dh, dl = _dd_add(1.0, 0.0, ph, pl + tl * c)
    uh, ul = _dd_div(nh, nl, dh, dl)

    u2 = uh * uh
    tail = uh * u2 * (-1 / 3 + u2 * (0.2 + u2 * (-1 / 7 + u2 * (1 / 9 + u2 * (
        -1 / 11 + u2 * (1 / 13 + u2 * (-1 / 15 + u2 / 17)))))))
    ah, al = fast_two_sum(uh, tail)
    al += ul
    if i == 0:
        return fast_two_sum(ah, al)
    bh, bl = _ATAN_T[i]
    return _dd_add(bh, bl, ah, al)


def _atan_ratio_dd(nh: float, nl: float, dh: float, dl: float) -> DD:
    """atan(n / d) in [0, pi/2] for non-negative n, d, not both zero."""
    if nh <= dh:
        return _atan_unit_dd(*_dd_div(nh, nl, dh, dl))
    ah, al = _atan_unit_dd(*_dd_div(dh, dl, nh, nl))
    return _dd_add(_PI_2_H, _PI_2_L, -ah, -al)


def atan(x: float) -> float:
    """Arc tangent in [-pi/2, pi/2]."""
    if x == 0.0 or x != x:
        return x
    a = math.fabs(x)
    if a > _TWO_POW_60:
        return math.copysign(_PI_2_H, x)
    if a < _TWO_POW_M28:
        return x
    return math.copysign(_atan_ratio_dd(a, 0.0, 1.0, 0.0)[0], x)


def atan2(y: float, x: float) -> float:
    """
    Angle of the point (x, y) in [-pi, pi].

    Signed zeros select the branch: atan2(+-0, +0) = +-0,
    atan2(+-0, -0) = +-pi.
    """
    if x != x or y != y:
        return _NAN

    if y == 0.0:
        if x > 0.0 or (x == 0.0 and math.copysign(1.0, x) > 0.0):
            return y
        return math.copysign(_PI_H, y)

    if math.isinf(y):
        if x == _INF:
            return math.copysign(_PI_H / 4, y)
        if x == -_INF:
            return math.copysign(3 * _PI_H / 4, y)
        return math.copysign(_PI_2_H, y)

    if math.isinf(x):
        return math.copysign(0.0 if x > 0.0 else _PI_H, y)

    if x == 0.0:
        return math.copysign(_PI_2_H, y)

    ax = math.fabs(x)
    ay = math.fabs(y)
    if x > 0.0 and ay / ax < _TWO_POW_M28:
        return y / x

    # bring the larger magnitude into [0.5, 1) so products cannot overflow
    e = math.frexp(ax if ax > ay else ay)[1]
    ah, al = _atan_ratio_dd(math.ldexp(ay, -e), 0.0, math.ldexp(ax, -e), 0.0)
    if x < 0.0:
        ah, al = _dd_add(_PI_H, _PI_L, -ah, -al)
    return math.copysign(ah, y)


def asin(x: float) -> float:
    """Arc sine in [-pi/2, pi/2], NaN outside [-1, 1]."""
    if x != x or x == 0.0:
        return x
    a = math.fabs(x)
    if a > 1.0:
        return _NAN
    if a == 1.0:
        return math.copysign(_PI_2_H, x)
    if a < _TWO_POW_M28:
        return x
    # sqrt((1 - a)(1 + a)) keeps full precision near a = 1
    root = _dd_sqrt(*_dd_mul(*two_sum(1.0, -a), *two_sum(1.0, a)))
    return math.copysign(_atan_ratio_dd(a, 0.0, *root)[0], x)


def acos(x: float) -> float:
    """Arc cosine in [0, pi], NaN outside [-1, 1]."""
    if x != x:
        return x
    a = math.fabs(x)
    if a > 1.0:
        return _NAN
    if x == 1.0:
        return 0.0
    if x == -1.0:
        return _PI_H
    if x == 0.0:
        return _PI_2_H
    root = _dd_sqrt(*_dd_mul(*two_sum(1.0, -a), *two_sum(1.0, a)))
    ah, al = _atan_ratio_dd(*root, a, 0.0)
    if x < 0.0:
        ah, al = _dd_add(_PI_H, _PI_L, -ah, -al)
    return ah


# =============================================================================
# HYPERBOLIC
# =============================================================================

def sinh(x: float) -> float:
    """Hyperbolic sine."""
    if x != x or x == 0.0 or math.isinf(x):
        return x
    a = math.fabs(x)
    if a < _TWO_POW_M28:
        return x
    if a > _HYPERBOLIC_OVERFLOW:
        return math.copysign(_INF, x)
    if a > _HYPERBOLIC_LARGE:
        k, hi, lo = _exp_core(a, 0.0)
        return math.copysign(_scale(hi, lo, k - 1), x)
    # (em + em / (em + 1)) / 2 with em = expm1(a)
    mh, ml = _expm1_dd(a)
    qh, ql = _dd_div(mh, ml, *_dd_add(mh, ml, 1.0, 0.0))
    return math.copysign(0.5 * _dd_add(mh, ml, qh, ql)[0], x)


def cosh(x: float) -> float:
    """Hyperbolic cosine."""
    if x != x:
        return x
    a = math.fabs(x)
    if a > _HYPERBOLIC_OVERFLOW:
        return _INF
    k, hi, lo = _exp_core(a, 0.0)
    if a > _HYPERBOLIC_LARGE:
        return _scale(hi, lo, k - 1)
    eh, el = math.ldexp(hi, k), math.ldexp(lo, k)
    ih, il = _dd_div(1.0, 0.0, eh, el)
    return 0.5 * _dd_add(eh, el, ih, il)[0]


def tanh(x: float) -> float:
    """Hyperbolic tangent, saturating to +-1."""
    if x != x or x == 0.0:
        return x
    a = math.fabs(x)
    if a > _HYPERBOLIC_LARGE:
        return math.copysign(1.0, x)
    if a < _TWO_POW_M28:
        return x
    mh, ml = _expm1_dd(2.0 * a)
    return math.copysign(_dd_div(mh, ml, *_dd_add(mh, ml, 2.0, 0.0))[0], x)


def asinh(x: float) -> float:
    """Inverse hyperbolic sine."""
    if x != x or x == 0.0 or math.isinf(x):
        return x
    a = math.fabs(x)
    if a < _TWO_POW_M28:
        return x
    if a > _TWO_POW_28:
        h, l = _log_dd(a, 0.0)
        return math.copysign(_dd_add(h, l, _LN2_H, _LN2_L)[0], x)
    # log1p(a + a^2 / (1 + sqrt(1 + a^2)))
    sh, sl = two_product(a, a)
    rh, rl = _dd_sqrt(*_dd_add(1.0, 0.0, sh, sl))
    qh, ql = _dd_div(sh, sl, *_dd_add(1.0, 0.0, rh, rl))
    return math.copysign(_log1p_dd(*_dd_add(a, 0.0, qh, ql))[0], x)


def acosh(x: float) -> float:
    """Inverse hyperbolic cosine, NaN below 1."""
    if x != x or x == _INF:
        return x
    if x < 1.0:
        return _NAN
    if x == 1.0:
        return 0.0
    if x > _TWO_POW_28:
        h, l = _log_dd(x, 0.0)
        return _dd_add(h, l, _LN2_H, _LN2_L)[0]
    # log1p((x - 1) + sqrt((x - 1)(x + 1)))
    mh, ml = two_sum(x, -1.0)
    rh, rl = _dd_sqrt(*_dd_mul(mh, ml, *two_sum(x, 1.0)))
    return _log1p_dd(*_dd_add(mh, ml, rh, rl))[0]


def atanh(x: float) -> float:
    """Inverse hyperbolic tangent, +-inf at +-1, NaN outside [-1, 1]."""
    if x != x or x == 0.0:
        return x
    a = math.fabs(x)
    if a > 1.0:
        return _NAN
    if a == 1.0:
        return math.copysign(_INF, x)
    if a < _TWO_POW_M28:
        return x
    # 0.5 log1p(2a / (1 - a))
    wh, wl = _dd_div(2.0 * a, 0.0, *two_sum(1.0, -a))
    return math.copysign(0.5 * _log1p_dd(wh, wl)[0], x)


# =============================================================================
# ROOTS
# =============================================================================

def sqrt(x: float) -> float:
    """Square root, NaN for x < 0, sqrt(-0.0) = -0.0."""
    if x != x or x < 0.0:
        return _NAN
    return math.sqrt(x)


def cbrt(x: float) -> float:
    """Cube root, defined for every sign."""
    if x != x or x == 0.0 or math.isinf(x):
        return x
    m, e = math.frexp(math.fabs(x))
    rem = e % 3
    m = math.ldexp(m, rem)
    e -= rem
    y = m ** (1.0 / 3.0)
    # one Newton step on the double-double residual y^3 - m
    y2h, y2l = two_product(y, y)
    y3h, y3l = _dd_mul(y2h, y2l, y, 0.0)
    rh, _ = _dd_add(y3h, y3l, -m, 0.0)
    y = fast_two_sum(y, -rh / (3.0 * y * y))[0]
    return math.copysign(math.ldexp(y, e // 3), x)


def hypot(x: float, y: float) -> float:
    """sqrt(x^2 + y^2) without intermediate overflow; inf wins over NaN."""
    return math.hypot(x, y)


# =============================================================================
# UTILITIES
# =============================================================================

def ulp(x: float) -> float:
    """Distance to the next double of larger magnitude (MIN_VALUE at zero)."""
    if x != x:
        return x
    return math.ulp(x)


def next_up(x: float) -> float:
    return math.nextafter(x, _INF)


def next_down(x: float) -> float:
    return math.nextafter(x, -_INF)


def next_after(start: float, direction: float) -> float:
    """Neighbour of start in the direction of direction (direction if equal)."""
    return math.nextafter(start, direction)


def scalb(d: float, n: int) -> float:
    """d * 2^n, saturating to +-inf instead of raising."""
    try:
        return math.ldexp(d, n)
    except OverflowError:
        return math.copysign(_INF, d)


def get_exponent(d: float) -> int:
    """Unbiased binary exponent: 1024 for NaN/inf, -1023 for zero and subnormals."""
    if d != d or math.isinf(d):
        return 1024
    if d == 0.0 or math.fabs(d) < SAFE_MIN:
        return -1023
    return math.frexp(d)[1] - 1


def signum(x: float) -> float:
    """Sign of x as +-1.0; zeros and NaN come back unchanged."""
    if x != x or x == 0.0:
        return x
    return 1.0 if x > 0.0 else -1.0


def copy_sign(magnitude: float, sign: float) -> float:
    return math.copysign(magnitude, sign)


def to_radians(x: float) -> float:
    """Degrees to radians, rounded from the exact product x * pi / 180."""
    if x == 0.0 or not math.isfinite(x):
        return x * _DEG_H
    return _dd_mul(x, 0.0, _DEG_H, _DEG_L)[0]


def to_degrees(x: float) -> float:
    """Radians to degrees."""
    if x == 0.0 or not math.isfinite(x) or math.fabs(x) > 2.0 ** 900:
        return x * _RAD_H
    return _dd_mul(x, 0.0, _RAD_H, _RAD_L)[0]


def floor(x: float) -> float:
    """Largest integral double <= x; NaN, infinities and zeros pass through."""
    if x != x or math.isinf(x) or x == 0.0 or math.fabs(x) >= _TWO_POW_52:
        return x
    return float(math.floor(x))


def ceil(x: float) -> float:
    """Smallest integral double >= x; ceil(-0.5) = -0.0."""
    if x != x or math.isinf(x) or x == 0.0 or math.fabs(x) >= _TWO_POW_52:
        return x
    result = float(math.ceil(x))
    return math.copysign(result, x) if result == 0.0 else result


def rint(x: float) -> float:
    """Nearest integral double, ties to even; rint(-0.4) = -0.0."""
    if x != x or math.isinf(x) or x == 0.0 or math.fabs(x) >= _TWO_POW_52:
        return x
    result = float(round(x))
    return math.copysign(result, x) if result == 0.0 else result


def abs(x: float) -> float:
    """|x|, with abs(-0.0) = 0.0."""
    return math.fabs(x)


def min(a: float, b: float) -> float:
    """Minimum, NaN if either is NaN, min(-0.0, 0.0) = -0.0."""
    if a != a:
        return a
    if b != b:
        return b
    if a < b:
        return a
    if b < a:
        return b
    if a == 0.0 and math.copysign(1.0, a) < 0.0:
        return a
    return b


def max(a: float, b: float) -> float:
    """Maximum, NaN if either is NaN, max(-0.0, 0.0) = 0.0."""
    if a != a:
        return a
    if b != b:
        return b
    if a > b:
        return a
    if b > a:
        return b
    if a == 0.0 and math.copysign(1.0, a) > 0.0:
        return a
    return b
