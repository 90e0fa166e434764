"""
Path-dependent products with smoothed discontinuities.

Barrier knockouts and digital coupons are discontinuous in the
underlying. Differentiated naively, an indicator has a zero derivative
almost everywhere and an infinite one at the threshold, so sensitivities
are either wrong (AAD) or unstable (bumping). Both products below replace
the indicator with a linear ramp of half-width

    smooth = smooth_fraction * spot(today)

which converges to the indicator as smooth_fraction goes to zero. The
half-width is materialized to a plain float before use: it only places
the band boundaries, and is never differentiated itself.
"""

from typing import List, Tuple

from loguru import logger

from .numeric import positive_part, to_real
from .products import Product, ProductKind, _fail, _fmt
from .simulation import RateDef, SimulationRequirement, Time

ONE_HOUR = 0.000114469
ONE_DAY = 0.003773585


def build_schedule(
    now: Time,
    maturity: Time,
    freq: Time,
    tolerance: Time,
) -> Tuple[Tuple[Time, ...], Tuple[Time, ...]]:
    """
    Build a regular schedule from now to maturity.

    Nodes are added every freq while maturity is still more than
    tolerance away; maturity is then appended as the last node. A regular
    node that would land within tolerance of maturity is snapped to it.

    Args:
        now: First node
        maturity: Last node
        freq: Spacing of the regular nodes
        tolerance: Snap distance to maturity

    Returns:
        (timeline, coverages) where coverages[i] = timeline[i + 1] - timeline[i]
    """
    if freq <= 0:
        _fail("Schedule frequency must be positive")
    if maturity <= now:
        _fail("Maturity must be after today")

    timeline: List[Time] = [now]
    coverages: List[Time] = []
    t = now + freq
    while maturity - t > tolerance:
        coverages.append(t - timeline[-1])
        timeline.append(t)
        t += freq

    coverages.append(maturity - timeline[-1])
    timeline.append(maturity)
    return tuple(timeline), tuple(coverages)


def _check_smooth(smooth: float) -> None:
    if smooth <= 0:
        _fail("Smoothing fraction must be positive")


class UOC(Product):
    """
    Up-and-out call with a discretely monitored, smoothed barrier.

    Produces two payoffs: the barrier option first, then the European call
    with the same strike and maturity, which serves as a control.
    """

    kind = ProductKind.UOC

    def __init__(
        self,
        strike: float,
        barrier: float,
        maturity: Time,
        monitor_freq: Time,
        smooth: float,
        now: Time = 0.0,
    ):
        """
        Initialize the barrier option.

        Args:
            strike: Strike price K
            barrier: Knock-out level, monitored on every timeline date
            maturity: Expiry (year fraction)
            monitor_freq: Spacing of barrier monitoring dates
            smooth: Smoothing half-width as a fraction of today's spot
            now: System date
        """
        if strike < 0:
            _fail("Strike price cannot be negative")
        _check_smooth(smooth)

        self.strike = float(strike)
        self.barrier = float(barrier)
        self.maturity = maturity
        self.monitor_freq = monitor_freq
        self.smooth = float(smooth)

        self._timeline, _ = build_schedule(now, maturity, monitor_freq, ONE_HOUR)

        n = len(self._timeline)
        self._dataline = tuple(
            SimulationRequirement(numeraire=(i == n - 1), forward_mats=(t,))
            for i, t in enumerate(self._timeline)
        )

        call = f"call {_fmt(maturity)} {_fmt(self.strike)}"
        self._labels = (
            f"{call} up and out {_fmt(self.barrier)}"
            f" monitoring freq {_fmt(monitor_freq)} smooth {_fmt(self.smooth)}",
            call,
        )
        logger.debug("UOC: {} monitoring dates up to {}", n, maturity)

    def _evaluate(self, path, out):
        smooth = to_real(path[0].forwards[0] * self.smooth)
        two_smooth = 2 * smooth
        bar_smooth = self.barrier + smooth

        alive = 1.0
        for scen in path:
            spot = scen.forwards[0]
            if spot > bar_smooth:
                alive = 0.0
                break
            if spot > self.barrier - smooth:
                alive *= (bar_smooth - spot) / two_smooth

        last = path[-1]
        out[1] = positive_part(last.forwards[0] - self.strike) / last.numeraire
        out[0] = alive * out[1]


class ContingentBond(Product):
    """
    Bond paying a floating coupon only over periods of positive performance.

    Pays, at the end of every period [T_i, T_i+1],

        (libor(T_i, T_i+1) + coupon) * (T_i+1 - T_i)   if S(T_i+1) >= S(T_i)

    and the redemption of 1 at maturity. Coverage is act/365.
    """

    kind = ProductKind.CONTINGENT_BOND

    def __init__(
        self,
        maturity: Time,
        coupon: float,
        pay_freq: Time,
        smooth: float,
        now: Time = 0.0,
    ):
        """
        Initialize the bond.

        Args:
            maturity: Final payment date (year fraction)
            coupon: Fixed spread over libor
            pay_freq: Spacing of coupon dates
            smooth: Smoothing half-width as a fraction of today's spot
            now: System date
        """
        _check_smooth(smooth)

        self.maturity = maturity
        self.coupon = float(coupon)
        self.pay_freq = pay_freq
        self.smooth = float(smooth)

        self._timeline, self._coverages = build_schedule(
            now, maturity, pay_freq, ONE_DAY
        )

        n = len(self._timeline)
        self._dataline = tuple(
            SimulationRequirement(
                numeraire=i > 0,
                forward_mats=(t,),
                libor_defs=(
                    (RateDef(t, self._timeline[i + 1], "libor"),) if i < n - 1 else ()
                ),
            )
            for i, t in enumerate(self._timeline)
        )

        self._labels = (f"contingent bond {_fmt(maturity)} {_fmt(self.coupon)}",)
        logger.debug("ContingentBond: {} coupon periods up to {}", n - 1, maturity)

    @property
    def coverages(self) -> Tuple[Time, ...]:
        return self._coverages

    def _evaluate(self, path, out):
        smooth = to_real(path[0].forwards[0] * self.smooth)
        two_smooth = 2 * smooth

        total = 0.0
        for i, dt in enumerate(self._coverages):
            start, end = path[i], path[i + 1]
            perf = end.forwards[0] - start.forwards[0]

            if perf > smooth:
                digital = 1.0
            elif perf < -smooth:
                digital = 0.0
            else:
                digital = (perf + smooth) / two_smooth

            total += digital * (start.libors[0] + self.coupon) * dt / end.numeraire

        # redemption
        out[0] = total + 1.0 / path[-1].numeraire
