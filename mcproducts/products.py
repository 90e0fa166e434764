"""
Product contract and vanilla products.

A product tells the simulation engine what to simulate (timeline and
dataline) and turns one simulated path into one or more payoffs. To add
an instrument, subclass Product, build the timeline, dataline and labels
in the constructor and implement _evaluate().

Payoffs are already deflated by the numeraire: the engine only averages
them across paths.
"""

import copy
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Mapping, MutableSequence, NoReturn, Optional, Sequence, Tuple

from loguru import logger

from .errors import PathMismatchError, PayoffBufferError, ProductConfigError
from .numeric import Real, positive_part
from .simulation import ScenarioEntry, SimulationRequirement, Time


class ProductKind(Enum):
    """Closed set of supported products."""

    EUROPEAN = "european"
    EUROPEANS = "europeans"
    UOC = "up_and_out_call"
    CONTINGENT_BOND = "contingent_bond"


def _fail(msg: str) -> NoReturn:
    logger.error(msg)
    raise ProductConfigError(msg)


def _fmt(x: float) -> str:
    return f"{x:.2f}"


class Product(ABC):
    """
    Abstract base class for simulated products.

    Subclasses fill _timeline, _dataline and _labels once, in their
    constructor. Nothing is mutated afterwards, so one instance may be
    evaluated concurrently against distinct paths and buffers.

    Attributes:
        kind: Tag identifying the concrete product
    """

    kind: ProductKind

    _timeline: Tuple[Time, ...]
    _dataline: Tuple[SimulationRequirement, ...]
    _labels: Tuple[str, ...]

    @property
    def timeline(self) -> Tuple[Time, ...]:
        """Dates the engine must simulate, strictly increasing."""
        return self._timeline

    @property
    def dataline(self) -> Tuple[SimulationRequirement, ...]:
        """Observables required on each timeline date."""
        return self._dataline

    @property
    def payoff_labels(self) -> Tuple[str, ...]:
        """One descriptive label per payoff."""
        return self._labels

    def clone(self) -> "Product":
        """Deep, independent copy, e.g. one per worker thread."""
        return copy.deepcopy(self)

    def payoffs(
        self,
        path: Sequence[ScenarioEntry],
        out: MutableSequence[Real],
    ) -> MutableSequence[Real]:
        """
        Evaluate the payoffs on one simulated path.

        Args:
            path: One ScenarioEntry per timeline date, realizing the dataline
            out: Pre-allocated buffer, one slot per payoff label

        Returns:
            The filled buffer

        Raises:
            PathMismatchError: If the path length differs from the timeline
            PayoffBufferError: If the buffer width differs from the labels
        """
        if len(path) != len(self._timeline):
            msg = f"Path has {len(path)} entries, timeline has {len(self._timeline)}"
            logger.error(msg)
            raise PathMismatchError(msg)
        if len(out) != len(self._labels):
            msg = f"Buffer has {len(out)} slots, product has {len(self._labels)} payoffs"
            logger.error(msg)
            raise PayoffBufferError(msg)
        self._evaluate(path, out)
        return out

    def evaluate(self, path: Sequence[ScenarioEntry]) -> List[Real]:
        """Evaluate the payoffs on one path into a fresh buffer."""
        return list(self.payoffs(path, [0.0] * len(self._labels)))

    @abstractmethod
    def _evaluate(
        self,
        path: Sequence[ScenarioEntry],
        out: MutableSequence[Real],
    ) -> None:
        """Write the payoffs of a validated path into out."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self._labels)})"


class European(Product):
    """
    European call: max(F(T_exercise, T_settlement) - K, 0), paid at settlement.

    The settlement date may be later than the exercise date, in which case
    the payoff is discounted from settlement back to exercise.
    """

    kind = ProductKind.EUROPEAN

    def __init__(
        self,
        strike: float,
        exercise_date: Time,
        settlement_date: Optional[Time] = None,
        now: Time = 0.0,
    ):
        """
        Initialize a European call.

        Args:
            strike: Strike price K
            exercise_date: Exercise date (year fraction)
            settlement_date: Payment date, defaults to the exercise date
            now: System date
        """
        if settlement_date is None:
            settlement_date = exercise_date
        if strike < 0:
            _fail("Strike price cannot be negative")
        if exercise_date < now:
            _fail("Exercise date cannot be in the past")
        if settlement_date < exercise_date:
            _fail("Settlement date cannot precede exercise date")

        self.strike = float(strike)
        self.exercise_date = exercise_date
        self.settlement_date = settlement_date

        self._timeline = (exercise_date,)
        self._dataline = (
            SimulationRequirement(
                numeraire=True,
                forward_mats=(settlement_date,),
                discount_mats=(settlement_date,),
            ),
        )

        label = f"call {_fmt(self.strike)} {_fmt(exercise_date)}"
        if settlement_date != exercise_date:
            label += f" {_fmt(settlement_date)}"
        self._labels = (label,)

    def _evaluate(self, path, out):
        scen = path[0]
        out[0] = (
            positive_part(scen.forwards[0] - self.strike)
            * scen.discounts[0]
            / scen.numeraire
        )


class Europeans(Product):
    """
    Strip of European calls sharing one simulation.

    Many maturities and strikes are priced off the same path, which
    amortizes the cost of simulation. Payoffs are laid out maturity major:
    all strikes of the first maturity, then all strikes of the second, etc.
    """

    kind = ProductKind.EUROPEANS

    def __init__(self, options: Mapping[Time, Sequence[float]]):
        """
        Initialize the strip.

        Args:
            options: Strikes per maturity; maturities are sorted, strikes
                keep the order given
        """
        if not options:
            _fail("At least one maturity is required")

        maturities = tuple(sorted(options))
        strikes = tuple(tuple(float(k) for k in options[t]) for t in maturities)

        if maturities[0] < 0:
            _fail("Maturities cannot be negative")
        for t, ks in zip(maturities, strikes):
            if not ks:
                _fail(f"No strikes given for maturity {_fmt(t)}")
            if any(k < 0 for k in ks):
                _fail("Strike price cannot be negative")

        self._maturities = maturities
        self._strikes = strikes

        self._timeline = maturities
        self._dataline = tuple(
            SimulationRequirement(numeraire=True, forward_mats=(t,))
            for t in maturities
        )
        self._labels = tuple(
            f"call {_fmt(t)} {_fmt(k)}"
            for t, ks in zip(maturities, strikes)
            for k in ks
        )
        logger.debug(
            "Europeans: {} maturities, {} options", len(maturities), len(self._labels)
        )

    @property
    def maturities(self) -> Tuple[Time, ...]:
        return self._maturities

    @property
    def strikes(self) -> Tuple[Tuple[float, ...], ...]:
        return self._strikes

    def _evaluate(self, path, out):
        j = 0
        for scen, ks in zip(path, self._strikes):
            spot = scen.forwards[0]
            num = scen.numeraire
            for k in ks:
                out[j] = positive_part(spot - k) / num
                j += 1
