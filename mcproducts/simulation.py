"""
Requirements a product declares to the simulation engine, and the
scenarios the engine hands back.

A product owns a timeline (the dates the engine must stop at) and a
dataline (one SimulationRequirement per timeline date). The engine
realizes the dataline as a ScenarioPath: one ScenarioEntry per date,
holding exactly the observables requested at that date, in the order
they were requested.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from loguru import logger

from .errors import PathMismatchError
from .numeric import Real

# Year fraction
Time = float


@dataclass(frozen=True)
class RateDef:
    """Floating rate fixing between two dates, e.g. a libor."""

    start: Time
    end: Time
    name: str


@dataclass(frozen=True)
class SimulationRequirement:
    """
    Observables the engine must compute at one timeline date.

    Attributes:
        numeraire: Whether the numeraire is needed at this date
        forward_mats: Maturities of the forwards to observe, forward(t, T)
        discount_mats: Maturities of the discount factors to observe
        libor_defs: Floating rates to observe
    """

    numeraire: bool = False
    forward_mats: Tuple[Time, ...] = ()
    discount_mats: Tuple[Time, ...] = ()
    libor_defs: Tuple[RateDef, ...] = ()


@dataclass
class ScenarioEntry:
    """Simulated observables at one timeline date."""

    forwards: List[Real] = field(default_factory=list)
    discounts: List[Real] = field(default_factory=list)
    libors: List[Real] = field(default_factory=list)
    numeraire: Real = 1.0


ScenarioPath = List[ScenarioEntry]


def allocate_path(dataline: Sequence[SimulationRequirement]) -> ScenarioPath:
    """
    Pre-allocate a path for the given dataline.

    Engines fill the returned path in place for every simulated scenario,
    so allocation happens once per product rather than once per path.
    """
    return [
        ScenarioEntry(
            forwards=[0.0] * len(req.forward_mats),
            discounts=[0.0] * len(req.discount_mats),
            libors=[0.0] * len(req.libor_defs),
        )
        for req in dataline
    ]


def check_path(
    dataline: Sequence[SimulationRequirement],
    path: Sequence[ScenarioEntry],
) -> None:
    """
    Verify that path realizes dataline index for index.

    Raises:
        PathMismatchError: On a length mismatch, or when an entry holds
            more or fewer observables than requested at its index
    """
    if len(path) != len(dataline):
        msg = f"Path has {len(path)} entries, dataline has {len(dataline)}"
        logger.error(msg)
        raise PathMismatchError(msg)

    for i, (req, entry) in enumerate(zip(dataline, path)):
        for what, got, wanted in (
            ("forwards", len(entry.forwards), len(req.forward_mats)),
            ("discounts", len(entry.discounts), len(req.discount_mats)),
            ("libors", len(entry.libors), len(req.libor_defs)),
        ):
            if got != wanted:
                msg = f"Entry {i} has {got} {what}, {wanted} requested"
                logger.error(msg)
                raise PathMismatchError(msg)
