"""
Monte Carlo Product Library

Products for an AAD-enabled Monte Carlo engine: each product declares the
dates and market observables to simulate, and evaluates its payoffs on a
simulated path in any numeric type (float or torch tensor).
"""

from .errors import PathMismatchError, PayoffBufferError, ProductConfigError, ProductError
from .exotics import ContingentBond, UOC
from .pricing import MonteCarloEngine, PricingResult
from .products import European, Europeans, Product, ProductKind
from .simulation import (
    RateDef,
    ScenarioEntry,
    SimulationRequirement,
    allocate_path,
    check_path,
)

__all__ = [
    "Product",
    "ProductKind",
    "European",
    "Europeans",
    "UOC",
    "ContingentBond",
    "RateDef",
    "SimulationRequirement",
    "ScenarioEntry",
    "allocate_path",
    "check_path",
    "MonteCarloEngine",
    "PricingResult",
    "ProductError",
    "ProductConfigError",
    "PathMismatchError",
    "PayoffBufferError",
]
