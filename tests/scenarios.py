"""
Scenario fixtures standing in for the external simulation engine.

GBMScenarioGenerator simulates a flat-rate Black-Scholes world and
realizes any product dataline:

    spot        S(t) = S(0) * exp((r - sigma^2/2) t + sigma W(t))
    forward     F(t, T) = S(t) * exp(r (T - t))
    discount    P(t, T) = exp(-r (T - t))
    libor       L(t; T1, T2) = (exp(r (T2 - T1)) - 1) / (T2 - T1)
    numeraire   N(t) = exp(r t), the bank account
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

import numpy as np

from mcproducts.simulation import ScenarioPath, SimulationRequirement, allocate_path


@dataclass
class GBMParameters:
    """Parameters for Geometric Brownian Motion simulation."""

    s0: float  # Initial stock price
    sigma: float  # Volatility (annualized)
    r: float = 0.0  # Risk-free rate

    def __post_init__(self):
        if self.s0 <= 0:
            raise ValueError("Initial stock price must be positive")
        if self.sigma < 0:
            raise ValueError("Volatility cannot be negative")


class GBMScenarioGenerator:
    """Risk-neutral GBM paths on an arbitrary product timeline."""

    def __init__(self, params: GBMParameters, seed: Optional[int] = None):
        self.params = params
        self.rng = np.random.default_rng(seed)

    def simulate_spots(self, timeline: Sequence[float], n_paths: int) -> np.ndarray:
        """
        Simulate spots on the timeline.

        Returns:
            Array of spots with shape (n_paths, len(timeline))
        """
        r, sigma = self.params.r, self.params.sigma
        dt = np.diff(np.concatenate([[0.0], np.asarray(timeline, dtype=float)]))

        z = self.rng.standard_normal((n_paths, len(timeline)))
        log_returns = (r - 0.5 * sigma**2) * dt + sigma * np.sqrt(dt) * z

        return self.params.s0 * np.exp(np.cumsum(log_returns, axis=1))

    def generate(
        self,
        timeline: Sequence[float],
        dataline: Sequence[SimulationRequirement],
        n_paths: int,
    ) -> Iterator[ScenarioPath]:
        """Yield n_paths paths; the same path object is refilled each time."""
        r = self.params.r
        spots = self.simulate_spots(timeline, n_paths)
        path = allocate_path(dataline)

        for row in spots:
            for entry, req, t, s in zip(path, dataline, timeline, row):
                entry.forwards[:] = [float(s * np.exp(r * (T - t))) for T in req.forward_mats]
                entry.discounts[:] = [float(np.exp(-r * (T - t))) for T in req.discount_mats]
                entry.libors[:] = [
                    float((np.exp(r * (d.end - d.start)) - 1.0) / (d.end - d.start))
                    for d in req.libor_defs
                ]
                entry.numeraire = float(np.exp(r * t))
            yield path


Value = Union[float, Sequence[float]]


def _at(value, i):
    return value[i] if isinstance(value, (list, tuple)) else value


def fill_path(
    dataline: Sequence[SimulationRequirement],
    spots: Sequence,
    numeraire: Value = 1.0,
    discount: Value = 1.0,
    libor: Value = 0.0,
) -> ScenarioPath:
    """
    Hand-built path: every requested observable at index i gets the value
    given for i (or the scalar given for all indices).
    """
    path = allocate_path(dataline)
    for i, entry in enumerate(path):
        entry.forwards[:] = [spots[i]] * len(entry.forwards)
        entry.discounts[:] = [_at(discount, i)] * len(entry.discounts)
        entry.libors[:] = [_at(libor, i)] * len(entry.libors)
        entry.numeraire = _at(numeraire, i)
    return path
