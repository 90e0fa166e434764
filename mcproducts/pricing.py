"""
Monte Carlo valuation of products against an external scenario generator.

The generator (model and random numbers) lives outside this package: it
only has to realize a product's dataline, path after path. This module
evaluates the payoffs on those paths and averages them. Payoffs are
already deflated by the numeraire, so the price is the plain average.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence

import numpy as np
from loguru import logger
from scipy.stats import norm

from .numeric import to_real
from .products import Product
from .simulation import ScenarioPath, SimulationRequirement, Time, check_path


class ScenarioGenerator(Protocol):
    """Anything that simulates paths realizing a product's dataline."""

    def generate(
        self,
        timeline: Sequence[Time],
        dataline: Sequence[SimulationRequirement],
        n_paths: int,
    ) -> Iterable[ScenarioPath]: ...


@dataclass
class PricingResult:
    """Result of Monte Carlo pricing for one payoff."""

    label: str  # Payoff label
    price: float  # Estimated value
    std_error: float  # Standard error of the estimate
    n_paths: int  # Number of simulation paths used
    confidence_interval_95: tuple[float, float]  # 95% confidence interval

    def __str__(self) -> str:
        return (
            f"{self.label}: {self.price:.6f} "
            f"(SE: {self.std_error:.6f}, "
            f"95% CI: [{self.confidence_interval_95[0]:.6f}, "
            f"{self.confidence_interval_95[1]:.6f}])"
        )


class MonteCarloEngine:
    """
    Monte Carlo engine for pricing products.

    Prices products by:
    1. Asking the generator for paths realizing the product's dataline
    2. Evaluating every payoff of the product on each path
    3. Averaging across paths

    The price estimate of payoff j is: E[payoff_j / numeraire]
    """

    def __init__(self, generator: ScenarioGenerator, n_paths: int = 100_000):
        """
        Initialize the Monte Carlo pricing engine.

        Args:
            generator: Scenario generator realizing product datalines
            n_paths: Number of Monte Carlo paths (default: 100,000)
        """
        self.generator = generator
        self.n_paths = n_paths

    def simulate_payoffs(
        self,
        product: Product,
        n_paths: Optional[int] = None,
    ) -> np.ndarray:
        """
        Evaluate the product on simulated paths.

        Args:
            product: Product to evaluate
            n_paths: Number of paths (overrides default)

        Returns:
            Array of payoffs with shape (n_paths, len(product.payoff_labels))
        """
        n_paths = n_paths or self.n_paths
        paths = self.generator.generate(product.timeline, product.dataline, n_paths)

        result = np.empty((n_paths, len(product.payoff_labels)))
        buffer = [0.0] * len(product.payoff_labels)
        n = 0
        for path in paths:
            if n == n_paths:
                raise ValueError(f"Generator produced more than {n_paths} paths")
            if n == 0:
                check_path(product.dataline, path)
            product.payoffs(path, buffer)
            result[n] = [to_real(x) for x in buffer]
            n += 1

        if n != n_paths:
            raise ValueError(f"Generator produced {n} paths, {n_paths} requested")
        return result

    def price(
        self,
        product: Product,
        n_paths: Optional[int] = None,
    ) -> List[PricingResult]:
        """
        Price every payoff of a product.

        Args:
            product: Product to price
            n_paths: Number of paths (overrides default)

        Returns:
            One PricingResult per payoff label, in label order
        """
        n_paths = n_paths or self.n_paths
        logger.info("Pricing {!r} over {} paths", product, n_paths)

        payoffs = self.simulate_payoffs(product, n_paths)

        # Compute statistics
        prices = np.mean(payoffs, axis=0)
        std_errors = np.std(payoffs, axis=0, ddof=1) / np.sqrt(n_paths)

        results = []
        for label, price, std_error in zip(product.payoff_labels, prices, std_errors):
            # 95% confidence interval (1.96 standard errors)
            ci_lower = price - 1.96 * std_error
            ci_upper = price + 1.96 * std_error
            results.append(
                PricingResult(
                    label=label,
                    price=float(price),
                    std_error=float(std_error),
                    n_paths=n_paths,
                    confidence_interval_95=(float(ci_lower), float(ci_upper)),
                )
            )
        return results


def black_scholes_call(s0: float, k: float, t: float, r: float, sigma: float) -> float:
    """
    Analytical Black-Scholes price for European call option.

    Useful for validating Monte Carlo results.
    """
    d1 = (np.log(s0 / k) + (r + 0.5 * sigma**2) * t) / (sigma * np.sqrt(t))
    d2 = d1 - sigma * np.sqrt(t)

    return s0 * norm.cdf(d1) - k * np.exp(-r * t) * norm.cdf(d2)
