"""
Numeric value abstraction shared by all payoff formulas.

Payoffs are written against a small capability set: +, -, *, /,
comparison against a plain real, and materialization to a plain real.
Two realizations are supported:

    float          valuation only
    torch.Tensor   scalar tensor with requires_grad=True, valuation plus
                   reverse-mode derivatives through torch.autograd

Product code never inspects which one it received.
"""

from typing import Protocol, Union

import torch


class Number(Protocol):
    """Capability set a payoff formula may rely on."""

    def __add__(self, other): ...

    def __radd__(self, other): ...

    def __sub__(self, other): ...

    def __rsub__(self, other): ...

    def __mul__(self, other): ...

    def __rmul__(self, other): ...

    def __truediv__(self, other): ...

    def __rtruediv__(self, other): ...

    def __gt__(self, other: float) -> bool: ...

    def __lt__(self, other: float) -> bool: ...


Real = Union[float, Number]


def to_real(x: Real) -> float:
    """
    Materialize a numeric value to a plain float.

    For a differentiable value the result is detached: it carries the
    value only and takes no part in derivative propagation.
    """
    if isinstance(x, torch.Tensor):
        return float(x.detach().item())
    return float(x)


def positive_part(x: Real) -> Real:
    """max(x, 0), kept in the numeric type of x."""
    if x > 0.0:
        return x
    # zero in the type of x
    return x * 0.0

