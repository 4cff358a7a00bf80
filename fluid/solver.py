"""
solver.py — Fixed-Iteration Gauss-Seidel Relaxation
====================================================
A tiny, generic relaxation engine for a small system of coupled unknowns.

Each unknown i has an EQUATION: given the whole current vector of unknowns,
it returns the next value for unknown i. One sweep walks the unknowns in
order and overwrites each one IN PLACE:

    for i in range(m):
        values[i] = equations[i](values)

so unknown 2 already sees the fresh values of unknowns 0 and 1 from the
same sweep. That is Gauss-Seidel, not Jacobi (Jacobi would ping-pong
between two buffers and only see last sweep's values).

There is no convergence test. The engine always runs exactly `iterations`
sweeps, so the cost of a frame is fixed and known in advance.

The unknowns don't have to be Python floats. Anything that supports + and *
works, including numpy arrays: diffuse.py hands in one array per unknown
and relaxes every cell's (independent) system in a single call.
"""

import numpy as np


class GaussSeidelEquation:
    """
    An evaluator paired with its fixed arguments.

    The evaluator has the shape f(values, args) -> next value. Keeping the
    arguments separate lets one evaluator (e.g. value_after_diffusion) serve
    many equations that differ only in their constants.
    """

    __slots__ = ("function", "args")

    def __init__(self, function, args=None):
        self.function = function
        self.args = args

    def __call__(self, values):
        return self.function(values, self.args)

    def __repr__(self):
        name = getattr(self.function, "__name__", repr(self.function))
        return f"GaussSeidelEquation({name}, {self.args!r})"


def gauss_seidel(equations, initial_values, iterations: int) -> list:
    """
    Run a fixed number of Gauss-Seidel sweeps.

    Args:
        equations      : One callable per unknown, each taking the full
                         current vector and returning that unknown's next value
        initial_values : Starting guess, same length as equations (not modified)
        iterations     : Number of sweeps, run unconditionally

    Returns:
        The vector after the last sweep (a new list)
    """
    if len(equations) != len(initial_values):
        raise ValueError(
            f"Got {len(equations)} equations for {len(initial_values)} unknowns"
        )
    if iterations < 0:
        raise ValueError(f"Iteration count must be non-negative, got {iterations}")

    values = list(initial_values)
    for _ in range(iterations):
        for i, equation in enumerate(equations):
            values[i] = equation(values)
    return values


# ── Diffusion equations ──────────────────────────────────────────────────────

class DiffusionArgs:
    """Constants for one diffusion equation: a fixed source value and stiffness k."""

    __slots__ = ("value", "k")

    def __init__(self, value, k: float):
        self.value = value
        self.k = k

    def __repr__(self):
        return f"DiffusionArgs(value={self.value!r}, k={self.k!r})"


def value_after_diffusion(values, args: DiffusionArgs):
    """
    Implicit diffusion update for one value:

        (c + k * mean(v0, v1, v2, v3)) / (1 + k)

    where c is the fixed source value and v the four coupled unknowns.
    A uniform field c is a fixed point, and k = 0 returns c exactly.
    """
    k = args.k
    return (args.value + k * (values[0] + values[1] + values[2] + values[3]) / 4.0) / (1.0 + k)


def zeros_like_unknowns(count: int, like=None) -> list:
    """Zero starting guess: `count` floats, or `count` arrays shaped like `like`."""
    if like is None:
        return [0.0] * count
    return [np.zeros_like(like, dtype=np.float64) for _ in range(count)]
