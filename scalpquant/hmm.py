"""Gaussian hidden Markov model for filtering market regimes."""

from __future__ import annotations

import math
from collections.abc import Sequence

from scalpquant.regime import Regime


def _gaussian_likelihood(x: float, mean: float, std: float) -> float:
    std = max(std, 1e-9)
    z = (x - mean) / std
    return math.exp(-0.5 * z * z) / (std * math.sqrt(2.0 * math.pi))


def _normalize(values: Sequence[float]) -> list[float]:
    def usable(x: float) -> bool:
        return math.isfinite(x) and x > 0.0

    total = sum(x for x in values if usable(x))
    if total <= 0.0:
        return [1.0 / len(values)] * len(values)
    return [x / total if usable(x) else 0.0 for x in values]


class HmmRegimeModel:
    """Forward-filtering HMM with one Gaussian emission per regime."""

    def __init__(
        self,
        states: Sequence[Regime],
        transition: Sequence[Sequence[float]],
        emission_mean: Sequence[float],
        emission_std: Sequence[float],
        prior: Sequence[float],
    ) -> None:
        n = len(states)
        if (
            n == 0
            or len(transition) != n
            or any(len(row) != n for row in transition)
            or len(emission_mean) != n
            or len(emission_std) != n
            or len(prior) != n
        ):
            raise ValueError("HMM parameters must all match the number of states")
        self.states = tuple(states)
        self.transition = tuple(tuple(row) for row in transition)
        self.emission_mean = tuple(emission_mean)
        self.emission_std = tuple(emission_std)
        self.prior = tuple(_normalize(prior))

    def infer(self, observations: Sequence[float]) -> list[tuple[Regime, float]]:
        """Filtered probability of each regime after the observations."""
        probs = list(self.prior)
        n = len(self.states)
        for obs in observations:
            step = [
                sum(probs[src] * self.transition[src][dst] for src in range(n))
                * _gaussian_likelihood(obs, self.emission_mean[dst], self.emission_std[dst])
                for dst in range(n)
            ]
            probs = _normalize(step)
        return list(zip(self.states, probs))

    def most_likely(self, observations: Sequence[float]) -> tuple[Regime, float] | None:
        """The regime with the highest filtered probability (last one on ties)."""
        best: tuple[Regime, float] | None = None
        for candidate in self.infer(observations):
            if best is None or not candidate[1] < best[1]:
                best = candidate
        return best