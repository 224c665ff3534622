"""Statistical significance tests for win rates and signal ICs."""

from __future__ import annotations

from collections.abc import Sequence

from scalpquant.ic import pearson


def binomial_probability(n: int, k: int, p: float) -> float | None:
    """P(X = k) for X ~ Binomial(n, p), or None for invalid arguments."""
    if k > n or not 0.0 <= p <= 1.0:
        return None
    k_small = min(k, n - k)
    coeff = 1.0
    for i in range(k_small):
        coeff *= (n - i) / (i + 1)
    return coeff * p**k * (1.0 - p) ** (n - k)


def win_rate_significance(wins: int, total: int) -> float | None:
    """Two-sided binomial p-value against a 50% win rate."""
    if total == 0 or wins > total:
        return None
    observed = max(wins, total - wins)
    tail = 0.0
    for k in range(observed, total + 1):
        prob = binomial_probability(total, k, 0.5)
        if prob is None:
            return None
        tail += prob
    return min(tail * 2.0, 1.0)


def _rotate_returns(values: list[tuple[float, float]], shift: int) -> None:
    n = len(values)
    if n == 0:
        return
    returns = [r for _, r in values]
    values[:] = [(s, returns[(i + shift) % n]) for i, (s, _) in enumerate(values)]


def permutation_p_value(
    observations: Sequence[tuple[float, float]], permutations: int
) -> float | None:
    """P-value of the observed |IC| against cyclic shifts of the returns."""
    if len(observations) < 4 or permutations == 0:
        return None
    observed_ic = pearson(observations)
    if observed_ic is None:
        return None
    observed = abs(observed_ic)
    shuffled = list(observations)
    extreme = 0
    for step in range(permutations):
        _rotate_returns(shuffled, step + 1)
        ic = pearson(shuffled)
        if abs(ic if ic is not None else 0.0) >= observed:
            extreme += 1
    return (extreme + 1.0) / (permutations + 1.0)