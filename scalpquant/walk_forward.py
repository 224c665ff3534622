"""Rolling train/test splits for walk-forward validation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WalkForwardSplit:
    """Half-open index ranges of a training window and the test window after it."""

    train_start: int
    train_end: int
    test_start: int
    test_end: int


def walk_forward_splits(
    length: int, train_window: int, test_window: int, step: int
) -> list[WalkForwardSplit]:
    """Every split that fits in ``length`` items, advancing by ``step``."""
    if length <= 0 or train_window <= 0 or test_window <= 0 or step <= 0:
        return []
    last_start = length - train_window - test_window
    return [
        WalkForwardSplit(
            train_start=start,
            train_end=start + train_window,
            test_start=start + train_window,
            test_end=start + train_window + test_window,
        )
        for start in range(0, last_start + 1, step)
    ]