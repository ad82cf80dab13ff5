"""Strategy-agnostic opportunity ranking."""

from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def value_of(opportunity) -> float:
    """Default ranking key: the opportunity's ``value`` metric."""
    return float(opportunity.value)


def rank(
    opportunities: Iterable[T],
    max_results: Optional[int] = None,
    key: Callable[[T], float] = value_of,
) -> List[T]:
    """
    Order opportunities by descending value.

    The sort is stable, so equal values keep their scan order.

    Args:
        opportunities: Opportunities in scan order
        max_results: Keep at most this many (None keeps all)
        key: Numeric value projection

    Returns:
        Ranked opportunities
    """
    ranked = sorted(opportunities, key=key, reverse=True)

    if max_results is not None:
        ranked = ranked[:max(max_results, 0)]

    return ranked
