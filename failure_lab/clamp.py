"""
Failure Lab - Clamp Policy.

============================================================
PURPOSE
============================================================
Single enforcement point for metric domains.

Every field is clamped independently with saturating
min/max. Fields are never renormalized against each other.
Clamping is pure, total and idempotent.

============================================================
"""

from typing import Dict

from .models import METRIC_DOMAINS, MetricDomain, MetricSnapshot
from .types import MetricName


def clamp(value: float, lower: float, upper: float) -> float:
    """Saturate value into [lower, upper]."""
    return min(upper, max(lower, value))


def clamp_metric(name: MetricName, value: float) -> float:
    """Clamp a single metric into its declared domain."""
    domain = METRIC_DOMAINS[MetricName(name)]
    return clamp(value, domain.lower, domain.upper)


def clamp_snapshot(snapshot: MetricSnapshot) -> MetricSnapshot:
    """
    Clamp every field of a snapshot into its domain.

    Args:
        snapshot: Possibly out-of-domain snapshot

    Returns:
        Snapshot with every field inside its domain
    """
    return MetricSnapshot(**{
        name.value: clamp_metric(name, snapshot.get(name))
        for name in MetricName
    })


def out_of_domain_fields(snapshot: MetricSnapshot) -> Dict[str, MetricDomain]:
    """Fields of snapshot lying outside their domain."""
    return {
        name.value: domain
        for name, domain in METRIC_DOMAINS.items()
        if not domain.contains(snapshot.get(name))
    }


def is_within_domain(snapshot: MetricSnapshot) -> bool:
    """Check that every field lies inside its domain."""
    return not out_of_domain_fields(snapshot)
