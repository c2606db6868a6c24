"""
Exceptions raised by the order analytics pipeline.
"""


class AnalyticsError(Exception):
    """Base class for analytics errors."""


class InvalidFilterKind(AnalyticsError, ValueError):
    """An unrecognized filter selector was supplied."""

    def __init__(self, kind, allowed):
        self.kind = kind
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unknown filter '{kind}', expected one of: {', '.join(self.allowed)}"
        )


class MalformedLineItem(AnalyticsError, ValueError):
    """A line item is missing a required field or has a non-numeric value."""

    def __init__(self, order_id, index, reason):
        self.order_id = order_id
        self.index = index
        self.reason = reason
        super().__init__(f"Order {order_id}, line item {index}: {reason}")


class DataLoadError(AnalyticsError):
    """Orders, food items or customers could not be fetched or decoded."""
