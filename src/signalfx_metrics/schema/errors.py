"""Error taxonomy for signalfx-metrics.

All exceptions raised by the reporter derive from ``SignalFxMetricsError``
so that callers can catch the entire family with a single ``except`` clause
while still being able to distinguish individual failure modes.

Shipped in this module
----------------------
- ErrorSeverity         — ordered severity enum
- SignalFxMetricsError  — root exception with severity and context payload
- ConfigurationError    — fatal, raised once at setup
- EnrichmentError       — setup-time source/AWS enrichment failure
- RegistryError         — misuse of the in-process metrics registry
- TransmitError         — per-batch delivery failure, with the two
                          subclasses RejectedError and UnavailableError
"""
from __future__ import annotations

from enum import Enum


class ErrorSeverity(str, Enum):
    """Ordered severity levels for ``SignalFxMetricsError`` instances.

    Severity is advisory metadata only.  It lets logging and alerting
    filter by impact level without changing how exceptions propagate.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class SignalFxMetricsError(Exception):
    """Root exception for all signalfx-metrics failures.

    Parameters
    ----------
    message:
        Human-readable description of what went wrong.
    severity:
        Advisory ``ErrorSeverity`` level.  Defaults to ``HIGH``.
    context:
        Optional dict of structured metadata (URIs, batch sizes, setting
        names) that helps diagnostics without log scraping.

    Examples
    --------
    >>> try:
    ...     raise SignalFxMetricsError("something broke", ErrorSeverity.MEDIUM)
    ... except SignalFxMetricsError as exc:
    ...     print(exc.severity.value)
    medium
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.severity: ErrorSeverity = severity
        self.context: dict[str, object] = context or {}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"message={str(self)!r}, "
            f"severity={self.severity.value!r})"
        )


class ConfigurationError(SignalFxMetricsError):
    """Raised when reporter setup is invalid.

    Examples: missing API token, ``custom`` source type without a value,
    out-of-range interval or batch size, unparseable YAML.
    """


class EnrichmentError(ConfigurationError):
    """Raised when a setup-time enrichment the caller opted into fails.

    The AWS instance-id lookup is the main producer: a caller who asked for
    the ``InstanceId`` dimension gets an error rather than silently missing
    data.
    """


class RegistryError(SignalFxMetricsError):
    """Raised for registry misuse, e.g. re-registering a name as another kind."""


class TransmitError(SignalFxMetricsError):
    """Raised when a single batch could not be delivered.

    Parameters
    ----------
    message:
        Human-readable description.
    batch_size:
        Number of datapoints in the failed batch.
    status_code:
        HTTP status returned by the endpoint, or ``None`` when no response
        was received.
    """

    def __init__(
        self,
        message: str,
        batch_size: int,
        status_code: int | None = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message, severity, context)
        self.batch_size = batch_size
        self.status_code = status_code


class RejectedError(TransmitError):
    """The endpoint refused the payload (4xx): bad request or bad token.

    Retrying the same payload would fail the same way, so it is not retried.
    """


class UnavailableError(TransmitError):
    """The endpoint could not be reached or failed (5xx, network, timeout).

    Transient; the next scheduled cycle re-sends current values.
    """
