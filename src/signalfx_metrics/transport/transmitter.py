"""HTTP delivery of datapoint batches for signalfx-metrics.

One POST per batch, one attempt per batch per cycle.  The response is
mapped onto the transmit error taxonomy:

- 2xx                         -> success, returns the batch size
- 4xx                         -> ``RejectedError``
- 5xx, timeout, network error -> ``UnavailableError``
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from signalfx_metrics.schema.config import ReportingConfig
from signalfx_metrics.schema.errors import RejectedError, UnavailableError
from signalfx_metrics.schema.snapshot import Datapoint
from signalfx_metrics.transport.serializer import CONTENT_TYPE, encode_batch

logger = logging.getLogger(__name__)

TOKEN_HEADER: str = "X-SF-TOKEN"


def _user_agent() -> str:
    from signalfx_metrics import __version__

    return f"signalfx-metrics/{__version__}"


class HttpTransmitter:
    """Sends batches to a SignalFx-style ingestion endpoint.

    Parameters
    ----------
    config:
        Resolved reporting configuration; supplies URL, token and timeout.
    client:
        Optional pre-built ``httpx.Client``.  When omitted one is created and
        owned by the transmitter; an injected client is left open by
        :meth:`close`.

    Examples
    --------
    >>> cfg = ReportingConfig(api_token="t", default_source="h")
    >>> with HttpTransmitter(cfg) as transmitter:
    ...     transmitter.url
    'https://ingest.signalfx.com/v2/datapoint'
    """

    def __init__(self, config: ReportingConfig, client: httpx.Client | None = None) -> None:
        self._url = config.datapoint_url
        self._headers = {
            TOKEN_HEADER: config.api_token,
            "Content-Type": CONTENT_TYPE,
            "User-Agent": _user_agent(),
        }
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=config.timeout_seconds)

    @property
    def url(self) -> str:
        return self._url

    def send(self, batch: Sequence[Datapoint]) -> int:
        """POST *batch* once and return the number of datapoints delivered.

        Raises
        ------
        RejectedError
            The endpoint answered 4xx.
        UnavailableError
            The endpoint answered 5xx, or the request failed or timed out.
        """
        size = len(batch)
        body = encode_batch(batch)
        try:
            response = self._client.post(self._url, content=body, headers=self._headers)
        except httpx.TimeoutException as exc:
            raise UnavailableError(
                f"Timed out sending {size} datapoints to {self._url}",
                batch_size=size,
                context={"url": self._url},
            ) from exc
        except httpx.HTTPError as exc:
            raise UnavailableError(
                f"Could not send {size} datapoints to {self._url}: {exc}",
                batch_size=size,
                context={"url": self._url},
            ) from exc

        status = response.status_code
        if 200 <= status < 300:
            logger.debug("Sent %d datapoints to %s (HTTP %d)", size, self._url, status)
            return size
        if 400 <= status < 500:
            raise RejectedError(
                f"HTTP {status} from {self._url}: payload or token rejected",
                batch_size=size,
                status_code=status,
                context={"url": self._url, "body": response.text[:200]},
            )
        raise UnavailableError(
            f"HTTP {status} from {self._url}",
            batch_size=size,
            status_code=status,
            context={"url": self._url},
        )

    def close(self) -> None:
        """Close the underlying client if this transmitter created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpTransmitter":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"HttpTransmitter(url={self._url!r})"
