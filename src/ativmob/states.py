"""Remote list of Brazilian states (IBGE localidades API).

Endpoint: ``GET /api/v1/localidades/estados``, no authentication, no
query parameters, no pagination.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ativmob._constants import STATES_URL
from ativmob._transport import Transport
from ativmob.exceptions import DecodeError
from ativmob.models.states import STATE_LIST_ADAPTER, BrazilianState

_logger = logging.getLogger(__name__)


def parse_states(payload: Any, *, url: str = "") -> list[BrazilianState]:
    """Decode the JSON array returned by the endpoint.

    ``[]`` is a valid, empty result.  Anything that is not an array, or
    an array holding a malformed entry, raises :class:`DecodeError`.
    """
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array of states, got {type(payload).__name__}", url=url)
    try:
        return STATE_LIST_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(f"Malformed state record: {exc.errors()[0]['msg']}", url=url) from exc


class StatesSource:
    """Fetch the states list, one independent request per call.

    Concurrent calls are not coalesced; callers that want a single
    in-flight fetch must guard it themselves.
    """

    def __init__(self, transport: Transport, *, url: str = STATES_URL) -> None:
        self._transport = transport
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    async def fetch(self) -> list[BrazilianState]:
        """Return the records in the order the endpoint sent them.

        Raises
        ------
        HttpStatusError
            Non-2xx response.
        DecodeError
            Body is not a JSON array of well-formed records.
        TransportError
            Network failure or timeout.
        """
        payload = await self._transport.get_json(self._url)
        states = parse_states(payload, url=self._url)
        _logger.debug("Fetched %d states from %s", len(states), self._url)
        return states
