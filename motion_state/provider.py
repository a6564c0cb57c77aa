"""Location providers: the source side of the sample stream.

A provider owns authorization and the on/off switch for location updates and
pushes results to a delegate (normally a LocationMotionMonitor). Platform
bindings implement LocationProvider; ReplayLocationProvider feeds recorded
samples through the same callbacks for the CLI, the Streamlit page and tests.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Protocol, Sequence

from motion_state.models import Sample

logger = logging.getLogger(__name__)


class AuthorizationStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"

    @property
    def is_authorized(self) -> bool:
        return self in (AuthorizationStatus.AUTHORIZED_WHEN_IN_USE, AuthorizationStatus.AUTHORIZED_ALWAYS)


class LocationDelegate(Protocol):
    def location_did_change_authorization(self, status: AuthorizationStatus) -> None: ...

    def location_did_update(self, samples: Sequence[Sample]) -> None: ...

    def location_did_fail(self, error: Exception) -> None: ...


class LocationProvider(Protocol):
    delegate: LocationDelegate | None

    @property
    def authorization_status(self) -> AuthorizationStatus: ...

    def request_when_in_use_authorization(self) -> None: ...

    def start_updating(self) -> None: ...

    def stop_updating(self) -> None: ...


class ReplayLocationProvider:
    """Deliver a recorded sample sequence as if it came from a live provider.

    Args:
        samples: Samples to replay, in delivery order.
        initial_status: Authorization status before any request.
        grant: Status that a pending authorization request resolves to.
    """

    def __init__(
        self,
        samples: Iterable[Sample],
        initial_status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
        grant: AuthorizationStatus = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
    ) -> None:
        self.delegate: LocationDelegate | None = None
        self._samples = list(samples)
        self._cursor = 0
        self._status = initial_status
        self._grant = grant
        self.updating = False

    @property
    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._samples)

    def request_when_in_use_authorization(self) -> None:
        if self._status is not AuthorizationStatus.NOT_DETERMINED:
            return
        self.set_authorization(self._grant)

    def set_authorization(self, status: AuthorizationStatus) -> None:
        """Simulate the user (or the system) changing the permission."""

        self._status = status
        if self.delegate is not None:
            self.delegate.location_did_change_authorization(status)

    def start_updating(self) -> None:
        self.updating = True

    def stop_updating(self) -> None:
        self.updating = False

    def pump(self, batch_size: int = 1) -> int:
        """Deliver the next batch of samples to the delegate.

        Nothing is delivered while updates are stopped.

        Returns:
            Number of samples delivered.
        """

        if not self.updating or self.exhausted or self.delegate is None:
            return 0
        batch = self._samples[self._cursor : self._cursor + max(1, batch_size)]
        self._cursor += len(batch)
        self.delegate.location_did_update(batch)
        return len(batch)

    def fail(self, error: Exception) -> None:
        """Report a provider failure to the delegate."""

        if self.delegate is not None:
            self.delegate.location_did_fail(error)
