"""Glue between a location provider, the classifier and a UI consumer."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from motion_state.classifier import ClassifierConfig, Listener, MotionClassifier
from motion_state.dispatch import Dispatcher, ImmediateDispatcher
from motion_state.models import Sample
from motion_state.provider import AuthorizationStatus, LocationProvider

logger = logging.getLogger(__name__)


class LocationMotionMonitor:
    """Drive a MotionClassifier from a location provider.

    The monitor is the provider's delegate. State changes computed by the
    classifier are re-published through the dispatcher, so `is_moving` and
    the listeners registered here only ever change on the consumer's side of
    the hand-off.
    """

    def __init__(
        self,
        provider: LocationProvider,
        config: ClassifierConfig | None = None,
        dispatcher: Dispatcher | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.provider = provider
        self.classifier = MotionClassifier(config=config or ClassifierConfig(), clock=clock)
        self.dispatcher: Dispatcher = dispatcher or ImmediateDispatcher()
        self.is_moving = False
        self._listeners: list[Listener] = []
        self.classifier.subscribe(self._on_classifier_change)
        provider.delegate = self

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called (via the dispatcher) on every published change."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # control hooks

    def request_authorization(self) -> None:
        if self.provider.authorization_status is AuthorizationStatus.NOT_DETERMINED:
            logger.info("requesting when-in-use location authorization")
            self.provider.request_when_in_use_authorization()

    def start(self) -> None:
        status = self.provider.authorization_status
        if status.is_authorized:
            logger.info("starting location updates (%s)", status.value)
            self.provider.start_updating()
        else:
            logger.info("not starting location updates: authorization=%s", status.value)

    def stop(self) -> None:
        self.provider.stop_updating()

    # provider delegate callbacks

    def location_did_change_authorization(self, status: AuthorizationStatus) -> None:
        if status.is_authorized:
            self.start()
            return
        logger.info("location authorization is %s; assuming stationary", status.value)
        self.stop()
        self.classifier.force_stationary()

    def location_did_update(self, samples: Sequence[Sample]) -> None:
        if not samples:
            return
        self.classifier.process(samples[-1])

    def location_did_fail(self, error: Exception) -> None:
        logger.warning("location provider failed: %s; assuming stationary", error)
        self.classifier.force_stationary()

    def _on_classifier_change(self, value: bool) -> None:
        self.dispatcher.dispatch(lambda: self._publish(value))

    def _publish(self, value: bool) -> None:
        if self.is_moving == value:
            return
        self.is_moving = value
        for listener in list(self._listeners):
            listener(value)
