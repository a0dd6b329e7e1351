"""
Unit of Work Pattern

Wraps a database transaction and publishes domain events only after
the transaction commits.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        pass

    @abstractmethod
    def rollback(self):
        pass

    @abstractmethod
    def add_event(self, event: DomainEvent):
        pass

    def collect_events(self, aggregate):
        """Move the events recorded by an aggregate root into this unit of work"""
        new_events = aggregate.events
        if not new_events:
            return
        for event in new_events:
            self.add_event(event)
        aggregate.clear_events()
        logger.debug(
            "Collected %d events from %s (ID: %s)",
            len(new_events), aggregate.__class__.__name__, aggregate.id,
        )


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            reservation = ...            # ORM work inside transaction.atomic()
            uow.add_event(ReservationCreated(...))
        # events are published through transaction.on_commit()

    Nested inside an outer atomic block the unit of work becomes a
    savepoint and its events wait for the outermost commit.
    """

    def __init__(self, using=None):
        self._events: List[DomainEvent] = []
        self._transaction = transaction.atomic(using=using)
        self._using = using

    def __enter__(self):
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def add_event(self, event: DomainEvent):
        self._events.append(event)

    def commit(self):
        logger.debug("Committing transaction with %d events", len(self._events))
        events = self._events.copy()
        self._events.clear()
        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)

    def rollback(self):
        if self._events:
            logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info("Publishing %d domain events after commit", len(events))
        try:
            message_bus.publish_events(events)
        except Exception:
            # the data is already committed; a failed publish must not surface as a failed write
            logger.exception("Error publishing events")
