"""
Unit of Work Pattern

Manages database transactions and row locks, and ensures that domain
events are published only after a successful transaction commit.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction
from django.db.utils import NotSupportedError

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


def lock_for_update(queryset, *, skip_locked: bool = False):
    """
    Apply select_for_update when inside transaction.atomic()

    SQLite has no row locks, so the queryset is returned unchanged there.
    Mutual exclusion on SQLite comes from the connection's IMMEDIATE
    transaction mode (see DATABASES in config.settings): every atomic()
    block takes the database write lock at BEGIN, and a concurrent writer
    waits for it before reading.
    """
    connection = transaction.get_connection(queryset.db)
    if not connection.in_atomic_block:
        return queryset
    if not connection.features.has_select_for_update:
        return queryset

    if skip_locked and not connection.features.has_select_for_update_skip_locked:
        skip_locked = False

    try:
        return queryset.select_for_update(skip_locked=skip_locked)
    except NotSupportedError:
        return queryset


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
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def record(self, event: DomainEvent):
        """Record an event to publish after commit"""
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Wraps one transaction.atomic() block. Rows locked through lock() or
    lock_one() stay locked until the block exits; any exception raised
    inside the block rolls back every write made in it.

    Usage:
        with DjangoUnitOfWork() as uow:
            # Lock the row that serializes concurrent writers
            resource = uow.lock_one(Resource.objects.filter(pk=resource_id))

            # Execute domain logic and record what happened
            booking = Booking.objects.create(...)
            uow.record(BookingConfirmed(...))

            # Transaction commits here
        # Events are published after commit
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def lock(self, queryset, *, skip_locked: bool = False):
        """Return the queryset with a pessimistic row lock applied"""
        return lock_for_update(queryset, skip_locked=skip_locked)

    def lock_one(self, queryset, *, skip_locked: bool = False):
        """Lock and return the first row of the queryset, or None"""
        return self.lock(queryset, skip_locked=skip_locked).first()

    def commit(self):
        """
        Schedule event publishing

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after database commit succeeds.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        """Discard events; the atomic block rolls the writes back"""
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def record(self, event: DomainEvent):
        self._events.append(event)

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit.
        """
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")

        try:
            message_bus.publish_events(events)
        except Exception as e:
            # The transaction is already committed at this point
            logger.error(f"Error publishing events: {e}", exc_info=True)
