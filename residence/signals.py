"""Domain events emitted by the allotment workflow.

Receivers are dispatched with ``send_robust`` once the surrounding
transaction commits, so a failing subscriber never changes the outcome of
the operation that emitted the event.
"""

import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Sent with ``allotment``.
allotment_created = Signal()
# Sent with ``allotment`` and ``bulk`` (True when cleared with the whole room).
allotment_vacated = Signal()
# Sent with ``application`` and ``decision``.
application_reviewed = Signal()
# Sent with ``hostel_id`` and ``hostel_name``.
hostel_deleted = Signal()


def emit(signal: Signal, sender, **kwargs) -> None:
    def _dispatch():
        for receiver, response in signal.send_robust(sender=sender, **kwargs):
            if isinstance(response, Exception):
                logger.error(
                    "Event subscriber %r failed: %s",
                    receiver,
                    response,
                    exc_info=(type(response), response, response.__traceback__),
                )

    transaction.on_commit(_dispatch)
