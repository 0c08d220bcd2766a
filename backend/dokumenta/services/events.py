"""In-process domain events emitted by the document lifecycle."""
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentEvent:
    """Something happened to a document owned by an end user."""
    document_id: int
    tenant_id: int
    user_id: int
    original_name: str
    document_type: str


@dataclass(frozen=True)
class DocumentUploaded(DocumentEvent):
    pass


@dataclass(frozen=True)
class DocumentStatusChanged(DocumentEvent):
    old_status: str | None
    new_status: str
    changed_by: int
    comment: str | None = None


@dataclass(frozen=True)
class DocumentSynced(DocumentEvent):
    path: str


Handler = Callable[[DocumentEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe.
    
    Subscribers run after the publisher has committed its own work. A
    failing subscriber is logged and skipped so it can never undo the
    change that produced the event.
    """

    def __init__(self):
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: DocumentEvent) -> None:
        for event_type, handlers in self._handlers.items():
            if not isinstance(event, event_type):
                continue
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        f"Handler {getattr(handler, '__qualname__', handler)} failed for "
                        f"{type(event).__name__} on document {event.document_id}"
                    )
