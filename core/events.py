# core/events.py
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

ALL_TABLES = "*"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event: str          # insert, update or delete
    row_id: Optional[str] = None


Listener = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """Synchronous table-change channel.

    Services publish after a successful commit; catalog and report readers
    subscribe to re-read. Listeners run in the publisher's thread, in
    subscription order.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, table: str, callback: Listener) -> Callable[[], None]:
        """Register a callback for changes to a table ('*' for every table).

        Returns:
            A function that removes the subscription when called
        """
        self._listeners[table].append(callback)

        def unsubscribe() -> None:
            try:
                self._listeners[table].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, table: str, event: str, row_id: Optional[str] = None) -> None:
        change = ChangeEvent(table=table, event=event, row_id=row_id)
        for callback in list(self._listeners.get(table, [])) + list(self._listeners.get(ALL_TABLES, [])):
            try:
                callback(change)
            except Exception:
                logger.exception(f"Change listener failed for {table}/{event}")

    def listener_count(self, table: Optional[str] = None) -> int:
        if table is None:
            return sum(len(callbacks) for callbacks in self._listeners.values())
        return len(self._listeners.get(table, []))


# Process-wide notifier shared by the API and CLI
notifier = ChangeNotifier()
