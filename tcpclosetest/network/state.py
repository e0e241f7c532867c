import logging
import threading
from enum import Enum
from typing import Optional


class StateTracker:
    """Current state of a run, observable from other threads.

    Tests drive a server in a background thread and wait for it to reach
    LISTENING before starting a client, instead of sleeping.
    """

    def __init__(self, initial: Enum):
        self._state = initial
        self._history = [initial]
        self._condition = threading.Condition()
        self.logger = logging.getLogger(type(self).__module__)

    @property
    def state(self) -> Enum:
        """Get the current state."""
        with self._condition:
            return self._state

    @property
    def history(self) -> list:
        """Every state reached so far, in order."""
        with self._condition:
            return list(self._history)

    def _set_state(self, state: Enum) -> None:
        with self._condition:
            self.logger.debug(f"State {self._state.name} -> {state.name}")
            self._state = state
            self._history.append(state)
            self._condition.notify_all()

    def wait_for_state(self, state: Enum, timeout: Optional[float] = None) -> bool:
        """Block until the given state has been reached.

        Returns False if the timeout expires first.
        """
        with self._condition:
            return self._condition.wait_for(lambda: state in self._history, timeout)
