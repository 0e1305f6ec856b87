"""
Published hand state for the Particle Flow hand tracker.

The tracking session is the only writer; rendering and UI code only read.
Each publish builds a complete immutable snapshot and swaps it in with a
single reference assignment, so a reader never sees a half-updated record.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from .gesture_classifier import GestureType
from .logger import get_logger

logger = get_logger("HandState")

StateCallback = Callable[["HandState"], None]
FlagCallback = Callable[[bool], None]


@dataclass(frozen=True)
class HandPosition:
    """Palm position, each axis in [-1, 1]."""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class HandState:
    """
    Snapshot of the tracked hand.

    Attributes:
        is_hand_detected: Whether a hand is in view.
        hand_tension: 0 = fully open, 1 = closed fist.
        hand_position: Smoothed palm position.
        hand_rotation: Smoothed roll in radians.
        current_gesture: Committed (debounced) gesture.
    """
    is_hand_detected: bool = False
    hand_tension: float = 0.0
    hand_position: HandPosition = field(default_factory=HandPosition)
    hand_rotation: float = 0.0
    current_gesture: GestureType = GestureType.NONE

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase names used by the renderer."""
        return {
            "isHandDetected": self.is_hand_detected,
            "handTension": self.hand_tension,
            "handPosition": {"x": self.hand_position.x, "y": self.hand_position.y},
            "handRotation": self.hand_rotation,
            "currentGesture": self.current_gesture.value,
        }


class StoreWriteError(Exception):
    """Raised when a second writer tries to claim the hand state store."""
    pass


def _notify(callbacks: list, value: Any) -> None:
    """Call every subscriber, logging (not propagating) their errors."""
    for callback in list(callbacks):
        try:
            callback(value)
        except Exception as e:
            logger.error(f"Error in state subscriber: {e}")


class HandStateStore:
    """
    Holds the latest HandState snapshot.

    Readers call `snapshot()` or `subscribe()`. Writing requires the single
    HandStatePublisher handed out by `claim_publisher()`.
    """

    def __init__(self, initial: Optional[HandState] = None):
        self._state = initial or HandState()
        self._subscribers: list[StateCallback] = []
        self._publisher: Optional["HandStatePublisher"] = None

    def snapshot(self) -> HandState:
        """Get the latest published state."""
        return self._state

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """
        Register a callback invoked after every publish.

        Returns:
            Function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def claim_publisher(self, owner: str) -> "HandStatePublisher":
        """
        Claim exclusive write access.

        Args:
            owner: Name of the writer, for diagnostics.

        Raises:
            StoreWriteError: If another writer already holds the publisher.
        """
        if self._publisher is not None:
            raise StoreWriteError(
                f"Hand state already owned by {self._publisher.owner}, "
                f"refusing writer {owner}"
            )
        self._publisher = HandStatePublisher(self, owner)
        logger.debug(f"Hand state publisher claimed by {owner}")
        return self._publisher

    @property
    def has_publisher(self) -> bool:
        """Whether a writer currently holds the publisher."""
        return self._publisher is not None

    def _commit(self, state: HandState) -> None:
        self._state = state
        _notify(self._subscribers, state)

    def _release(self, publisher: "HandStatePublisher") -> None:
        if self._publisher is publisher:
            self._publisher = None
            logger.debug(f"Hand state publisher released by {publisher.owner}")


class HandStatePublisher:
    """Write handle for a HandStateStore. Obtain via `claim_publisher`."""

    def __init__(self, store: HandStateStore, owner: str):
        self._store = store
        self.owner = owner
        self._released = False

    def publish(self, **fields: Any) -> HandState:
        """
        Publish a partial or full update.

        Fields not given keep their last published value. The update is
        applied as one new snapshot.

        Returns:
            The newly published snapshot.

        Raises:
            StoreWriteError: If this publisher was released.
        """
        if self._released:
            raise StoreWriteError(f"Publisher of {self.owner} was released")
        state = replace(self._store.snapshot(), **fields)
        self._store._commit(state)
        return state

    def release(self) -> None:
        """Give up write access."""
        if not self._released:
            self._released = True
            self._store._release(self)


class ObservableFlag:
    """
    Boolean value with change notifications.

    Used for the camera on/off toggle driven by the UI.
    """

    def __init__(self, value: bool = True):
        self._value = bool(value)
        self._subscribers: list[FlagCallback] = []

    @property
    def value(self) -> bool:
        return self._value

    def set(self, value: bool) -> None:
        """Set the flag, notifying subscribers only on change."""
        value = bool(value)
        if value == self._value:
            return
        self._value = value
        _notify(self._subscribers, value)

    def toggle(self) -> bool:
        """Flip the flag and return the new value."""
        self.set(not self._value)
        return self._value

    def subscribe(self, callback: FlagCallback) -> Callable[[], None]:
        """
        Register a callback invoked with the new value on every change.

        Returns:
            Function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
