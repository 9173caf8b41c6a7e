"""Transform broadcasters that publish frame transforms without blocking."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

__all__ = ["TransformStamped", "TfBroadcaster", "StaticTfBroadcaster"]


@dataclass
class TransformStamped:
    """A time-stamped transform from ``frame_id`` to ``child_frame_id``."""

    frame_id: str = ""
    child_frame_id: str = ""
    stamp: float = 0.0
    translation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float, float] = field(
        default=(0.0, 0.0, 0.0, 1.0)
    )


Publish = Callable[[list[TransformStamped]], None]


def _as_list(
    transforms: TransformStamped | Iterable[TransformStamped],
) -> list[TransformStamped]:
    if isinstance(transforms, TransformStamped):
        return [transforms]
    return list(transforms)


class _TryLockPublisher:
    """Publishes a message only when no other publication is in progress."""

    def __init__(self, publish: Publish) -> None:
        self._publish = publish
        self._lock = threading.Lock()

    def try_publish(self, message: list[TransformStamped]) -> bool:
        if not self._lock.acquire(blocking=False):
            return False
        try:
            self._publish(message)
        finally:
            self._lock.release()
        return True


class TfBroadcaster:
    """Sends each batch of transforms as one message; busy publishes are dropped."""

    topic = "/tf"

    def __init__(self, publish: Publish) -> None:
        self._publisher = _TryLockPublisher(publish)

    def send_transform(
        self, transforms: TransformStamped | Iterable[TransformStamped]
    ) -> bool:
        """Publish the transforms; return whether the message went out."""
        return self._publisher.try_publish(_as_list(transforms))


class StaticTfBroadcaster:
    """Keeps one transform per child frame and republishes the whole set."""

    topic = "/tf_static"

    def __init__(self, publish: Publish) -> None:
        self._publisher = _TryLockPublisher(publish)
        self._transforms: list[TransformStamped] = []

    def send_transform(
        self, transforms: TransformStamped | Iterable[TransformStamped]
    ) -> bool:
        """Merge the transforms by child frame and publish the full set."""
        for transform in _as_list(transforms):
            for idx, existing in enumerate(self._transforms):
                if existing.child_frame_id == transform.child_frame_id:
                    self._transforms[idx] = transform
                    break
            else:
                self._transforms.append(transform)
        return self._publisher.try_publish(list(self._transforms))

    def transforms(self) -> list[TransformStamped]:
        """Return the transforms currently held, in insertion order."""
        return list(self._transforms)