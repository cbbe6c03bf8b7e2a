"""
producer.py — Pushes model snapshots to registered charts and drives their transitions

For every registered consumer, set_model(model) runs:

    cancel_animation()                                  # cancel + join the running one
    prepare_for_transformation(model, extra_store)      # arm old -> new
    start_animation(transform_model)                    # frames call transform_model(fraction)

and every frame publishes   on_model_created(model.with_extra_store(store), ranges).
Published snapshots are never mutated afterwards: each frame copies the store.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from .models import ChartRanges, MutableExtraStore
from .utils import setup_logger

logger = setup_logger(__name__)

TransformModel = Callable[[float], None]


@dataclass
class _Consumer:
    cancel_animation: Callable[[], None]
    start_animation: Callable[[TransformModel], None]
    prepare_for_transformation: Callable[[Any, MutableExtraStore], None]
    transform: Callable[[MutableExtraStore, float], None]
    extra_store: MutableExtraStore
    update_ranges: Callable[[Any], ChartRanges]
    on_model_created: Callable[[Any, ChartRanges], None]


class ChartModelProducer:
    def __init__(self, model: Any = None):
        self._model = model
        self._consumers: Dict[Hashable, _Consumer] = {}
        self._lock = threading.RLock()

    @property
    def model(self) -> Any:
        return self._model

    def register_for_updates(
        self,
        key: Hashable,
        cancel_animation: Callable[[], None],
        start_animation: Callable[[TransformModel], None],
        prepare_for_transformation: Callable[[Any, MutableExtraStore], None],
        transform: Callable[[MutableExtraStore, float], None],
        extra_store: MutableExtraStore,
        update_ranges: Callable[[Any], ChartRanges],
        on_model_created: Callable[[Any, ChartRanges], None],
    ) -> None:
        """Register a consumer; it immediately receives the current model, if there is one."""
        consumer = _Consumer(
            cancel_animation=cancel_animation,
            start_animation=start_animation,
            prepare_for_transformation=prepare_for_transformation,
            transform=transform,
            extra_store=extra_store,
            update_ranges=update_ranges,
            on_model_created=on_model_created,
        )
        with self._lock:
            self._consumers[key] = consumer
            if self._model is not None:
                self._update(key, consumer, self._model)

    def unregister_from_updates(self, key: Hashable) -> None:
        with self._lock:
            self._consumers.pop(key, None)

    def is_registered(self, key: Hashable) -> bool:
        return key in self._consumers

    def set_model(self, model: Any) -> None:
        """Publish a new snapshot (None clears the charts) to every registered consumer."""
        with self._lock:
            self._model = model
            for key, consumer in list(self._consumers.items()):
                self._update(key, consumer, model)

    def _update(self, key: Hashable, consumer: _Consumer, model: Any) -> None:
        logger.debug(f"Updating consumer {key!r}")
        consumer.cancel_animation()
        consumer.prepare_for_transformation(model, consumer.extra_store)

        def transform_model(fraction: float) -> None:
            consumer.transform(consumer.extra_store, fraction)
            snapshot = model.with_extra_store(consumer.extra_store) if model is not None else None
            consumer.on_model_created(snapshot, consumer.update_ranges(model))

        consumer.start_animation(transform_model)
