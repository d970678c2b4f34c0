"""Recolours incoming path markers on a rolling rainbow scale."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

from mavplan.color import percent_to_rainbow_color
from mavplan.visualization import Marker

logger = logging.getLogger(__name__)


class TrajectoryRecolor:
    """Accumulates path markers, giving each a colour from its arrival order."""

    def __init__(
        self,
        max_plans: int = 50,
        publish: Optional[Callable[[List[Marker]], None]] = None,
    ) -> None:
        self.max_plans = max_plans
        self.counter = 0
        self.markers: List[Marker] = []
        self._publish = publish

    def marker_callback(self, markers: Iterable[Marker]) -> List[Marker]:
        """Recolour copies of ``markers``, add them to the cache and publish it."""
        for marker in markers:
            color = percent_to_rainbow_color(self.counter / self.max_plans)
            color.a = 0.5
            recolored = replace(
                marker,
                color=color,
                scale=(0.025, 0.025, 0.025),
                id=self.counter,
                points=list(marker.points),
            )
            self.counter += 1
            self.markers.append(recolored)

        cache = list(self.markers)
        if self._publish is not None:
            self._publish(cache)

        logger.info("Counter: %d", self.counter)
        if self.counter > self.max_plans:
            self.counter %= self.max_plans
        return cache