"""
Synchronous update loop of the Gamma explorer.

Each write to the mean or shape recomputes the full set of derived
quantities, renders them, and only then publishes the result to subscribers.
A failed recomputation leaves the parameters and the published rendering as
they were before the write.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional

from beartype import beartype

from rosmodels.explorer.gamma import GammaSummary, derive_quantities
from rosmodels.explorer.parameters import ExplorerConfig, ParameterStore
from rosmodels.explorer.render import (
    DensityPlotSpec,
    build_plot_spec,
    format_statistics,
)
from rosmodels.logging import configure_logging

__all__ = [
    "ControllerState",
    "ExplorerController",
    "Rendering",
]

logger = configure_logging(__name__)


class ControllerState(Enum):
    IDLE = auto()
    RECOMPUTING = auto()


@dataclass(frozen=True, eq=False)
class Rendering:
    summary: GammaSummary
    plot: DensityPlotSpec
    text: str


Subscriber = Callable[[Rendering], None]


class ExplorerController:
    """
    Wires parameter writes to recomputation and rendering.

    Examples:
        >>> controller = ExplorerController()
        >>> controller.state
        <ControllerState.IDLE: 1>
        >>> print(controller.set_mean(5.0).text.splitlines()[0])
        Mean: 5
    """

    @beartype
    def __init__(self, config: Optional[ExplorerConfig] = None):
        self.store = ParameterStore(config)
        self._state = ControllerState.IDLE
        self._subscribers: List[Subscriber] = []
        self._rendering = self._render()

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def rendering(self) -> Rendering:
        return self._rendering

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback receiving every new rendering.

        An exception raised by a callback is logged and does not stop the
        remaining callbacks or fail the write.

        Returns:
            Callable[[], None]: Removes the callback when called.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_mean(self, value: float) -> Rendering:
        return self.update(mean=value)

    def set_shape(self, value: float) -> Rendering:
        return self.update(shape=value)

    def update(
        self,
        mean: Optional[float] = None,
        shape: Optional[float] = None,
    ) -> Rendering:
        """
        Write new parameter values and publish the resulting rendering.

        Args:
            mean: New mean ROS value, left unchanged when None.
            shape: New Gamma shape, left unchanged when None.

        Returns:
            Rendering: The newly published rendering.

        Raises:
            ParameterRangeError: If a value is outside its declared range.
            GammaParameterError: If the distribution cannot be evaluated.
            RuntimeError: If called while a recomputation is in progress.
        """
        if self._state is ControllerState.RECOMPUTING:
            raise RuntimeError("cannot update parameters during a recomputation")

        previous = self.store.snapshot()
        self._state = ControllerState.RECOMPUTING
        try:
            if mean is not None:
                self.store.set_mean(mean)
            if shape is not None:
                self.store.set_shape(shape)
            rendering = self._render()
        except Exception:
            self.store.restore(previous)
            logger.exception(
                f"recomputation failed for mean={mean}, shape={shape}; "
                f"keeping {previous}"
            )
            raise
        finally:
            self._state = ControllerState.IDLE

        self._rendering = rendering
        for callback in list(self._subscribers):
            try:
                callback(rendering)
            except Exception:
                logger.exception(f"subscriber {callback!r} failed")
        return rendering

    def _render(self) -> Rendering:
        summary = derive_quantities(
            self.store.mean,
            self.store.shape,
            self.store.threshold,
            num_points=self.store.config.num_points,
        )
        return Rendering(
            summary=summary,
            plot=build_plot_spec(summary),
            text=format_statistics(summary),
        )
