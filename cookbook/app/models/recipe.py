from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel

from ..core.timer_manager import CountdownTimer, create_timer

log = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Print integral values without a fractional part: 3.0 -> "3"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Product(BaseModel):
    description: str
    unit_cost: float

    model_config = {"frozen": True}


class Equipment(BaseModel):
    description: str
    hourly_cost: float = 0

    model_config = {"frozen": True}


class BaseStep(BaseModel, ABC):
    time: int

    model_config = {"frozen": True}

    @abstractmethod
    def get_step_cost(self) -> float: ...

    @abstractmethod
    def get_text_to_print(self) -> str: ...


class Step(BaseStep):
    input: Product
    quantity: float
    equipment: Equipment

    def get_step_cost(self) -> float:
        return self.quantity * self.input.unit_cost

    def get_text_to_print(self) -> str:
        return (
            f"{format_number(self.quantity)} de '{self.input.description}' "
            f"usando '{self.equipment.description}' durante {self.time}"
        )


class WaitStep(BaseStep):
    description: str

    def get_step_cost(self) -> float:
        return 0

    def get_text_to_print(self) -> str:
        return f"Esperar '{self.description}' durante {self.time}"


class Recipe:
    """
    Ordered steps towards a final product, plus the cooking lifecycle.

    ``cook()`` registers the recipe with a countdown timer for the total
    cook time; the timer calls ``time_out()`` back, which marks the recipe
    as cooked. The callback may arrive on any thread.
    """

    def __init__(
        self,
        final_product: Product,
        timer_factory: Callable[[], CountdownTimer] = create_timer,
    ):
        self.final_product = final_product
        self.timer_factory = timer_factory
        self._steps: List[BaseStep] = []
        self._cooked = False
        self._timer: Optional[CountdownTimer] = None
        self._lock = threading.Lock()

    @property
    def steps(self) -> Tuple[BaseStep, ...]:
        return tuple(self._steps)

    def add_step(self, input: Product, quantity: float, equipment: Equipment, time: int) -> Step:
        step = Step(input=input, quantity=quantity, equipment=equipment, time=time)
        self._steps.append(step)
        log.debug("Added step to %s: %s", self.final_product.description, step.get_text_to_print())
        return step

    def add_wait_step(self, description: str, time: int) -> WaitStep:
        step = WaitStep(description=description, time=time)
        self._steps.append(step)
        log.debug("Added wait step to %s: %s", self.final_product.description, step.get_text_to_print())
        return step

    def remove_step(self, step: BaseStep) -> None:
        for idx, candidate in enumerate(self._steps):
            if candidate is step:
                del self._steps[idx]
                log.debug("Removed step %d from %s", idx, self.final_product.description)
                return

    def get_text_to_print(self) -> str:
        result = f"Receta de {self.final_product.description}:\n"
        for step in self._steps:
            result += step.get_text_to_print() + "\n"
        result += f"Costo de producción: {format_number(self.get_production_cost())}"
        return result

    def get_production_cost(self) -> float:
        result = 0.0
        for step in self._steps:
            result += step.get_step_cost()
        return result

    def get_cook_time(self) -> int:
        return sum(step.time for step in self._steps)

    @property
    def cooked(self) -> bool:
        return self._cooked

    @property
    def cooking(self) -> bool:
        with self._lock:
            return self._timer is not None and not self._cooked

    def cook(self) -> None:
        with self._lock:
            if self._cooked:
                log.info("%s is already cooked", self.final_product.description)
                return
            if self._timer is not None:
                log.warning("Cancelling pending timer for %s", self.final_product.description)
                self._timer.cancel()
            cook_time = self.get_cook_time()
            timer = self._timer = self.timer_factory()
        log.info("Cooking %s for %d", self.final_product.description, cook_time)
        try:
            timer.register(cook_time, self)
        except Exception:
            with self._lock:
                if self._timer is timer:
                    self._timer = None
            raise

    def time_out(self) -> None:
        with self._lock:
            self._cooked = True
        log.info("%s is cooked", self.final_product.description)
