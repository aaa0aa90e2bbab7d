"""
Reads the printed form of a recipe back into a Recipe.

Products and equipment are shared references, so they are resolved
through a Catalog rather than created from the text.
"""

import logging
import re
from typing import Callable, Dict, Iterable, Optional

from ..core.timer_manager import CountdownTimer, create_timer
from ..models.recipe import Equipment, Product, Recipe

log = logging.getLogger(__name__)


class CatalogError(KeyError):
    pass


class RecipeParseError(ValueError):
    pass


class Catalog:
    def __init__(self, products: Iterable[Product] = (), equipment: Iterable[Equipment] = ()):
        self.products: Dict[str, Product] = {p.description: p for p in products}
        self.equipment: Dict[str, Equipment] = {e.description: e for e in equipment}

    def get_product(self, description: str) -> Product:
        try:
            return self.products[description]
        except KeyError:
            raise CatalogError(f"Unknown product: {description}") from None

    def get_equipment(self, description: str) -> Equipment:
        try:
            return self.equipment[description]
        except KeyError:
            raise CatalogError(f"Unknown equipment: {description}") from None


class RecipeParser:
    header_pattern = re.compile(r"^Receta de (.+):$")
    step_pattern = re.compile(r"^(\S+) de '(.*?)' usando '(.*?)' durante (-?\d+)$")
    wait_pattern = re.compile(r"^Esperar '(.*)' durante (-?\d+)$")
    cost_pattern = re.compile(r"^Costo de producción: ")

    @classmethod
    def parse(
        cls,
        raw: str,
        catalog: Catalog,
        timer_factory: Optional[Callable[[], CountdownTimer]] = None,
    ) -> Recipe:
        lines = [line.strip() for line in raw.splitlines() if line.strip()]
        if not lines:
            raise RecipeParseError("Empty recipe text")

        header = cls.header_pattern.match(lines[0])
        if not header:
            raise RecipeParseError(f"Missing recipe header: {lines[0]!r}")
        recipe = Recipe(catalog.get_product(header.group(1)), timer_factory or create_timer)

        for line in lines[1:]:
            step = cls.step_pattern.match(line)
            wait = cls.wait_pattern.match(line)
            if step:
                quantity, product, equipment, time = step.groups()
                try:
                    quantity = float(quantity)
                except ValueError:
                    raise RecipeParseError(f"Bad quantity in line: {line!r}") from None
                recipe.add_step(
                    catalog.get_product(product), quantity, catalog.get_equipment(equipment), int(time)
                )
            elif wait:
                recipe.add_wait_step(wait.group(1), int(wait.group(2)))
            elif cls.cost_pattern.match(line):
                # derived from the steps, nothing to read
                continue
            else:
                raise RecipeParseError(f"Unrecognised line: {line!r}")

        log.debug("Parsed %s with %d steps", recipe.final_product.description, len(recipe.steps))
        return recipe
