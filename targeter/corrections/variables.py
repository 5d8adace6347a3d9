"""
Variables and Goals
===================

A targeting problem is composed of **variables**, the scalar controls the
corrector may adjust, and **goals**, the scalar quantities observed from an
external evaluation that must reach a desired value within a tolerance.

.. autosummary::
   :nosignatures:

   Variable
   Goal
   VariableSet
   GoalSet

Variables and goals are stored in ordered sets. Each object added to a set is
assigned a stable integer id (its position) that is used to index the
vectors and matrices of the corrector; names are only used for lookup and
reporting.

Reference
-----------

.. autoclass:: Variable
   :members:

.. autoclass:: Goal
   :members:

.. autoclass:: VariableSet
   :members:

.. autoclass:: GoalSet
   :members:
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Generic, TypeVar, Union

import numpy as np
from numpy.typing import NDArray

from targeter import util
from targeter.exceptions import ConfigurationError
from targeter.typing import FloatArray

logger = logging.getLogger(__name__)

__all__ = ["Variable", "Goal", "VariableSet", "GoalSet"]


class Variable:
    """
    A scalar control variable

    Args:
        name: the variable name, e.g., ``"TOI.Element1"``
        value: the initial value
        minimum: the smallest value the corrector may assign
        maximum: the largest value the corrector may assign
        maxStep: the largest change in the value applied by a single Newton
            update
        perturbation: the size of the finite-difference perturbation

    Raises:
        ConfigurationError: if the bounds are inverted, the initial value lies
            outside the bounds, or the step or perturbation are not positive
    """

    def __init__(
        self,
        name: str,
        value: float,
        minimum: float = -np.inf,
        maximum: float = np.inf,
        maxStep: float = np.inf,
        perturbation: float = 1e-4,
    ) -> None:
        value, minimum, maximum = float(value), float(minimum), float(maximum)
        maxStep, perturbation = float(maxStep), float(perturbation)

        if not name:
            raise ConfigurationError("Variables must be named")
        if not np.isfinite(value):
            raise ConfigurationError(f"Variable '{name}' has non-finite value {value}")
        if minimum > maximum:
            raise ConfigurationError(
                f"Variable '{name}' minimum ({minimum}) exceeds maximum ({maximum})"
            )
        if not minimum <= value <= maximum:
            raise ConfigurationError(
                f"Variable '{name}' value {value} is outside of the bounds "
                f"[{minimum}, {maximum}]"
            )
        if not maxStep > 0.0:
            raise ConfigurationError(f"Variable '{name}' maxStep must be positive")
        if not (perturbation > 0.0 and np.isfinite(perturbation)):
            raise ConfigurationError(
                f"Variable '{name}' perturbation must be positive and finite"
            )

        #: str: the variable name
        self.name = name

        #: float: the current value
        self.value = value

        #: float: the smallest value the corrector may assign
        self.minimum = minimum

        #: float: the largest value the corrector may assign
        self.maximum = maximum

        #: float: the largest magnitude of a single Newton update
        self.maxStep = maxStep

        #: float: the finite-difference perturbation size
        self.perturbation = perturbation

        #: float: the sign of the most recent perturbation, +1 or -1
        self.direction = 1.0

    def __repr__(self) -> str:
        return util.repr(
            self, "name", "value", "minimum", "maximum", "maxStep", "perturbation"
        )

    def inBounds(self, value: Union[float, None] = None) -> bool:
        """
        Check whether a value lies within the bounds

        Args:
            value: the value to check; if ``None``, the current value is checked

        Returns:
            True if ``minimum <= value <= maximum``
        """
        value = self.value if value is None else value
        return bool(self.minimum <= value <= self.maximum)


class Goal:
    """
    A scalar goal

    Args:
        name: the goal name, e.g., ``"Sat.Earth.RMAG"``
        desired: the desired value
        tolerance: the largest acceptable difference between the achieved and
            desired values

    Raises:
        ConfigurationError: if the tolerance is not positive or the desired value
            is not finite
    """

    def __init__(self, name: str, desired: float, tolerance: float) -> None:
        if not name:
            raise ConfigurationError("Goals must be named")

        #: str: the goal name
        self.name = name
        self.desired = desired
        self.tolerance = tolerance

    def __repr__(self) -> str:
        return util.repr(self, "name", "desired", "tolerance")

    @property
    def desired(self) -> float:
        """The desired value"""
        return self._desired

    @desired.setter
    def desired(self, value: float) -> None:
        value = float(value)
        if not np.isfinite(value):
            raise ConfigurationError(f"Goal '{self.name}' desired value must be finite")
        self._desired = value

    @property
    def tolerance(self) -> float:
        """The convergence tolerance"""
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        value = float(value)
        if not (value > 0.0 and np.isfinite(value)):
            raise ConfigurationError(
                f"Goal '{self.name}' tolerance must be positive and finite"
            )
        self._tolerance = value

    def isMet(self, achieved: float) -> bool:
        """
        Args:
            achieved: an achieved value for the goal

        Returns:
            True if ``|achieved - desired| <= tolerance``
        """
        return bool(abs(achieved - self.desired) <= self.tolerance)


ItemT = TypeVar("ItemT", Variable, Goal)


class _NamedSet(Generic[ItemT]):
    """
    An ordered collection of uniquely-named items addressed by integer id
    """

    _itemType: type = object

    def __init__(self) -> None:
        self._items: list[ItemT] = []
        self._ids: dict[str, int] = {}

    def __repr__(self) -> str:
        out = f"<{self.__class__.__name__}:"
        for ix, item in enumerate(self._items):
            out += "\n  [{!s}] {!s},".format(ix, item.name)
        out += "\n>"
        return out

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ItemT]:
        return iter(self._items)

    def __getitem__(self, key: Union[int, str]) -> ItemT:
        if isinstance(key, str):
            key = self.index(key)
        return self._items[key]

    def __contains__(self, name: str) -> bool:
        return name in self._ids

    def add(self, item: ItemT) -> int:
        """
        Add an item to the set

        Args:
            item: the item to add. It is stored by reference.

        Returns:
            the integer id assigned to the item

        Raises:
            ConfigurationError: if the item type is incorrect or an item with
                the same name already exists
        """
        if not isinstance(item, self._itemType):
            raise ConfigurationError(
                f"Can only add {self._itemType.__name__} objects to a "
                f"{self.__class__.__name__}"
            )
        if item.name in self._ids:
            raise ConfigurationError(
                f"{self._itemType.__name__} named '{item.name}' has already been added"
            )

        self._ids[item.name] = len(self._items)
        self._items.append(item)
        logger.debug(f"Added {item.name} with id {self._ids[item.name]}")
        return self._ids[item.name]

    def clear(self) -> None:
        """Remove all items"""
        self._items = []
        self._ids = {}

    def index(self, name: str) -> int:
        """
        Get the id of an item

        Args:
            name: the item name

        Returns:
            the integer id of the item

        Raises:
            KeyError: if no item has the name
        """
        try:
            return self._ids[name]
        except KeyError:
            raise KeyError(
                f"No {self._itemType.__name__} named '{name}' in "
                f"{self.__class__.__name__}"
            ) from None

    @property
    def names(self) -> list[str]:
        """The item names, ordered by id"""
        return [item.name for item in self._items]

    def _vector(self, attr: str) -> NDArray[np.double]:
        return np.array([getattr(item, attr) for item in self._items], dtype=float)


class VariableSet(_NamedSet[Variable]):
    """
    Ordered collection of :class:`Variable` objects
    """

    _itemType = Variable

    def values(self) -> NDArray[np.double]:
        """
        Get the current variable values

        Returns:
            a copy of the values, ordered by id
        """
        return self._vector("value")

    def setValues(self, values: FloatArray) -> None:
        """
        Overwrite the current variable values. No bounds are enforced.

        Args:
            values: the new values, ordered by id

        Raises:
            ValueError: if the number of values does not match the number of
                variables
        """
        values = util.toArray(values)
        if not values.size == len(self):
            raise ValueError(
                f"Expected {len(self)} values but received {values.size}"
            )

        for var, val in zip(self._items, values):
            var.value = float(val)

    @property
    def minimums(self) -> NDArray[np.double]:
        """The lower bounds, ordered by id"""
        return self._vector("minimum")

    @property
    def maximums(self) -> NDArray[np.double]:
        """The upper bounds, ordered by id"""
        return self._vector("maximum")

    @property
    def maxSteps(self) -> NDArray[np.double]:
        """The maximum Newton step sizes, ordered by id"""
        return self._vector("maxStep")

    @property
    def perturbations(self) -> NDArray[np.double]:
        """The perturbation sizes, ordered by id"""
        return self._vector("perturbation")

    @property
    def directions(self) -> NDArray[np.double]:
        """The most recent perturbation directions, ordered by id"""
        return self._vector("direction")


class GoalSet(_NamedSet[Goal]):
    """
    Ordered collection of :class:`Goal` objects
    """

    _itemType = Goal

    def desired(self) -> NDArray[np.double]:
        """
        Returns:
            the desired goal values, ordered by id
        """
        return self._vector("desired")

    def tolerances(self) -> NDArray[np.double]:
        """
        Returns:
            the goal tolerances, ordered by id
        """
        return self._vector("tolerance")
