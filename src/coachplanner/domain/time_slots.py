"""Time slot catalog.

One catalog holds both the core slots shown in the main scheduling grid and
the special slots (early, extended, weekend, custom) used for special
scheduling. Every component looks slots up here and branches on ``category``
rather than keeping its own slot lists.
"""

from datetime import time
from typing import Callable, Iterable, Iterator, Optional, TypeVar

from coachplanner.domain.models import SlotCategory, TimeSlot

T = TypeVar("T")

CORE_TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot("8-10", "8:00 AM - 10:00 AM PST", time(8, 0), time(10, 0)),
    TimeSlot("10-12", "10:00 AM - 12:00 PM PST", time(10, 0), time(12, 0)),
    TimeSlot("1230-230", "12:30 PM - 2:30 PM PST", time(12, 30), time(14, 30)),
)

SPECIAL_TIME_SLOTS: tuple[TimeSlot, ...] = (
    # Early morning
    TimeSlot("7-9", "7:00 AM - 9:00 AM PST", time(7, 0), time(9, 0), SlotCategory.EARLY),
    TimeSlot("730-930", "7:30 AM - 9:30 AM PST", time(7, 30), time(9, 30), SlotCategory.EARLY),
    # Extended afternoon
    TimeSlot("2-4", "2:00 PM - 4:00 PM PST", time(14, 0), time(16, 0), SlotCategory.EXTENDED),
    TimeSlot("3-5", "3:00 PM - 5:00 PM PST", time(15, 0), time(17, 0), SlotCategory.EXTENDED),
    # Weekend events
    TimeSlot(
        "weekend-morning",
        "Weekend Morning Event (9:00 AM - 12:00 PM)",
        time(9, 0),
        time(12, 0),
        SlotCategory.WEEKEND,
    ),
    TimeSlot(
        "weekend-afternoon",
        "Weekend Afternoon Event (1:00 PM - 4:00 PM)",
        time(13, 0),
        time(16, 0),
        SlotCategory.WEEKEND,
    ),
    TimeSlot("custom", "Custom Time Slot", None, None, SlotCategory.CUSTOM),
)


class TimeSlotCatalog:
    """Immutable, ordered collection of bookable time slots.

    Example:
        >>> catalog = TimeSlotCatalog.default()
        >>> catalog.get("8-10").category
        <SlotCategory.CORE: 'core'>
        >>> [s.id for s in catalog.by_category(SlotCategory.EARLY)]
        ['7-9', '730-930']
    """

    def __init__(self, slots: Iterable[TimeSlot]):
        self._slots: tuple[TimeSlot, ...] = tuple(slots)
        self._by_id: dict[str, TimeSlot] = {}
        for slot in self._slots:
            if slot.id in self._by_id:
                raise ValueError(f"Duplicate time slot id: {slot.id}")
            self._by_id[slot.id] = slot

    @classmethod
    def default(cls) -> "TimeSlotCatalog":
        """Catalog with the standard core slots followed by the special slots."""
        return cls(CORE_TIME_SLOTS + SPECIAL_TIME_SLOTS)

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, time_slot_id: object) -> bool:
        return time_slot_id in self._by_id

    def get(self, time_slot_id: str) -> Optional[TimeSlot]:
        """Look a slot up by id, returning None when unknown."""
        return self._by_id.get(time_slot_id)

    def label_for(self, time_slot_id: str) -> str:
        """Display label for a slot id, falling back to the id itself."""
        slot = self._by_id.get(time_slot_id)
        return slot.label if slot else time_slot_id

    def category_of(self, time_slot_id: str) -> Optional[SlotCategory]:
        slot = self._by_id.get(time_slot_id)
        return slot.category if slot else None

    @property
    def core_slots(self) -> list[TimeSlot]:
        return [s for s in self._slots if s.is_core]

    @property
    def special_slots(self) -> list[TimeSlot]:
        return [s for s in self._slots if s.is_special]

    def by_category(self, *categories: SlotCategory) -> list[TimeSlot]:
        """Slots belonging to any of the given categories, in catalog order."""
        wanted = set(categories)
        return [s for s in self._slots if s.category in wanted]

    def is_core(self, time_slot_id: str) -> bool:
        slot = self._by_id.get(time_slot_id)
        return slot is not None and slot.is_core

    def order_of(self, time_slot_id: str) -> int:
        """Sort position of a slot; unknown ids sort after every known slot."""
        for index, slot in enumerate(self._slots):
            if slot.id == time_slot_id:
                return index
        return len(self._slots)

    def sort_by_slot(self, items: Iterable[T], key: Callable[[T], str]) -> list[T]:
        """Sort items chronologically by the slot id returned from ``key``."""
        return sorted(items, key=lambda item: self.order_of(key(item)))


DEFAULT_CATALOG = TimeSlotCatalog.default()
