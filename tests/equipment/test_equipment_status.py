"""
tests/equipment/test_equipment_status.py

Unit tests for equipment status after (un)assignment.
"""

from uuid import uuid4

from guardhub.equipment.models import EquipmentStatus
from guardhub.equipment.services import status_after_assignment


def test_holder_forces_assigned() -> None:
    assert status_after_assignment(EquipmentStatus.AVAILABLE, uuid4()) == EquipmentStatus.ASSIGNED


def test_holder_wins_over_requested_status() -> None:
    assert (
        status_after_assignment(EquipmentStatus.AVAILABLE, uuid4(), EquipmentStatus.MAINTENANCE)
        == EquipmentStatus.ASSIGNED
    )


def test_unassigning_returns_item_to_available() -> None:
    assert status_after_assignment(EquipmentStatus.ASSIGNED, None) == EquipmentStatus.AVAILABLE


def test_requested_status_applies_without_holder() -> None:
    assert (
        status_after_assignment(EquipmentStatus.AVAILABLE, None, EquipmentStatus.MAINTENANCE)
        == EquipmentStatus.MAINTENANCE
    )


def test_current_status_kept_when_nothing_requested() -> None:
    assert status_after_assignment(EquipmentStatus.LOST, None) == EquipmentStatus.LOST
