#!/usr/bin/env python3
"""Tests for ServiceDue, PartDue and TaxDue dataclasses."""
import pytest
from garage import (
    Part,
    PartDue,
    ServiceDue,
    ServiceRecord,
    Status,
    TaxDue,
    TaxRecord,
    TaxStatus,
    Vehicle,
)


class TestServiceDue:
    """Tests for ServiceDue dataclass."""

    @pytest.fixture
    def service(self):
        return ServiceRecord("s1", "v1", "alice", "oil", next_service_km=20000)

    @pytest.mark.parametrize(
        "status,expected",
        [
            (Status.OVERDUE, True),
            (Status.URGENT, True),
            (Status.OK, False),
            (Status.UNKNOWN, False),
        ],
    )
    def test_is_due(self, service, status, expected):
        assert ServiceDue(service=service, status=status).is_due is expected

    def test_is_orphaned_without_vehicle(self, service):
        svc = ServiceDue(service=service, status=Status.UNKNOWN)
        assert svc.is_orphaned is True

    def test_not_orphaned_with_vehicle(self, service):
        vehicle = Vehicle("v1", "alice", "Honda", "Vario")
        svc = ServiceDue(service=service, status=Status.UNKNOWN, vehicle=vehicle)
        assert svc.is_orphaned is False

    def test_not_orphaned_without_reference(self):
        service = ServiceRecord("s1", None, "alice", "oil")
        svc = ServiceDue(service=service, status=Status.UNKNOWN)
        assert svc.is_orphaned is False


class TestPartDue:
    """Tests for PartDue dataclass."""

    def test_is_due(self):
        part = Part("p1", "v1", "alice", "belt", needs_replacement=True)
        assert PartDue(part=part, status=Status.OVERDUE).is_due is True
        assert PartDue(part=part, status=Status.OK).is_due is False


class TestTaxDue:
    """Tests for TaxDue dataclass."""

    def test_is_due(self):
        tax = TaxRecord("t1", "v1", "alice", "annual", "2025-07-20")
        assert TaxDue(tax=tax, status=TaxStatus.OVERDUE).is_due is True
        assert TaxDue(tax=tax, status=TaxStatus.UPCOMING).is_due is True
        assert TaxDue(tax=tax, status=TaxStatus.PENDING).is_due is False
        assert TaxDue(tax=tax, status=TaxStatus.PAID).is_due is False
