"""Unit tests for simulation requirements and scenario paths."""

import pytest

from mcproducts.errors import PathMismatchError
from mcproducts.simulation import (
    RateDef,
    ScenarioEntry,
    SimulationRequirement,
    allocate_path,
    check_path,
)


@pytest.fixture
def dataline():
    return (
        SimulationRequirement(forward_mats=(0.0,), libor_defs=(RateDef(0.0, 0.5, "libor"),)),
        SimulationRequirement(
            numeraire=True,
            forward_mats=(0.5, 1.0),
            discount_mats=(1.0,),
        ),
    )


class TestSimulationRequirement:
    """Tests for the dataline entry."""

    def test_defaults_request_nothing(self):
        req = SimulationRequirement()
        assert req.numeraire is False
        assert req.forward_mats == ()
        assert req.discount_mats == ()
        assert req.libor_defs == ()

    def test_is_immutable(self):
        req = SimulationRequirement(numeraire=True)
        with pytest.raises(AttributeError):
            req.numeraire = False


class TestAllocatePath:
    """Tests for path pre-allocation."""

    def test_one_entry_per_requirement(self, dataline):
        path = allocate_path(dataline)
        assert len(path) == 2

    def test_entries_sized_to_requests(self, dataline):
        path = allocate_path(dataline)
        assert len(path[0].forwards) == 1
        assert len(path[0].discounts) == 0
        assert len(path[0].libors) == 1
        assert len(path[1].forwards) == 2
        assert len(path[1].discounts) == 1
        assert len(path[1].libors) == 0

    def test_default_numeraire_is_one(self, dataline):
        path = allocate_path(dataline)
        assert all(entry.numeraire == 1.0 for entry in path)

    def test_allocated_path_passes_check(self, dataline):
        check_path(dataline, allocate_path(dataline))


class TestCheckPath:
    """Tests for path validation against a dataline."""

    def test_length_mismatch_raises(self, dataline):
        path = allocate_path(dataline)[:1]
        with pytest.raises(PathMismatchError, match="1 entries"):
            check_path(dataline, path)

    def test_missing_forward_raises(self, dataline):
        path = allocate_path(dataline)
        path[1].forwards.pop()
        with pytest.raises(PathMismatchError, match="forwards"):
            check_path(dataline, path)

    def test_extra_libor_raises(self, dataline):
        path = allocate_path(dataline)
        path[1].libors.append(0.01)
        with pytest.raises(PathMismatchError, match="libors"):
            check_path(dataline, path)

    def test_hand_built_path(self, dataline):
        path = [
            ScenarioEntry(forwards=[100.0], libors=[0.02]),
            ScenarioEntry(forwards=[101.0, 102.0], discounts=[0.99], numeraire=1.01),
        ]
        check_path(dataline, path)
