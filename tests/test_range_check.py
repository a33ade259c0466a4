"""Tests for the tagged lookup gate and strategy routing."""

import pytest

from rangecheck.constraints import RangeCheckConfig, Strategy
from rangecheck.protocol import (
    CellAlreadyAssigned,
    ConstraintNotSatisfied,
    ConstraintSystem,
    InRegion,
    LookupNotSatisfied,
    MockProver,
    RegionRef,
    SimpleFloorPlanner,
)
from rangecheck.primitives.value import Value
from rangecheck.witness import RangeCheckWitness, honest_tag
from tests.circuits import (
    LOOKUP_RANGE,
    RANGE,
    RangeCheckCircuit,
    SmallRangeCheckCircuit,
)

K = 9
LOOKUP_REGION = "assign value for lookup range check"


class TestTaggedLookupCompleteness:
    """Values in [0, LOOKUP_RANGE] with their own tag satisfy the lookup."""

    def test_all_values(self) -> None:
        checks = [RangeCheckWitness.for_value(v, LOOKUP_RANGE) for v in range(LOOKUP_RANGE + 1)]
        MockProver.run(K, RangeCheckCircuit(checks)).assert_satisfied()

    def test_zero_accepts_first_row_tag(self) -> None:
        """The first table row pairs zero with tag 1."""
        checks = [RangeCheckWitness.with_tag(0, 1, LOOKUP_RANGE)]
        MockProver.run(K, RangeCheckCircuit(checks)).assert_satisfied()

    def test_upper_bound_inclusive(self) -> None:
        checks = [RangeCheckWitness.with_tag(LOOKUP_RANGE, 8, LOOKUP_RANGE)]
        MockProver.run(K, RangeCheckCircuit(checks)).assert_satisfied()


class TestTaggedLookupSoundness:
    """Pairs that are not a table row fail the lookup."""

    def test_wrong_tag(self) -> None:
        """8 has tag 3; claiming 4 is rejected at the assigned row."""
        checks = [RangeCheckWitness.with_tag(8, 4, LOOKUP_RANGE)]
        failures = MockProver.run(K, RangeCheckCircuit(checks)).verify()
        assert failures == [
            LookupNotSatisfied(
                lookup_index=0,
                lookup_name="tagged range check",
                location=InRegion(RegionRef(0, LOOKUP_REGION), 0),
                inputs=("0x8", "0x4"),
            )
        ]

    def test_value_and_tag_must_share_a_row(self) -> None:
        """Both 5 and tag 3 occur in the table, but never together."""
        checks = [RangeCheckWitness.with_tag(5, 3, LOOKUP_RANGE)]
        failures = MockProver.run(K, RangeCheckCircuit(checks)).verify()
        assert len(failures) == 1
        assert isinstance(failures[0], LookupNotSatisfied)

    @pytest.mark.parametrize("v", [LOOKUP_RANGE + 1, 1000, -1])
    def test_value_outside_table(self, v: int) -> None:
        checks = [RangeCheckWitness.with_tag(v, 8, LOOKUP_RANGE)]
        failures = MockProver.run(K, RangeCheckCircuit(checks)).verify()
        assert len(failures) == 1
        assert isinstance(failures[0], LookupNotSatisfied)

    def test_only_bad_row_reported(self) -> None:
        checks = [
            RangeCheckWitness.for_value(100, LOOKUP_RANGE),
            RangeCheckWitness.with_tag(20, 5, LOOKUP_RANGE),
            RangeCheckWitness.for_value(200, LOOKUP_RANGE),
        ]
        failures = MockProver.run(K, RangeCheckCircuit(checks)).verify()
        assert [f.location for f in failures] == [InRegion(RegionRef(1, LOOKUP_REGION), 0)]


class TestScenario:
    """RANGE = 8, LOOKUP_RANGE = 256, NUM_BITS = 8."""

    def test_small_and_large_value(self) -> None:
        circuit = RangeCheckCircuit([
            RangeCheckWitness.for_value(1, RANGE - 1),
            RangeCheckWitness.with_tag(8, 3, LOOKUP_RANGE),
        ])
        MockProver.run(K, circuit).assert_satisfied()
        assert circuit.strategies == [Strategy.DIRECT, Strategy.LOOKUP]

    def test_small_value_at_range_bound(self) -> None:
        """A requested range equal to RANGE is served by the table."""
        circuit = RangeCheckCircuit([RangeCheckWitness.for_value(1, RANGE)])
        MockProver.run(K, circuit).assert_satisfied()
        assert circuit.strategies == [Strategy.LOOKUP]

    def test_mismatched_tag(self) -> None:
        circuit = RangeCheckCircuit([
            RangeCheckWitness.for_value(1, RANGE - 1),
            RangeCheckWitness.with_tag(8, 4, LOOKUP_RANGE),
        ])
        failures = MockProver.run(K, circuit).verify()
        assert len(failures) == 1
        assert failures[0].location == InRegion(RegionRef(1, LOOKUP_REGION), 0)


class TestRouting:
    """Strategy selection and selector usage."""

    def _config(self) -> RangeCheckConfig:
        return RangeCheckCircuit.configure(ConstraintSystem())

    @pytest.mark.parametrize("range_", range(RANGE))
    def test_below_bound_is_direct(self, range_: int) -> None:
        assert self._config().strategy_for(range_) is Strategy.DIRECT

    @pytest.mark.parametrize("range_", [RANGE, RANGE + 1, 100, LOOKUP_RANGE])
    def test_from_bound_is_lookup(self, range_: int) -> None:
        assert self._config().strategy_for(range_) is Strategy.LOOKUP

    def test_beyond_lookup_range_rejected(self) -> None:
        with pytest.raises(ValueError, match="exceeds the lookup range"):
            self._config().strategy_for(LOOKUP_RANGE + 1)

    def test_negative_range_rejected(self) -> None:
        with pytest.raises(ValueError):
            self._config().strategy_for(-1)

    def test_rejected_before_assignment(self) -> None:
        """An oversize range fails synthesis without touching the witness."""
        cs = ConstraintSystem()
        config = RangeCheckCircuit.configure(cs)
        prover = MockProver(K, cs)
        layouter = SimpleFloorPlanner(prover)
        with pytest.raises(ValueError):
            config.assign(layouter, Value.known(3), Value.known(1), LOOKUP_RANGE + 1)
        assert prover.regions == []
        assert layouter.next_row == 0

    def test_selectors_disjoint(self) -> None:
        """Each check gets its own row and exactly one selector."""
        checks = [
            RangeCheckWitness.for_value(3, 4),
            RangeCheckWitness.for_value(30, 64),
            RangeCheckWitness.for_value(5, 7),
            RangeCheckWitness.for_value(255, LOOKUP_RANGE),
        ]
        circuit = RangeCheckCircuit(checks)
        prover = MockProver.run(K, circuit)
        prover.assert_satisfied()
        direct_rows = prover.enabled_rows(circuit.config.direct.q_range_check)
        lookup_rows = prover.enabled_rows(circuit.config.lookup.q_lookup)
        assert direct_rows == [0, 2]
        assert lookup_rows == [1, 3]

    def test_direct_path_ignores_tag(self) -> None:
        circuit = RangeCheckCircuit([RangeCheckWitness.with_tag(5, 7, RANGE - 1)])
        prover = MockProver.run(K, circuit)
        prover.assert_satisfied()
        assert prover.cell_value(circuit.config.lookup.num_bits, 0) is None

    def test_direct_path_soundness(self) -> None:
        """Routing to the direct gate still enforces [0, RANGE)."""
        circuit = RangeCheckCircuit([RangeCheckWitness.for_value(RANGE, RANGE - 1)])
        failures = MockProver.run(K, circuit).verify()
        assert len(failures) == 1
        assert isinstance(failures[0], ConstraintNotSatisfied)
        assert failures[0].location == InRegion(RegionRef(0, "assign value"), 0)

    def test_lookup_writes_caller_tag(self) -> None:
        circuit = RangeCheckCircuit([RangeCheckWitness.with_tag(8, 4, LOOKUP_RANGE)])
        prover = MockProver.run(K, circuit)
        assert prover.cell_value(circuit.config.lookup.num_bits, 0) == 4
        assert prover.cell_value(circuit.config.lookup.value, 0) == 8


class TestSmallParams:
    """A second parameter set shares nothing with the first."""

    def test_small_table(self) -> None:
        circuit = SmallRangeCheckCircuit([
            RangeCheckWitness.for_value(3, 3),
            RangeCheckWitness.for_value(16, 16),
        ])
        prover = MockProver.run(6, circuit)
        prover.assert_satisfied()
        table = circuit.config.table
        assert len(prover.table_rows([table.num_bits, table.value])) == 18

    def test_small_table_rejects_large_value(self) -> None:
        circuit = SmallRangeCheckCircuit([RangeCheckWitness.with_tag(17, 4, 16)])
        assert len(MockProver.run(6, circuit).verify()) == 1


class TestWitness:
    """Tests for honest-prover witness construction."""

    def test_honest_tag(self) -> None:
        assert honest_tag(8) == 3
        assert honest_tag(255) == 7
        assert honest_tag(256) == 8

    def test_without_witness(self) -> None:
        check = RangeCheckWitness.for_value(8, LOOKUP_RANGE).without_witness()
        assert not check.value.is_known()
        assert not check.num_bits.is_known()
        assert check.range == LOOKUP_RANGE

    def test_lookup_without_witnesses_satisfied(self) -> None:
        """Unknown lookup inputs stay unassigned and evaluate to (0, 0)."""
        circuit = RangeCheckCircuit([RangeCheckWitness.for_value(8, LOOKUP_RANGE)])
        MockProver.run(K, circuit.without_witnesses()).assert_satisfied()

    def test_reassigning_lookup_row_rejected(self) -> None:
        cs = ConstraintSystem()
        config = RangeCheckCircuit.configure(cs)
        layouter = SimpleFloorPlanner(MockProver(K, cs))

        def assign_twice(region):
            config.lookup.assign_at(region, 0, Value.known(8), Value.known(3))
            config.lookup.assign_at(region, 0, Value.known(9), Value.known(3))

        with pytest.raises(CellAlreadyAssigned):
            layouter.assign_region("twice", assign_twice)
