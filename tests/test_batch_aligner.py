"""Tests for batch alignment."""

import pytest

from cymage.core.batch_aligner import align_batches, chunk_references
from cymage.core.plan_segmenter import segment_plan
from cymage.models import BatchKind, FileReference

PLAN = "1. A\n2. B\n3. C\n4. D\n5. E\n6. F\n"


def _refs(*names: str) -> list[FileReference]:
    return [FileReference(candidate=name) for name in names]


@pytest.mark.unit
class TestChunkReferences:
    """Tests for chunk_references function."""

    def test_one_per_chunk(self) -> None:
        chunks = chunk_references(_refs("a.pl", "b.pl"))
        assert [[r.path for r in c] for c in chunks] == [["a.pl"], ["b.pl"]]

    def test_larger_chunks_keep_order(self) -> None:
        chunks = chunk_references(_refs("a.pl", "b.pl", "c.pl"), max_files_per_batch=2)
        assert [[r.path for r in c] for c in chunks] == [["a.pl", "b.pl"], ["c.pl"]]

    def test_empty_gives_single_empty_chunk(self) -> None:
        assert chunk_references([]) == [[]]

    def test_rejects_zero(self) -> None:
        with pytest.raises(ValueError):
            chunk_references(_refs("a.pl"), max_files_per_batch=0)


@pytest.mark.unit
class TestAlignBatches:
    """Tests for align_batches function."""

    def test_more_batches_than_groups_fall_back_to_whole_plan(self) -> None:
        groups = segment_plan(PLAN)
        batches = align_batches(_refs("a.pl", "b.pl", "c.pl"), groups, PLAN)

        assert [b.index for b in batches] == [1, 2, 3]
        assert [b.kind for b in batches] == [BatchKind.INITIAL, BatchKind.APPEND, BatchKind.APPEND]
        assert batches[0].step_group == groups[0]
        assert batches[1].step_group == groups[1]
        assert batches[2].uses_whole_plan
        assert batches[0].content == "1. A\n2. B\n3. C\n"
        assert batches[1].content == "4. D\n5. E\n6. F\n"
        assert batches[2].content == PLAN
        assert [r.path for r in batches[2].references] == ["c.pl"]

    def test_no_references_single_batch(self) -> None:
        groups = segment_plan(PLAN)
        batches = align_batches([], groups, PLAN)
        assert len(batches) == 1
        assert batches[0].is_initial
        assert batches[0].references == []
        assert batches[0].step_group == groups[0]

    def test_no_groups_uses_whole_plan(self) -> None:
        plan = "1. Log in\n2. Click Save\n"
        batches = align_batches(_refs("a.pl", "b.pl"), segment_plan(plan), plan)
        assert all(b.uses_whole_plan for b in batches)
        assert all(b.content == plan for b in batches)

    def test_exactly_one_initial_batch(self) -> None:
        batches = align_batches(_refs("a.pl", "b.pl", "c.pl", "d.pl"), [], PLAN)
        assert sum(b.is_initial for b in batches) == 1
        assert batches[0].is_initial
