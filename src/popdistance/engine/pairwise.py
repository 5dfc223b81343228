from __future__ import annotations

# Population-weighted distance engine.
#
# Three layers, increasing in scope:
# - pair_distance: one aggregate pair (expected distance between two random residents).
# - group_distance: the full n x n matrix for aggregates sharing one period, rows in parallel.
# - distance: partition a mixed collection by period, then run group_distance per partition.
#
# Aggregates from different periods are never compared; their pairs are simply absent.

import logging
import math
import os
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Iterable, Sequence

from popdistance.config.settings import EngineSettings, get_settings
from popdistance.core.geo import great_circle_km
from popdistance.domain.entities import Aggregate, PairResult
from popdistance.domain.errors import DomainError, InvalidArgumentError

logger = logging.getLogger(__name__)

# Blocks submitted per worker; more blocks smooth out uneven row costs.
_BLOCKS_PER_WORKER = 4


def _weighted_distance(a: Aggregate, b: Aggregate) -> float:
    if a is None or b is None:
        raise InvalidArgumentError("pair_distance requires two aggregates")
    if a.total_weight == 0 or b.total_weight == 0:
        zero = a if a.total_weight == 0 else b
        raise DomainError(
            f"aggregate {zero.name!r} ({zero.period}) has zero total weight; "
            f"distance between {a.name!r} and {b.name!r} is undefined"
        )

    # Normalize once per side: weight / total_weight is the probability mass of a place.
    b_points = [(p.weight / b.total_weight, p.coordinate) for p in b.members]
    total = 0.0
    for pa in a.members:
        mass_a = pa.weight / a.total_weight
        ca = pa.coordinate
        for mass_b, cb in b_points:
            total += mass_a * mass_b * great_circle_km(ca, cb)
    return total


def pair_distance(a: Aggregate, b: Aggregate) -> PairResult:
    """Population-weighted distance between two aggregates.

    Sums `(w_i * w_j) / (W_a * W_b) * d(i, j)` over every member pair, i.e. the expected
    great-circle distance between residents drawn independently from each side. Empty
    member lists contribute nothing (the result is 0.0).

    Raises:
        DomainError: if either aggregate has `total_weight == 0`.
    """
    return PairResult(a=a, b=b, distance=_weighted_distance(a, b))


def _block_distances(group: Sequence[Aggregate], start: int, stop: int) -> list[list[float]]:
    """Compute rows `start..stop-1` of the distance matrix (runs inside a worker)."""
    return [[_weighted_distance(group[i], other) for other in group] for i in range(start, stop)]


def _resolve_workers(engine: EngineSettings) -> int:
    if engine.max_workers is not None:
        return int(engine.max_workers)
    return os.cpu_count() or 1


def _make_executor(engine: EngineSettings, workers: int) -> Executor:
    if engine.executor == "thread":
        return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="popdistance")
    return ProcessPoolExecutor(max_workers=workers)


def _fill_rows(
    results: list[PairResult | None],
    group: Sequence[Aggregate],
    start: int,
    rows: list[list[float]],
) -> None:
    n = len(group)
    for offset, row in enumerate(rows):
        i = start + offset
        a = group[i]
        results[i * n : (i + 1) * n] = [PairResult(a=a, b=group[j], distance=d) for j, d in enumerate(row)]


def group_distance(group: Iterable[Aggregate], *, engine: EngineSettings | None = None) -> list[PairResult]:
    """Full n x n matrix of `pair_distance` for aggregates that share one period.

    Self pairs are included. Result `[i * n + j]` is `pair_distance(group[i], group[j])`,
    independent of which worker computed which row. Rows are fanned out to a worker pool
    in contiguous blocks; each block owns a disjoint slice of the preallocated buffer.
    """
    items = list(group)
    n = len(items)
    if n == 0:
        return []
    periods = {a.period for a in items}
    if len(periods) > 1:
        raise InvalidArgumentError(f"group_distance expects a single period, got {sorted(periods)}")

    engine = engine or get_settings().engine
    workers = min(_resolve_workers(engine), n)
    results: list[PairResult | None] = [None] * (n * n)

    if engine.executor == "serial" or workers <= 1 or n < engine.parallel_min_group_size:
        _fill_rows(results, items, 0, _block_distances(items, 0, n))
        return results  # type: ignore[return-value]

    block = max(1, math.ceil(n / (workers * _BLOCKS_PER_WORKER)))
    with _make_executor(engine, workers) as pool:
        futures = {
            pool.submit(_block_distances, items, start, min(start + block, n)): start
            for start in range(0, n, block)
        }
        for fut in as_completed(futures):
            _fill_rows(results, items, futures[fut], fut.result())

    return results  # type: ignore[return-value]


def partition_by_period(aggregates: Iterable[Aggregate]) -> dict[str, list[Aggregate]]:
    """Group aggregates by period, keeping first-occurrence order of periods and members."""
    out: dict[str, list[Aggregate]] = {}
    for a in aggregates:
        out.setdefault(a.period, []).append(a)
    return out


def distance(aggregates: Iterable[Aggregate], *, engine: EngineSettings | None = None) -> list[PairResult]:
    """Compute pairwise weighted distances within each period and concatenate the results."""
    if aggregates is None:
        raise InvalidArgumentError("distance requires a collection of aggregates")
    engine = engine or get_settings().engine

    t0 = time.perf_counter()
    partitions = partition_by_period(aggregates)
    results: list[PairResult] = []
    for period, group in partitions.items():
        logger.debug("Computing %d x %d matrix for period=%s", len(group), len(group), period)
        results.extend(group_distance(group, engine=engine))

    logger.info(
        "Computed %d pair results for %d aggregates in %d period(s) (%d ms, executor=%s)",
        len(results),
        sum(len(g) for g in partitions.values()),
        len(partitions),
        int((time.perf_counter() - t0) * 1000),
        engine.executor,
    )
    return results
