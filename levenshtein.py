"""Levenshtein distance with a full trace of how the DP table was filled."""


import logging


from enum import Enum
from typing import Any, List, NamedTuple, Optional, Sequence, Set, Tuple


DEL_COST = 1
INS_COST = 1
SUB_COST = 1


class Op(Enum):
    INIT = 'init'
    DEL = 'delete'
    INS = 'insert'
    MATCH = 'match'
    SUB = 'replace'


class Sentinel(Enum):
    EMPTY = '∅'

    def __str__(self) -> str:
        return self.value


EMPTY = Sentinel.EMPTY


Cost = int
Cell = Tuple[int, int]
String = Sequence[Any]


class Candidate(NamedTuple):
    op: Op
    source: Optional[Cell]
    value: Cost


class Step(NamedTuple):
    i: int
    j: int
    a: Any
    b: Any
    cost: Cost
    candidates: Tuple[Candidate, ...]
    chosen: Candidate


class Link(NamedTuple):
    i: int
    j: int
    op: Op


Table = Tuple[Tuple[Cost, ...], ...]
Parents = Tuple[Tuple[Optional[Link], ...], ...]
Script = List[Op]


class Trace(NamedTuple):
    table: Table
    steps: Tuple[Step, ...]
    parents: Parents


class OutOfRange(IndexError):
    pass


def choose(candidates: Sequence[Candidate]) -> Candidate:
    """Picks the cheapest of delete, insert and diagonal candidates.

    Ties go to the diagonal first, then delete, then insert.
    """
    dele, ins, diag = candidates
    best = min(c.value for c in candidates)
    for c in (diag, dele, ins):
        if c.value == best:
            return c
    raise AssertionError('unreachable')


def build(source: String, target: String) -> Trace:
    height = len(source) + 1
    width = len(target) + 1
    table: List[List[Cost]] = [[0 for j in range(width)] for i in range(height)]
    parents: List[List[Optional[Link]]] = \
            [[None for j in range(width)] for i in range(height)]
    steps: List[Step] = []

    def record(i: int, j: int, a: Any, b: Any,
            candidates: Tuple[Candidate, ...], chosen: Candidate) -> None:
        table[i][j] = chosen.value
        if chosen.source is not None:
            parents[i][j] = Link(chosen.source[0], chosen.source[1], chosen.op)
        steps.append(Step(i, j, a, b, chosen.value, candidates, chosen))
        logging.debug('(%d, %d) %s from %s = %d', i, j, chosen.op.value,
                chosen.source, chosen.value)

    origin = Candidate(Op.INIT, None, 0)
    record(0, 0, EMPTY, EMPTY, (origin,), origin)
    for i in range(1, height):
        c = Candidate(Op.DEL, (i - 1, 0), table[i - 1][0] + DEL_COST)
        record(i, 0, source[i - 1], EMPTY, (c,), c)
    for j in range(1, width):
        c = Candidate(Op.INS, (0, j - 1), table[0][j - 1] + INS_COST)
        record(0, j, EMPTY, target[j - 1], (c,), c)
    for i in range(1, height):
        for j in range(1, width):
            a = source[i - 1]
            b = target[j - 1]
            if a == b:
                diag = Candidate(Op.MATCH, (i - 1, j - 1), table[i - 1][j - 1])
            else:
                diag = Candidate(Op.SUB, (i - 1, j - 1),
                        table[i - 1][j - 1] + SUB_COST)
            candidates = (
                Candidate(Op.DEL, (i - 1, j), table[i - 1][j] + DEL_COST),
                Candidate(Op.INS, (i, j - 1), table[i][j - 1] + INS_COST),
                diag,
            )
            record(i, j, a, b, candidates, choose(candidates))
    assert len(steps) == height + (width - 1) + (height - 1) * (width - 1)
    logging.info('distance %d over %d steps', table[-1][-1], len(steps))
    return Trace(
        tuple(tuple(row) for row in table),
        tuple(steps),
        tuple(tuple(row) for row in parents),
    )


def distance(table: Table) -> Cost:
    return table[-1][-1]


def check_range(parents: Parents, i: int, j: int) -> None:
    if not 0 <= i < len(parents) or not 0 <= j < len(parents[0]):
        raise OutOfRange(f'({i}, {j}) outside {len(parents)}x{len(parents[0])} table')


def chain(parents: Parents, end_i: int, end_j: int) -> List[Link]:
    """Follows parent links from (end_i, end_j) back to the origin.

    The result starts with the end cell (labelled with the operation that
    produced it) and ends with the origin, labelled INIT.
    """
    check_range(parents, end_i, end_j)
    result: List[Link] = []
    i, j = end_i, end_j
    for _ in range(end_i + end_j + 1):
        link = parents[i][j]
        if link is None:
            result.append(Link(i, j, Op.INIT))
            return result
        result.append(Link(i, j, link.op))
        assert (i - link.i, j - link.j) in ((1, 0), (0, 1), (1, 1))
        i, j = link.i, link.j
    raise AssertionError(f'no path from ({end_i}, {end_j}) to the origin')


def reconstruct(parents: Parents, end_i: int, end_j: int) -> Set[Cell]:
    return {(link.i, link.j) for link in chain(parents, end_i, end_j)}


def script(parents: Parents, end_i: int, end_j: int) -> Script:
    """Returns the edit operations along the backtrace, first to last."""
    return [link.op for link in reversed(chain(parents, end_i, end_j))
            if link.op != Op.INIT]
