#!/usr/bin/env python3


"""Steps through the Levenshtein DP table for two strings."""


import argparse
import levenshtein
import logging
import os
import sys
import time


from levenshtein import EMPTY, Cell, Op, Step, String, Trace
from typing import AbstractSet, Iterable, Iterator, List, Optional, Sequence, Set


MIN_DELAY = 80
MAX_DELAY = 900
DEFAULT_DELAY = 350


OP_LABELS = {
    Op.MATCH: 'Match (0)',
    Op.SUB: 'Replace (1)',
    Op.INS: 'Insert (1)',
    Op.DEL: 'Delete (1)',
    Op.INIT: 'Init',
}


def clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def op_label(op: Op) -> str:
    return OP_LABELS[op]


class Player:
    """A cursor over the steps of one trace.

    The steps are never modified; a new Player is made whenever the trace is
    rebuilt.
    """

    def __init__(self, steps: Sequence[Step], index: int=0) -> None:
        assert len(steps) > 0
        self.steps = steps
        self.index = clamp(index, 0, self.last)

    @property
    def last(self) -> int:
        return len(self.steps) - 1

    @property
    def current(self) -> Step:
        return self.steps[self.index]

    @property
    def done(self) -> bool:
        return self.index >= self.last

    def step(self) -> Step:
        return self.seek(self.index + 1)

    def seek(self, index: int) -> Step:
        self.index = clamp(index, 0, self.last)
        return self.current

    def reset(self) -> Step:
        return self.seek(0)

    def revealed(self) -> Set[Cell]:
        return {(s.i, s.j) for s in self.steps[:self.index + 1]}

    def frames(self) -> Iterator[Step]:
        """Yields the current step, then every following one."""
        yield self.current
        while not self.done:
            yield self.step()


def pp_element(x) -> str:
    return str(x)


def pp_cell(i: int, j: int, value: int, revealed: AbstractSet[Cell],
        current: Optional[Cell], path: AbstractSet[Cell]) -> str:
    if (i, j) not in revealed:
        return ' ·  '
    mark = '*' if (i, j) in path else ' '
    if (i, j) == current:
        return f'[{value}{mark}]'
    return f' {value}{mark} '


def pp_grid(trace: Trace, source: String, target: String,
        revealed: AbstractSet[Cell], current: Optional[Cell]=None,
        path: AbstractSet[Cell]=frozenset()) -> str:
    """Pretty-print the DP table

    Rows are labelled with the source, columns with the target.
    """
    rows = [['', '', f' {EMPTY}  ']
            + [f' {pp_element(t)}  ' for t in target]]
    for i, table_row in enumerate(trace.table):
        label = EMPTY if i == 0 else source[i - 1]
        rows.append([str(i), pp_element(label)] + [
            pp_cell(i, j, value, revealed, current, path)
            for j, value in enumerate(table_row)
        ])
    widths = [max(len(r[k]) for r in rows) for k in range(len(rows[0]))]
    return os.linesep.join(
        ' '.join(cell.rjust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )


def pp_step(step: Step) -> str:
    """Pretty-print a step: the cell, what was compared, the candidates"""
    lines = [
        f'({step.i}, {step.j})  cost {step.cost}  {op_label(step.chosen.op)}',
        f'A: {pp_element(step.a)}  B: {pp_element(step.b)}',
        'candidates:',
    ]
    for c in step.candidates:
        marker = '>' if c == step.chosen else ' '
        source = '' if c.source is None else f' from {c.source}'
        lines.append(f'{marker} {op_label(c.op)}{source} = {c.value}')
    return os.linesep.join(lines)


def pp_frame(trace: Trace, source: String, target: String, player: Player,
        path: AbstractSet[Cell]=frozenset()) -> str:
    step = player.current
    grid = pp_grid(trace, source, target, player.revealed(), (step.i, step.j),
            path)
    return side_by_side((grid, pp_step(step)), 4)


def pp_script(script: Iterable[Op]) -> str:
    return ' '.join(op.value for op in script)


def side_by_side(blocks: Sequence[str], padding: int=0) -> str:
    blks = tuple(pad(fixed_splitlines(b), padding) for b in blocks)
    widths = tuple(len(b[0]) for b in blks)
    heights = tuple(len(b) for b in blks)
    max_height = max(heights)
    # Pad blks at bottom
    for block, width, height in zip(blks, widths, heights):
        block.extend([' ' * width] * (max_height - height))
    # Join
    return os.linesep.join(' '.join(p).rstrip() for p in zip(*blks))


def fixed_splitlines(string: str) -> List[str]:
    """Like str.splitlines, but preserves empty last line."""
    result = string.splitlines()
    if string.endswith(os.linesep) or not result:
        result.append('')
    return result


def pad(block: Sequence[str], margin: int=0) -> List[str]:
    width = max(len(l) for l in block) + margin
    return [
        line + ' ' * (width - len(line))
        for line in block
    ]


def split(string: str, tokens: bool) -> String:
    if tokens:
        return string.split()
    return string


if __name__ == '__main__':
    arg_parser = argparse.ArgumentParser(description=__doc__)
    arg_parser.add_argument('source', help='string A (rows)')
    arg_parser.add_argument('target', help='string B (columns)')
    arg_parser.add_argument('--tokens', action='store_true',
            help='Compare whitespace-separated tokens instead of characters.')
    arg_parser.add_argument('--step', type=int, default=None,
            help='Step to show. Defaults to the last one, or the first with --play.')
    arg_parser.add_argument('--play', action='store_true',
            help='Advance through the remaining steps automatically.')
    arg_parser.add_argument('--delay', type=int, default=DEFAULT_DELAY,
            help=f'Milliseconds per step when playing ({MIN_DELAY}-{MAX_DELAY}).')
    arg_parser.add_argument('--no-backtrace', dest='backtrace',
            action='store_false', help='Do not mark an optimal path.')
    arg_parser.add_argument('-v', '--verbose', action='count', default=0,
            help='Verbosity. Give once for a summary, twice for every cell.')
    args = arg_parser.parse_args()
    if args.verbose == 1:
        logging.basicConfig(level=logging.INFO)
    elif args.verbose >= 2:
        logging.basicConfig(level=logging.DEBUG)
    source = split(args.source, args.tokens)
    target = split(args.target, args.tokens)
    trace = levenshtein.build(source, target)
    end = (len(source), len(target))
    path: AbstractSet[Cell] = frozenset()
    if args.backtrace:
        path = levenshtein.reconstruct(trace.parents, *end)
    print(f'distance: {levenshtein.distance(trace.table)}')
    print(f'script:   {pp_script(levenshtein.script(trace.parents, *end))}')
    if args.step is None:
        args.step = 0 if args.play else len(trace.steps) - 1
    player = Player(trace.steps, args.step)
    if not args.play:
        print(f'step {player.index} / {player.last}')
        print(pp_frame(trace, source, target, player, path))
        sys.exit(0)
    delay = clamp(args.delay, MIN_DELAY, MAX_DELAY) / 1000
    logging.info('playing from step %d at %.2fs per step', player.index, delay)
    for _ in player.frames():
        print(f'step {player.index} / {player.last}')
        print(pp_frame(trace, source, target, player, path))
        print()
        if not player.done:
            time.sleep(delay)
