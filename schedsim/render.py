"""Box-drawn table rendering of a simulation log.

The table has one column per time step between the run's start and stop.
The step is the coarsest one that still puts every event on a column
boundary: ``1 / lcm`` of the denominators of the gaps between consecutive
event times.

Rows, top to bottom:
    Processes  which task was dispatched (``J<i>``) or ``X`` for idle; an
               entry spans the empty columns to its right.
    Time       the instant each column stands for.
    J<i>       ``(`` where an instance of task i was released, ``)`` where a
               deadline was met and ``!)`` where one was missed.
"""

import math
from typing import Callable, Dict, List, NamedTuple, Tuple

from schedsim.rational import Rational
from schedsim.simulator import EventKind, SimulationEvent, SimulationResult

Justify = Callable[[str, int], str]


def _get_pad(text: str, length: int, pad_char: str = " ") -> str:
    count = max(length - len(text), 0)
    return pad_char * (count // len(pad_char)) + pad_char[:count % len(pad_char)]


def left_pad(text: str, length: int, pad_char: str = " ") -> str:
    """Pad ``text`` to ``length`` by prepending ``pad_char``."""
    return _get_pad(text, length, pad_char) + text


def right_pad(text: str, length: int, pad_char: str = " ") -> str:
    """Pad ``text`` to ``length`` by appending ``pad_char``."""
    return text + _get_pad(text, length, pad_char)


def _center_pad(text: str, length: int, pad_char: str, left_justify: bool) -> str:
    pad = _get_pad(text, length, pad_char)
    short_pad, long_pad = pad[:len(pad) // 2], pad[len(pad) // 2:]
    if left_justify:
        return short_pad + text + long_pad
    return long_pad + text + short_pad


def center_pad_left(text: str, length: int, pad_char: str = " ") -> str:
    """Center ``text``, rounding the left padding down."""
    return _center_pad(text, length, pad_char, True)


def center_pad_right(text: str, length: int, pad_char: str = " ") -> str:
    """Center ``text``, rounding the left padding up."""
    return _center_pad(text, length, pad_char, False)


JUSTIFY: Dict[str, Justify] = {
    "left": right_pad,
    "right": left_pad,
    "center-left": center_pad_left,
    "center-right": center_pad_right,
}


class BoxStyle(NamedTuple):
    vertical: str
    horizontal: str
    top_left: str
    top_tee: str
    top_right: str
    left_tee: str
    cross: str
    right_tee: str
    bottom_left: str
    bottom_tee: str
    bottom_right: str


THICK = BoxStyle("┃", "━", "┏", "┳", "┓", "┣", "╋", "┫", "┗", "┻", "┛")
THIN = BoxStyle("│", "─", "┌", "┬", "┐", "├", "┼", "┤", "└", "┴", "┘")


def time_step(events: List[SimulationEvent]) -> Rational:
    """Return the column width, in time units, for an event log."""
    denominator = 1
    last = None
    for event in events:
        if last is not None:
            delta = event.time - last
            if delta > 0:
                denominator = math.lcm(denominator, delta.d)
        last = event.time
    return Rational(1, denominator)


def render_timeline(
    result: SimulationResult,
    thick_boxes: bool = True,
    justify: Justify = center_pad_left,
) -> str:
    """Render a simulation result as a box-drawn table.

    Args:
        result: The simulation to render.
        thick_boxes: Use heavy box-drawing characters instead of light ones.
        justify: Cell justification, one of the padding helpers above.

    Returns:
        The table as a multi-line string without a trailing newline.
    """
    style = THICK if thick_boxes else THIN
    step = time_step(result.events)
    count = math.floor((result.stop - result.start) / step) + 1 if result.stop >= result.start else 0
    numbers = range(1, len(result.taskset) + 1)

    process_row = ["Processes"] + [""] * count
    time_row = ["Time"] + [str(result.start + step * c) for c in range(count)]
    task_rows = [[result.taskset.label(i)] + [""] * count for i in numbers]

    for event in result.events:
        column = math.floor((event.time - result.start) / step) + 1
        if column > count:
            continue
        if event.kind is EventKind.DISPATCH:
            process_row[column] = result.taskset.label(event.task)
        elif event.kind is EventKind.IDLE:
            process_row[column] = "X"
        else:
            row = task_rows[event.task - 1]
            if event.kind is EventKind.RELEASE:
                row[column] = row[column] + "("
            elif event.kind is EventKind.DEADLINE_HIT:
                row[column] = ")" + row[column]
            else:
                row[column] = "!)" + row[column]

    widths = [max(len(row[c]) for row in [time_row] + task_rows) for c in range(count + 1)]
    spans = _spans(process_row)
    for first, last, text in spans:
        shortfall = len(text) - _span_width(widths, first, last)
        if shortfall > 0:
            widths[first] += shortfall
    # Column boundaries that also separate two Processes cells.
    span_starts = {first for first, _, _ in spans}

    def rule(left: str, joint: str, merged_joint: str, right: str) -> str:
        parts = [style.horizontal * widths[0]]
        for c in range(1, len(widths)):
            parts.append(joint if c in span_starts else merged_joint)
            parts.append(style.horizontal * widths[c])
        return left + "".join(parts) + right

    def line(cells: List[str]) -> str:
        v = style.vertical
        return v + v.join(justify(cell, widths[c]) for c, cell in enumerate(cells)) + v

    v = style.vertical
    process_line = v + v.join(
        justify(text, _span_width(widths, first, last)) for first, last, text in spans
    ) + v

    output = [
        rule(style.top_left, style.top_tee, style.horizontal, style.top_right),
        process_line,
        rule(style.left_tee, style.cross, style.top_tee, style.right_tee),
        line(time_row),
        rule(style.left_tee, style.cross, style.cross, style.right_tee),
    ]
    output.extend(line(row) for row in task_rows)
    output.append(rule(style.bottom_left, style.bottom_tee, style.bottom_tee, style.bottom_right))
    return "\n".join(output)


def _spans(cells: List[str]) -> List[Tuple[int, int, str]]:
    """Group a row into ``(first, last, text)`` spans; empty cells extend the previous one."""
    spans: List[Tuple[int, int, str]] = []
    for c, text in enumerate(cells):
        if text or not spans:
            spans.append((c, c, text))
        else:
            first, _, previous = spans[-1]
            spans[-1] = (first, c, previous)
    return spans


def _span_width(widths: List[int], first: int, last: int) -> int:
    return sum(widths[first:last + 1]) + (last - first)
