"""Split numbered test plans into step groups.

Groups default to runs of three consecutive steps. A step numbered 1
always opens a new group, so plans that restart their numbering for each
scenario are split at the restarts.
"""

import logging
import re

from ..models import Step, StepGroup

logger = logging.getLogger(__name__)

STEP_PATTERN = re.compile(r"^\s*(\d+)[.)]\s")
GROUP_SIZE = 3


def parse_step(line: str) -> Step | None:
    """Parse a step line (``1. text`` or ``1) text``).

    Args:
        line: A single plan line

    Returns:
        Parsed Step, or None if the line is not a step line
    """
    match = STEP_PATTERN.match(line)
    if match is None:
        return None
    return Step(n=int(match.group(1)), line=line)


def _starts_group(n: int, last_number: int) -> bool:
    return n == 1 or (last_number > 0 and n % GROUP_SIZE == 1)


def segment_plan(plan_text: str) -> list[StepGroup]:
    """Split plan text into ordered step groups.

    Non-step lines are appended to the open group; lines before the first
    step are dropped. Separator lines get no special treatment.

    Args:
        plan_text: Raw test plan

    Returns:
        Two or more step groups, or an empty list when the plan does not
        split (the caller then uses the whole plan as one unit)
    """
    groups: list[StepGroup] = []
    current_steps: list[Step] = []
    current_lines: list[str] = []
    last_number = 0

    def flush() -> None:
        if current_steps:
            text = "".join(f"{line}\n" for line in current_lines)
            groups.append(StepGroup(steps=list(current_steps), text=text))

    lines = plan_text.split("\n")
    while lines and not lines[-1]:
        lines.pop()

    for line in lines:
        step = parse_step(line)
        if step is None:
            if current_steps:
                current_lines.append(line)
            continue

        if _starts_group(step.n, last_number):
            flush()
            current_steps = []
            current_lines = []
        current_steps.append(step)
        current_lines.append(line)
        last_number = step.n

    flush()

    logger.debug("Segmented plan into %d step group(s)", len(groups))
    if len(groups) <= 1:
        return []
    return groups
