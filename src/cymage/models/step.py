"""Step models for segmented test plans.

A test plan is a free-form text where instructions are numbered
(``1. Go to patrons``, ``2) Click save``). Steps are grouped so each
generation batch sees a small slice of the plan.
"""

from pydantic import BaseModel, ConfigDict, Field


class Step(BaseModel):
    """One numbered instruction line from a test plan.

    Attributes:
        n: The number written in front of the line.
        line: The line exactly as it appeared in the plan.
    """

    model_config = ConfigDict(frozen=True)

    n: int = Field(description="Step number as written in the plan")
    line: str = Field(description="Verbatim step line")


class StepGroup(BaseModel):
    """Contiguous run of steps handed to one generation batch.

    Non-step lines that follow a step (notes, expected results) belong to
    the group they appear in and are kept in ``text``.

    Attributes:
        steps: Steps in appearance order; never empty.
        text: Every line of the group, newline-terminated.
    """

    model_config = ConfigDict(frozen=True)

    steps: list[Step] = Field(min_length=1, description="Steps in appearance order")
    text: str = Field(description="Verbatim group text, newline-terminated lines")

    @property
    def numbers(self) -> list[int]:
        """Step numbers in this group."""
        return [step.n for step in self.steps]
