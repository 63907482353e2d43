"""Typed events yielded by the streaming thinking loop."""
from dataclasses import dataclass
from typing import Literal, Union

from slidethinker.models import EnhancedPresentation, ThinkingState, ThinkingStep

EventType = Literal["state", "step", "presentation"]


@dataclass(frozen=True)
class ThinkingEvent:
    type: EventType
    data: Union[ThinkingState, ThinkingStep, EnhancedPresentation]

    def to_dict(self) -> dict:
        return {"type": self.type, "data": self.data.to_wire()}


def state_event(state: ThinkingState) -> ThinkingEvent:
    return ThinkingEvent(type="state", data=state)


def step_event(step: ThinkingStep) -> ThinkingEvent:
    return ThinkingEvent(type="step", data=step)


def presentation_event(presentation: EnhancedPresentation) -> ThinkingEvent:
    return ThinkingEvent(type="presentation", data=presentation.model_copy(deep=True))
