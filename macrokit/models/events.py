"""
Recorded input events.

Each event kind is its own model, discriminated on ``type``. The wire shape
is ``{"type": ..., "timestamp": ..., "data": {...}}``.
"""

from __future__ import annotations
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter


class EventKind(str, Enum):
    """Kinds of events the recorder produces."""
    MOUSE_MOVE = "MouseMove"
    MOUSE_DOWN = "MouseDown"
    MOUSE_UP = "MouseUp"
    KEY_DOWN = "KeyDown"
    KEY_UP = "KeyUp"
    MOUSE_WHEEL = "MouseWheel"


class MouseButton(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"
    MIDDLE = "Middle"


class PointData(BaseModel):
    x: int
    y: int


class ButtonData(BaseModel):
    button: MouseButton


class KeyData(BaseModel):
    key: str = Field(min_length=1, description="Canonical key name")


class WheelData(BaseModel):
    delta_x: int = 0
    delta_y: int = 0


class BaseEvent(BaseModel):
    timestamp: int = Field(ge=0, le=2**64 - 1, description="Milliseconds; 0 for the first recorded event")

    def shifted(self, origin: int) -> BaseEvent:
        """Copy with ``origin`` subtracted from the timestamp, saturating at 0."""
        return self.model_copy(update={"timestamp": max(self.timestamp - origin, 0)})


class MouseMoveEvent(BaseEvent):
    type: Literal["MouseMove"] = "MouseMove"
    data: PointData


class MouseDownEvent(BaseEvent):
    type: Literal["MouseDown"] = "MouseDown"
    data: ButtonData


class MouseUpEvent(BaseEvent):
    type: Literal["MouseUp"] = "MouseUp"
    data: ButtonData


class KeyDownEvent(BaseEvent):
    type: Literal["KeyDown"] = "KeyDown"
    data: KeyData


class KeyUpEvent(BaseEvent):
    type: Literal["KeyUp"] = "KeyUp"
    data: KeyData


class MouseWheelEvent(BaseEvent):
    type: Literal["MouseWheel"] = "MouseWheel"
    data: WheelData


class UnrecognizedEvent(BaseEvent):
    """
    An event whose ``type`` this version does not know.

    Kept so that files written by newer tools still load; playback skips it.
    """
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)


_KNOWN_KINDS = {kind.value for kind in EventKind}


def _event_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    return kind if kind in _KNOWN_KINDS else "unrecognized"


MacroEvent = Annotated[
    Union[
        Annotated[MouseMoveEvent, Tag("MouseMove")],
        Annotated[MouseDownEvent, Tag("MouseDown")],
        Annotated[MouseUpEvent, Tag("MouseUp")],
        Annotated[KeyDownEvent, Tag("KeyDown")],
        Annotated[KeyUpEvent, Tag("KeyUp")],
        Annotated[MouseWheelEvent, Tag("MouseWheel")],
        Annotated[UnrecognizedEvent, Tag("unrecognized")],
    ],
    Discriminator(_event_tag),
]

event_list_adapter: TypeAdapter[List[MacroEvent]] = TypeAdapter(List[MacroEvent])


# =========================================================================
# Constructors
# =========================================================================

def mouse_move(x: int, y: int, timestamp: int = 0) -> MouseMoveEvent:
    return MouseMoveEvent(timestamp=timestamp, data=PointData(x=x, y=y))


def mouse_down(button: MouseButton, timestamp: int = 0) -> MouseDownEvent:
    return MouseDownEvent(timestamp=timestamp, data=ButtonData(button=button))


def mouse_up(button: MouseButton, timestamp: int = 0) -> MouseUpEvent:
    return MouseUpEvent(timestamp=timestamp, data=ButtonData(button=button))


def key_down(key: str, timestamp: int = 0) -> KeyDownEvent:
    return KeyDownEvent(timestamp=timestamp, data=KeyData(key=key))


def key_up(key: str, timestamp: int = 0) -> KeyUpEvent:
    return KeyUpEvent(timestamp=timestamp, data=KeyData(key=key))


def mouse_wheel(delta_x: int, delta_y: int, timestamp: int = 0) -> MouseWheelEvent:
    return MouseWheelEvent(timestamp=timestamp, data=WheelData(delta_x=delta_x, delta_y=delta_y))


def normalize(events: List[MacroEvent]) -> List[MacroEvent]:
    """Shift timestamps so the first event sits at 0."""
    if not events:
        return []
    origin = events[0].timestamp
    return [event.shifted(origin) for event in events]


def parse_events(data: List[Dict[str, Any]]) -> List[MacroEvent]:
    """Decode a list of wire-shaped event dicts."""
    return event_list_adapter.validate_python(data)
