"""Per-frame pointer hit regions and double-click tracking.

Rendering registers ``(Rect, ClickAction)`` pairs as it draws; pointer
events resolve against the registry of the frame currently on screen.
The registry is cleared at the start of every frame, while the
double-click tracker deliberately outlives frames.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DOUBLE_CLICK_SECONDS = 0.4


@dataclass(frozen=True)
class Rect:
    """Cell rectangle with 0-based origin; right and bottom edges exclusive."""

    x: int
    y: int
    width: int
    height: int

    def contains(self, col: int, row: int) -> bool:
        return self.x <= col < self.x + self.width and self.y <= row < self.y + self.height


@dataclass(frozen=True)
class SwitchTab:
    index: int


@dataclass(frozen=True)
class SelectItem:
    index: int


@dataclass(frozen=True)
class GroupHeader:
    key: str


@dataclass(frozen=True)
class FooterAction:
    message: object


@dataclass(frozen=True)
class JoinCheckbox:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class DismissOverlay:
    pass


@dataclass(frozen=True)
class SelectLogFile:
    index: int


@dataclass(frozen=True)
class ScrollLogPreview:
    pass


@dataclass(frozen=True)
class Noop:
    pass


ClickAction = (
    SwitchTab
    | SelectItem
    | GroupHeader
    | FooterAction
    | JoinCheckbox
    | GoBack
    | DismissOverlay
    | SelectLogFile
    | ScrollLogPreview
    | Noop
)


@dataclass(frozen=True)
class ClickRegion:
    rect: Rect
    action: ClickAction


@dataclass
class ClickRegistry:
    """Ordered region list for one frame; later registrations win."""

    regions: list[ClickRegion] = field(default_factory=list)

    def begin_frame(self) -> None:
        self.regions.clear()

    def register(self, rect: Rect, action: ClickAction) -> None:
        if rect.width <= 0 or rect.height <= 0:
            return
        self.regions.append(ClickRegion(rect, action))

    def region_at(self, col: int, row: int) -> ClickRegion | None:
        for region in reversed(self.regions):
            if region.rect.contains(col, row):
                return region
        return None

    def hit_test(self, col: int, row: int) -> ClickAction:
        region = self.region_at(col, row)
        return region.action if region is not None else Noop()


@dataclass
class DoubleClickTracker:
    """Detect a second press on the identical cell within ``window_seconds``."""

    window_seconds: float = DOUBLE_CLICK_SECONDS
    last_position: tuple[int, int] | None = None
    last_time: float = 0.0

    def press(self, col: int, row: int, now: float) -> bool:
        """Record a press and return whether it completes a double click.

        A completed double click resets the tracker, so a third quick press
        starts a new sequence instead of chaining.
        """
        is_double = (
            self.last_position == (col, row)
            and 0.0 <= now - self.last_time < self.window_seconds
        )
        if is_double:
            self.last_position = None
            self.last_time = 0.0
        else:
            self.last_position = (col, row)
            self.last_time = now
        return is_double
