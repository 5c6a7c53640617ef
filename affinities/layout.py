import logging
import math, random
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple
import numpy as np
from affinities.constants import *

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Canvas:
    width: float
    height: float

@dataclass(frozen=True)
class PlacedCircle:
    # (x, y) is the top-left corner of the bounding box
    x: float
    y: float
    radius: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.radius, self.y + self.radius

    @property
    def diameter(self) -> float:
        return self.radius * 2

    # rendering code calls the diameter "size"
    size = diameter

@dataclass
class PlacementSet:
    """Append-only history of placed circles, in placement order."""
    _circles: List[PlacedCircle] = field(default_factory=list)

    def append(self, circle: PlacedCircle) -> None:
        self._circles.append(circle)

    def view(self) -> Tuple[PlacedCircle, ...]:
        return tuple(self._circles)

    def __len__(self) -> int:
        return len(self._circles)

    def __iter__(self) -> Iterator[PlacedCircle]:
        return iter(self._circles)

    def __getitem__(self, i: int) -> PlacedCircle:
        return self._circles[i]

@dataclass(frozen=True)
class PackerSettings:
    edge_padding: float = EDGE_PADDING
    text_space: float = TEXT_SPACE
    min_dist_factor: float = MIN_DIST_FACTOR
    max_outer_tries: int = MAX_OUTER_TRIES
    k: int = CANDIDATES_PER_BASE
    uniform_tries: int = UNIFORM_FALLBACK_TRIES

# Tier numbers reported by place_with_tier
TIER_CENTER = 1
TIER_NEIGHBOR = 2
TIER_UNIFORM = 3
TIER_FALLBACK = 4

def grid_shape(item_count: int, aspect_ratio: float = ASPECT_RATIO) -> Tuple[int, int]:
    n = max(1, int(item_count))
    cols = math.ceil(math.sqrt(n * aspect_ratio))
    rows = math.ceil(n / cols)
    return cols, rows

def calculate_canvas_size(item_count: int, average_diameter: float,
                          aspect_ratio: float = ASPECT_RATIO, padding: float = GRID_PADDING,
                          text_space: float = TEXT_SPACE, min_width: float = MIN_CANVAS_WIDTH,
                          min_height: float = MIN_CANVAS_HEIGHT) -> Canvas:
    """
    Working area for `item_count` avatars of roughly `average_diameter`, laid out
    as a landscape-leaning grid with a caption band under every row.
    """
    cols, rows = grid_shape(item_count, aspect_ratio)
    item_w = average_diameter + padding
    item_h = average_diameter + text_space + padding
    width = max(min_width, cols * item_w + padding)
    height = max(min_height, rows * item_h + padding)
    return Canvas(width=width, height=height)

class _Candidates:
    """Validity checks for one packer call: the placeable rectangle plus the history as arrays."""

    def __init__(self, history: Sequence[PlacedCircle], canvas_width: float, canvas_height: float,
                 radius: float, settings: PackerSettings):
        pad = settings.edge_padding
        self.radius = radius
        self.min_dist = radius * settings.min_dist_factor
        self.x0, self.x1 = pad + radius, canvas_width - pad - radius
        self.y0, self.y1 = pad + radius, canvas_height - settings.text_space - pad - radius
        self.centers = np.array([c.center for c in history], dtype=np.float64).reshape(-1, 2)
        radii = np.array([c.radius for c in history], dtype=np.float64)
        # existing circle's radius + new radius + the new circle's extra margin
        self.min_allowed = (radii + radius) + (self.min_dist - radius)

    def is_valid(self, cx: float, cy: float) -> bool:
        if cx < self.x0 or cx > self.x1 or cy < self.y0 or cy > self.y1:
            return False
        if len(self.centers) == 0:
            return True
        d = np.hypot(self.centers[:, 0] - cx, self.centers[:, 1] - cy)
        return not bool((d < self.min_allowed).any())

    def corner(self, cx: float, cy: float) -> Tuple[float, float]:
        return cx - self.radius, cy - self.radius

Strategy = Callable[[Sequence[PlacedCircle], _Candidates, random.Random, PackerSettings],
                    Optional[Tuple[float, float]]]

def _near_neighbors(history, cand, rng, settings):
    for _ in range(settings.max_outer_tries):
        base = history[rng.randrange(len(history))]
        bx, by = base.center
        for _ in range(settings.k):
            angle = rng.random() * 2 * math.pi
            dist = cand.min_dist + rng.random() * cand.min_dist
            cx = bx + math.cos(angle) * dist
            cy = by + math.sin(angle) * dist
            if cand.is_valid(cx, cy):
                return cand.corner(cx, cy)
    return None

def _uniform(history, cand, rng, settings):
    for _ in range(settings.uniform_tries):
        cx = cand.x0 + rng.random() * (cand.x1 - cand.x0)
        cy = cand.y0 + rng.random() * (cand.y1 - cand.y0)
        if cand.is_valid(cx, cy):
            return cand.corner(cx, cy)
    return None

SAMPLING_TIERS: Tuple[Tuple[int, Strategy], ...] = (
    (TIER_NEIGHBOR, _near_neighbors),
    (TIER_UNIFORM, _uniform),
)

def place_with_tier(history: Sequence[PlacedCircle], canvas_width: float, canvas_height: float,
                    radius: float, rng: Optional[random.Random] = None,
                    settings: Optional[PackerSettings] = None) -> Tuple[Tuple[float, float], int]:
    """Same as generate_disk_position, also returning which tier produced the corner."""
    settings = settings or PackerSettings()
    rng = rng or random.Random()
    history = tuple(history)

    if not history:
        return (canvas_width / 2 - radius, canvas_height / 2 - radius), TIER_CENTER

    cand = _Candidates(history, canvas_width, canvas_height, radius, settings)
    for tier, strategy in SAMPLING_TIERS:
        pos = strategy(history, cand, rng, settings)
        if pos is not None:
            return pos, tier

    logger.debug("no free spot for radius %.1f after %d placements, using fallback corner",
                 radius, len(history))
    return (settings.edge_padding, settings.edge_padding), TIER_FALLBACK

def generate_disk_position(history: Sequence[PlacedCircle], canvas_width: float, canvas_height: float,
                           radius: float, rng: Optional[random.Random] = None,
                           settings: Optional[PackerSettings] = None) -> Tuple[float, float]:
    """
    Top-left corner for a new circle of `radius` that keeps clear of every circle in
    `history`, preferring spots next to circles already placed. Never fails: when no
    free spot turns up the corner of the placeable area is returned, overlap or not.
    `history` is read only; appending the result is up to the caller.
    """
    pos, _ = place_with_tier(history, canvas_width, canvas_height, radius, rng, settings)
    return pos

def layout_circles(radii: Sequence[float], canvas: Canvas, rng: Optional[random.Random] = None,
                   settings: Optional[PackerSettings] = None) -> PlacementSet:
    rng = rng or random.Random()
    placed = PlacementSet()
    fallbacks = 0
    for r in radii:
        (x, y), tier = place_with_tier(placed.view(), canvas.width, canvas.height, r, rng, settings)
        if tier == TIER_FALLBACK:
            fallbacks += 1
        placed.append(PlacedCircle(x=float(x), y=float(y), radius=float(r)))
    logger.info("placed %d circles on %.0fx%.0f canvas (%d fallbacks)",
                len(placed), canvas.width, canvas.height, fallbacks)
    return placed
