import json
import logging
import random
import uuid
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional, Sequence
from PIL import Image
from affinities.avatars import Fetcher, avatar_url, fetch_avatar, fetch_avatars
from affinities.constants import *
from affinities.layout import Canvas, calculate_canvas_size, layout_circles
from affinities.render import encode_png, hue_for_rank, render_cloud
from affinities.request_models import Contact
from affinities.scoring import ScoredItem, percentage_shares, sizes_for_scores

logger = logging.getLogger(__name__)

class NoAffinitiesError(LookupError):
    pass

@dataclass
class PlacedAvatar:
    user_id: str
    name: str
    rank: int
    score: float
    share: float
    x: float
    y: float
    size: float
    hue: float
    avatar_url: Optional[str] = None

def _describe(identity) -> tuple:
    if isinstance(identity, Contact):
        return identity.id, identity.display_name, avatar_url(identity)
    return str(identity), str(identity), None

class AffinityCloud:
    def __init__(self, items: Sequence[ScoredItem], min_size: float = MIN_SIZE, max_size: float = MAX_SIZE,
                 show_labels: bool = False, rng: Optional[random.Random] = None,
                 fetcher: Fetcher = fetch_avatar):
        if not items:
            raise NoAffinitiesError(NO_AFFINITIES_MESSAGE)
        # placement order is rank order
        self.items = sorted(items, key=lambda it: it.score, reverse=True)
        self.min_size = min_size
        self.max_size = max_size
        self.show_labels = show_labels
        self.rng = rng or random.Random()
        self.fetcher = fetcher
        self.canvas: Optional[Canvas] = None
        self.placements: List[PlacedAvatar] = []

    def layout(self) -> List[PlacedAvatar]:
        scores = [it.score for it in self.items]
        sizes = sizes_for_scores(scores, self.min_size, self.max_size)
        shares = percentage_shares(scores)
        avg_size = (self.min_size + self.max_size) / 2
        logger.info("laying out %d avatars", len(self.items))
        self.canvas = calculate_canvas_size(len(self.items), avg_size)
        circles = layout_circles([s / 2 for s in sizes], self.canvas, rng=self.rng)

        n = len(self.items)
        self.placements = []
        for rank, (item, circle, share) in enumerate(zip(self.items, circles, shares)):
            user_id, name, url = _describe(item.identity)
            self.placements.append(PlacedAvatar(
                user_id=user_id, name=name, rank=rank, score=item.score, share=share,
                x=circle.x, y=circle.y, size=circle.size, hue=hue_for_rank(rank, n),
                avatar_url=url,
            ))
        return self.placements

    def render(self) -> Image.Image:
        if not self.placements:
            self.layout()
        avatars = fetch_avatars([p.avatar_url for p in self.placements], fetcher=self.fetcher)
        missing = sum(1 for a in avatars if a is None)
        if missing:
            logger.warning("%d of %d avatars unavailable, drawing placeholders", missing, len(avatars))
        return render_cloud(self.canvas.width, self.canvas.height, self.placements, avatars,
                            show_labels=self.show_labels)

    def to_png(self) -> bytes:
        return encode_png(self.render())

    def placement_data(self) -> dict:
        if not self.placements:
            self.layout()
        return {
            "canvas": {"width": self.canvas.width, "height": self.canvas.height},
            "placements": [asdict(p) for p in self.placements],
        }

    def save_cloud(self, out_dir: str = SAVE_DIR) -> tuple:
        """Write the PNG and its placement JSON side by side; returns both paths."""
        out = Path(out_dir); out.mkdir(parents=True, exist_ok=True)
        cloud_id = str(uuid.uuid4())
        stem = Path(OUTPUT_FILENAME).stem
        out_png = out / f"{stem}_{cloud_id}.png"
        self.render().save(out_png)

        out_json = out / f"{stem}_{cloud_id}_placement.json"
        with open(out_json, "w", encoding="utf-8") as f:
            json.dump(self.placement_data(), f, ensure_ascii=False, indent=2)
        logger.info("wrote %s and %s", out_png, out_json)
        return str(out_png), str(out_json)
