import colorsys, io, math
from typing import Optional, Sequence, Tuple
from PIL import Image, ImageDraw, ImageFont
from affinities.constants import *

def hue_for_rank(rank: int, total: int) -> float:
    return (rank / max(1, total)) * HUE_SPAN

def ring_color(hue: float) -> Tuple[int, int, int, int]:
    """hsl(hue, 80%, 60%) as RGBA."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, RING_LIGHTNESS, RING_SATURATION)
    return (round(r * 255), round(g * 255), round(b * 255), 255)

def disc_mask(size: int, ss: int = MASK_SUPERSAMPLE) -> Image.Image:
    # drawn oversized, then downsampled for an anti-aliased edge
    big = Image.new("L", (size * ss, size * ss), 0)
    ImageDraw.Draw(big).ellipse([0, 0, size * ss - 1, size * ss - 1], fill=255)
    return big.resize((size, size), Image.LANCZOS)

def make_disc(img: Image.Image, size: int) -> Image.Image:
    """Centre-crop `img` to a square, scale it to `size` and clip it to a disc."""
    w, h = img.size
    side = min(w, h)
    left, top = (w - side) // 2, (h - side) // 2
    square = img.convert("RGBA").crop((left, top, left + side, top + side))
    if square.size != (size, size):
        square = square.resize((size, size), Image.LANCZOS)
    r, g, b, a = square.split()
    mask = Image.composite(a, Image.new("L", (size, size), 0), disc_mask(size))
    return Image.merge("RGBA", (r, g, b, mask))

def placeholder_disc(size: int) -> Image.Image:
    im = Image.new("RGBA", (size, size), PLACEHOLDER_FILL)
    im.putalpha(disc_mask(size))
    return im

def load_font(size: int = LABEL_FONT_SIZE):
    try:
        return ImageFont.truetype(LABEL_FONT, size=size)
    except OSError:
        return ImageFont.load_default(size=size)

def _shorten(text: str, limit: int = LABEL_MAX_CHARS) -> str:
    return text if len(text) <= limit else text[:limit - 1] + "…"

def draw_ring(draw: ImageDraw.ImageDraw, cx: float, cy: float, radius: float, color) -> None:
    r = radius + RING_OFFSET
    draw.ellipse([cx - r, cy - r, cx + r, cy + r], outline=color, width=RING_WIDTH)

def draw_label(draw: ImageDraw.ImageDraw, cx: float, top: float, name: str,
               share: Optional[float], font) -> None:
    """Name, then the percentage share, centred under the disc inside the caption band."""
    y = top
    lines = [(_shorten(name), LABEL_COLOR)]
    if share is not None:
        lines.append((f"{share:.1f}%", SHARE_COLOR))
    for text, color in lines:
        x0, y0, x1, y1 = draw.textbbox((0, 0), text, font=font)
        draw.text((cx - (x1 - x0) / 2 - x0, y - y0), text, fill=color, font=font)
        y += (y1 - y0) + LABEL_GAP

def new_canvas(width: float, height: float) -> Image.Image:
    return Image.new("RGBA", (int(math.ceil(width)), int(math.ceil(height))), BACKGROUND)

def render_cloud(width: float, height: float, placements: Sequence,
                 avatars: Sequence[Optional[Image.Image]], show_labels: bool = False) -> Image.Image:
    """
    Composite the avatars onto a fresh canvas. `placements` need x, y, size, hue, name
    and share; `avatars` lines up with them, None drawing a grey placeholder.
    """
    canvas = new_canvas(width, height)
    draw = ImageDraw.Draw(canvas)
    font = load_font() if show_labels else None
    for p, avatar in zip(placements, avatars):
        size = max(1, int(round(p.size)))
        disc = make_disc(avatar, size) if avatar is not None else placeholder_disc(size)
        canvas.alpha_composite(disc, (max(0, int(p.x)), max(0, int(p.y))))
        cx, cy = p.x + p.size / 2, p.y + p.size / 2
        draw_ring(draw, cx, cy, p.size / 2, ring_color(p.hue))
        if show_labels:
            draw_label(draw, cx, p.y + p.size + RING_WIDTH + LABEL_GAP, p.name, p.share, font)
    return canvas

def encode_png(canvas: Image.Image) -> bytes:
    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()
