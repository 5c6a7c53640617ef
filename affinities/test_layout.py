import math
import random

import pytest

from affinities.constants import *
from affinities.layout import (
    TIER_CENTER, TIER_FALLBACK, TIER_NEIGHBOR, TIER_UNIFORM,
    Canvas, PackerSettings, PlacedCircle, PlacementSet,
    calculate_canvas_size, generate_disk_position, grid_shape, layout_circles, place_with_tier,
)

def place_many(radii, width, height, seed=7):
    rng = random.Random(seed)
    placed, tiers = PlacementSet(), []
    for r in radii:
        (x, y), tier = place_with_tier(placed.view(), width, height, r, rng)
        placed.append(PlacedCircle(x, y, r))
        tiers.append(tier)
    return placed, tiers

def test_empty_history_is_dead_center():
    assert generate_disk_position([], 1000, 700, 100) == (400.0, 250.0)
    assert generate_disk_position([], 1333, 911, 37.5) == (1333 / 2 - 37.5, 911 / 2 - 37.5)

def test_sizer_single_item_hits_floor():
    canvas = calculate_canvas_size(1, 120)
    assert canvas.width >= MIN_CANVAS_WIDTH
    assert canvas.height >= MIN_CANVAS_HEIGHT

def test_sizer_grid_holds_every_item():
    for n in range(1, 301):
        cols, rows = grid_shape(n)
        assert cols * rows >= n

def test_sizer_grows_past_floor():
    cols, rows = grid_shape(100)
    canvas = calculate_canvas_size(100, 120)
    assert canvas.width == cols * (120 + GRID_PADDING) + GRID_PADDING
    assert canvas.height == rows * (120 + TEXT_SPACE + GRID_PADDING) + GRID_PADDING
    assert canvas.width > canvas.height

def test_sizer_clamps_nonpositive_count():
    assert calculate_canvas_size(0, 120) == calculate_canvas_size(1, 120)

def test_placements_stay_inside_and_apart():
    width, height = 1400, 1000
    radii = [50, 46, 42, 40, 36, 33, 30, 28, 25, 24, 22, 20, 20, 20]
    placed, tiers = place_many(radii, width, height)

    for c, tier in zip(placed, tiers):
        if tier == TIER_FALLBACK:
            continue
        cx, cy = c.center
        assert EDGE_PADDING + c.radius <= cx <= width - EDGE_PADDING - c.radius
        assert EDGE_PADDING + c.radius <= cy <= height - TEXT_SPACE - EDGE_PADDING - c.radius

    circles = list(placed)
    for j, later in enumerate(circles):
        if tiers[j] == TIER_FALLBACK:
            continue
        for earlier in circles[:j]:
            (ax, ay), (bx, by) = earlier.center, later.center
            dist = math.hypot(ax - bx, ay - by)
            min_dist = later.radius * MIN_DIST_FACTOR
            assert dist >= (earlier.radius + later.radius) + (min_dist - later.radius) - 1e-9

def test_first_tier_then_neighbor_sampling():
    _, tiers = place_many([60, 50, 40], 1000, 700)
    assert tiers[0] == TIER_CENTER
    assert tiers[1] == TIER_NEIGHBOR

def test_circle_diameter_and_size():
    c = PlacedCircle(0, 0, 5)
    assert c.diameter == 10
    assert c.size == c.diameter
    assert c.center == (5, 5)

def test_neighbor_sampling_lands_near_an_earlier_circle():
    r = 30
    placed, tiers = place_many([r] * 12, 1400, 1000, seed=21)
    circles = list(placed)
    neighbor_steps = [j for j, tier in enumerate(tiers) if tier == TIER_NEIGHBOR]
    assert neighbor_steps
    for j in neighbor_steps:
        cx, cy = circles[j].center
        assert any(MIN_DIST_FACTOR * r <= math.hypot(cx - ex, cy - ey) < 2 * MIN_DIST_FACTOR * r
                   for ex, ey in (c.center for c in circles[:j]))

def test_neighbor_sampling_from_base_center():
    history = [PlacedCircle(440, 290, 60)]
    (x, y), tier = place_with_tier(history, 1000, 700, 50, random.Random(8))
    assert tier == TIER_NEIGHBOR
    dist = math.hypot(x + 50 - 500, y + 50 - 350)
    # clear of the base, yet inside the sampling ring [1.5 r, 3 r)
    assert 60 + 50 * MIN_DIST_FACTOR <= dist < 2 * 50 * MIN_DIST_FACTOR

def test_large_base_falls_through_to_uniform():
    # base radius >= 1.5 r: every ring sample is too close to the base
    history = [PlacedCircle(400, 250, 100)]
    _, tier = place_with_tier(history, 1000, 700, 50, random.Random(8))
    assert tier == TIER_UNIFORM

def test_place_does_not_mutate_history():
    history = [PlacedCircle(400, 250, 100)]
    generate_disk_position(history, 1000, 700, 50, random.Random(1))
    assert history == [PlacedCircle(400, 250, 100)]

def test_uniform_tier_when_neighbor_sampling_disabled():
    settings = PackerSettings(max_outer_tries=0)
    history = [PlacedCircle(400, 250, 100)]
    (x, y), tier = place_with_tier(history, 1000, 700, 40, random.Random(3), settings)
    assert tier == TIER_UNIFORM
    cx, cy = x + 40, y + 40
    assert math.hypot(cx - 500, cy - 350) >= 100 + 40 * MIN_DIST_FACTOR

def test_fallback_corner_when_nothing_fits():
    history = [PlacedCircle(0, 0, 60)]
    (x, y), tier = place_with_tier(history, 100, 100, 60, random.Random(0))
    assert tier == TIER_FALLBACK
    assert (x, y) == (EDGE_PADDING, EDGE_PADDING)

def test_seeded_layouts_repeat():
    canvas = Canvas(1000, 700)
    radii = [80, 70, 60, 50, 40]
    a = layout_circles(radii, canvas, rng=random.Random(42))
    b = layout_circles(radii, canvas, rng=random.Random(42))
    assert list(a) == list(b)

def test_layout_keeps_input_order():
    radii = [100, 75, 50]
    placed = layout_circles(radii, Canvas(1000, 700), rng=random.Random(5))
    assert len(placed) == 3
    assert [c.radius for c in placed] == radii
    assert (placed[0].x, placed[0].y) == (400.0, 250.0)

def test_three_item_scenario():
    # diameters 200, 150, 100 from scores 90, 50, 10
    canvas = calculate_canvas_size(3, 150)
    assert (canvas.width, canvas.height) == (1000, 700)
    placed, tiers = place_many([100, 75, 50], canvas.width, canvas.height, seed=11)
    assert (placed[0].x, placed[0].y) == (400.0, 250.0)
    assert TIER_FALLBACK not in tiers
    circles = list(placed)
    for j in (1, 2):
        for i in range(j):
            (ax, ay), (bx, by) = circles[i].center, circles[j].center
            assert math.hypot(ax - bx, ay - by) >= circles[i].radius + circles[j].radius * MIN_DIST_FACTOR - 1e-9

def test_saturated_canvas_still_returns_positions():
    canvas = calculate_canvas_size(25, (MIN_SIZE + MAX_SIZE) / 2)
    placed = layout_circles([60] * 200, canvas, rng=random.Random(9))
    assert len(placed) == 200
    assert any((c.x, c.y) == (EDGE_PADDING, EDGE_PADDING) for c in placed)

@pytest.mark.parametrize("seed", [0, 1, 2])
def test_placement_set_is_append_only(seed):
    placed = layout_circles([30, 30, 30], Canvas(1000, 700), rng=random.Random(seed))
    snapshot = placed.view()
    placed.append(PlacedCircle(0, 0, 1))
    assert placed.view()[:3] == snapshot
    assert len(placed) == 4
