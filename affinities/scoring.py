from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence
import numpy as np
from affinities.constants import *
from affinities.request_models import AffinityV1, AffinityV2, Contact

@dataclass(frozen=True)
class ScoredItem:
    identity: Any
    score: float

def calculate_affinity_score(affinity: AffinityV2) -> float:
    """Weighted sum of the v2 probabilities on a 0..100 scale, rounded to 2 decimals."""
    score = 0.0
    if affinity.isFriend:
        score += W_FRIEND * 100
    score += affinity.dmProbability * W_DM * 100
    score += affinity.vcProbability * W_VC * 100
    score += affinity.serverMessageProbability * W_SERVER_MSG * 100
    score += affinity.communicationProbability * W_COMMUNICATION * 100
    score = min(SCORE_MAX, max(SCORE_MIN, score))
    return round(score, 2)

def rank_affinities(records: Iterable[AffinityV1 | AffinityV2], contacts: Iterable[Contact],
                    use_v1: bool = False, count: int = DEFAULT_COUNT) -> List[ScoredItem]:
    """
    Resolve records to known contacts, score them and keep the top `count`, highest first.
    v1 records carry their score; v2 records are weighted with calculate_affinity_score.
    Records of the other algorithm and records without a matching contact are dropped.
    """
    by_id = {c.id: c for c in contacts}
    items = []
    for rec in records:
        if use_v1 and isinstance(rec, AffinityV1):
            contact, score = by_id.get(rec.user_id), rec.affinity
        elif not use_v1 and isinstance(rec, AffinityV2):
            contact, score = by_id.get(rec.otherUserId), calculate_affinity_score(rec)
        else:
            continue
        if contact is None:
            continue
        items.append(ScoredItem(identity=contact, score=float(score)))
    items.sort(key=lambda it: it.score, reverse=True)
    return items[:max(0, count)]

def size_for_score(score: float, min_score: float, max_score: float,
                   min_size: float = MIN_SIZE, max_size: float = MAX_SIZE) -> float:
    if max_score == min_score:
        return (min_size + max_size) / 2
    return min_size + ((score - min_score) / (max_score - min_score)) * (max_size - min_size)

def sizes_for_scores(scores: Sequence[float], min_size: float = MIN_SIZE,
                     max_size: float = MAX_SIZE) -> List[float]:
    """Diameters for a batch, min-max normalised against the batch's own score range."""
    if len(scores) == 0:
        return []
    arr = np.asarray(scores, dtype=np.float64)
    lo, hi = float(arr.min()), float(arr.max())
    return [size_for_score(float(s), lo, hi, min_size, max_size) for s in arr]

def percentage_shares(scores: Sequence[float]) -> List[float]:
    if len(scores) == 0:
        return []
    arr = np.clip(np.asarray(scores, dtype=np.float64), 0.0, None)
    total = arr.sum()
    if total <= 0:
        return [round(100.0 / len(arr), 1)] * len(arr)
    return [round(float(v), 1) for v in arr / total * 100.0]
