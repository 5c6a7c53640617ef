from typing import Literal
from pydantic import BaseModel, Field
from affinities.constants import DEFAULT_COUNT

Segment = Literal["NON_MAU", "NON_HFU_MAU", "HFU_MAU"]

class StatusResponse(BaseModel):
    status_code: int
    detail: str | None = None

class Contact(BaseModel):
    id: str
    username: str
    global_name: str | None = None
    avatar: str | None = None

    @property
    def display_name(self) -> str:
        return self.global_name or self.username

class AffinityV1(BaseModel):
    user_id: str
    affinity: float

class AffinityV2(BaseModel):
    otherUserId: str
    userSegment: Segment = "NON_MAU"
    otherUserSegment: Segment = "NON_MAU"
    isFriend: bool = False
    dmProbability: float = 0.0
    dmRank: int = 0
    vcProbability: float = 0.0
    vcRank: int = 0
    serverMessageProbability: float = 0.0
    serverMessageRank: int = 0
    communicationProbability: float = 0.0
    communicationRank: int = 0

class CloudRequest(BaseModel):
    affinities: list[AffinityV2 | AffinityV1]
    contacts: list[Contact]
    count: int = Field(DEFAULT_COUNT, ge=1)
    algorithm: Literal["v1", "v2"] = "v2"
    show_labels: bool = False
    seed: int | None = None

class CanvasModel(BaseModel):
    width: float
    height: float

class Placement(BaseModel):
    user_id: str
    name: str
    rank: int
    score: float
    share: float
    x: float
    y: float
    size: float
    hue: float
    avatar_url: str | None = None

class LayoutResponse(BaseModel):
    canvas: CanvasModel
    placements: list[Placement]

class SavedCloudResponse(BaseModel):
    status: str
    filename: str
