from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class RewardTier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class Reward(BaseModel):
    id: str
    name: str
    description: str
    points_cost: int
    category: Literal["discount", "service", "gift", "exclusive"]
    available: bool = True
    terms: Optional[str] = None


class PointsTransaction(BaseModel):
    id: Optional[str] = None
    user_id: str
    points: int
    type: Literal["earn", "redeem", "bonus", "referral", "expired"]
    description: str
    reference_id: Optional[str] = None
    created_at: Optional[datetime] = None


class RedeemedReward(BaseModel):
    id: Optional[str] = None
    reward_id: str
    redeemed_at: Optional[datetime] = None
    used: bool = False
    expires_at: datetime


class TierStanding(BaseModel):
    tier: RewardTier
    progress: float
    next_tier_points: int


class UserRewards(BaseModel):
    total_points: int = 0
    lifetime_points: int = 0
    tier: RewardTier = RewardTier.BRONZE
    tier_progress: float = 0.0
    next_tier_points: int = 0
    referral_code: str
    transactions: List[PointsTransaction] = Field(default_factory=list)
    redeemed_rewards: List[RedeemedReward] = Field(default_factory=list)


class EarnPointsRequest(BaseModel):
    points: int = Field(gt=0)
    description: str
    reference_id: Optional[str] = None
