from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import ValidationError

from sunny_auto.core.errors import BackendUnavailable, NotFound, ValidationFailed
from sunny_auto.core.logger import logger
from sunny_auto.models.profile import Account
from sunny_auto.models.rewards import (
    PointsTransaction, RedeemedReward, Reward, RewardTier, TierStanding, UserRewards,
)
from sunny_auto.services.db_service import db_service

TIER_THRESHOLDS = {
    RewardTier.BRONZE: 0,
    RewardTier.SILVER: 500,
    RewardTier.GOLD: 1500,
    RewardTier.PLATINUM: 5000,
}

REDEEMED_REWARD_DAYS = 90

REWARDS_CATALOG: List[Reward] = [
    Reward(id="r1", name="10% Off Next Service", points_cost=200, category="discount",
           description="Get 10% off your next service appointment at Sunny Auto."),
    Reward(id="r2", name="Free Oil Change", points_cost=500, category="service",
           description="One complimentary standard oil change."),
    Reward(id="r3", name="25% Off Brake Service", points_cost=750, category="discount",
           description="Save 25% on any brake service."),
    Reward(id="r4", name="Free Car Wash & Detail", points_cost=300, category="service",
           description="Full exterior wash and interior detail."),
    Reward(id="r5", name="Sunny Auto Merchandise Pack", points_cost=400, category="gift",
           description="Branded cap, keychain and travel mug."),
    Reward(id="r6", name="VIP Priority Scheduling", points_cost=1000, category="exclusive",
           description="Jump the queue when booking appointments for 6 months."),
    Reward(id="r7", name="Free Tire Rotation & Balance", points_cost=250, category="service",
           description="Tire rotation and wheel balancing on us."),
    Reward(id="r8", name="$50 Service Credit", points_cost=600, category="discount",
           description="$50 off any service over $100."),
    Reward(id="r9", name="Annual Inspection Package", points_cost=350, category="service",
           description="Multi-point yearly vehicle inspection."),
    Reward(id="r10", name="Platinum Member Upgrade", points_cost=2000, category="exclusive",
           description="Instant upgrade to Platinum tier for 3 months!"),
]


def tier_standing(lifetime_points: int) -> TierStanding:
    """Tier for the lifetime points, progress (%) through it and points missing for the next one."""
    silver = TIER_THRESHOLDS[RewardTier.SILVER]
    gold = TIER_THRESHOLDS[RewardTier.GOLD]
    platinum = TIER_THRESHOLDS[RewardTier.PLATINUM]

    if lifetime_points >= platinum:
        return TierStanding(tier=RewardTier.PLATINUM, progress=100.0, next_tier_points=0)
    if lifetime_points >= gold:
        return TierStanding(tier=RewardTier.GOLD,
                            progress=(lifetime_points - gold) / (platinum - gold) * 100,
                            next_tier_points=platinum - lifetime_points)
    if lifetime_points >= silver:
        return TierStanding(tier=RewardTier.SILVER,
                            progress=(lifetime_points - silver) / (gold - silver) * 100,
                            next_tier_points=gold - lifetime_points)
    return TierStanding(tier=RewardTier.BRONZE,
                        progress=max(lifetime_points, 0) / silver * 100,
                        next_tier_points=silver - lifetime_points)


def referral_code(user_id: str) -> str:
    return f"SUNNY{user_id[:6].upper()}"


def find_reward(reward_id: str) -> Reward:
    for reward in REWARDS_CATALOG:
        if reward.id == reward_id:
            return reward
    raise NotFound(f"Reward {reward_id} not found")


def _parse_all(model, rows):
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping malformed {model.__name__} row: {e.error_count()} errors")
    return parsed


class RewardsService:
    async def get(self, account: Account) -> UserRewards:
        row = await db_service.get_user_rewards(account.id) or {}
        total = int(row.get("total_points") or 0)
        lifetime = int(row.get("lifetime_points") or 0)
        standing = tier_standing(lifetime)

        return UserRewards(
            total_points=total,
            lifetime_points=lifetime,
            tier=standing.tier,
            tier_progress=standing.progress,
            next_tier_points=standing.next_tier_points,
            referral_code=referral_code(account.id),
            transactions=_parse_all(PointsTransaction, await db_service.list_points_transactions(account.id)),
            redeemed_rewards=_parse_all(RedeemedReward, await db_service.list_redeemed_rewards(account.id)),
        )

    async def earn(self, account: Account, points: int, description: str,
                   reference_id: Optional[str] = None) -> UserRewards:
        if points <= 0:
            raise ValidationFailed("Points must be positive")

        current = await self.get(account)
        now = datetime.now(timezone.utc)
        if not await db_service.save_points(account.id, current.total_points + points,
                                            current.lifetime_points + points, now.isoformat()):
            raise BackendUnavailable("Failed to add points")

        await db_service.insert_row("points_transactions", {
            "user_id": account.id,
            "points": points,
            "type": "earn",
            "description": description,
            "reference_id": reference_id,
        })
        logger.info(f"⭐ {account.email} earned {points} points")
        return await self.get(account)

    async def redeem(self, account: Account, reward_id: str) -> UserRewards:
        """Debits the reward's cost; lifetime points (and so the tier) are unaffected."""
        reward = find_reward(reward_id)
        current = await self.get(account)
        if current.total_points < reward.points_cost:
            raise ValidationFailed("Not enough points to redeem this reward")

        now = datetime.now(timezone.utc)
        if not await db_service.save_points(account.id, current.total_points - reward.points_cost,
                                            current.lifetime_points, now.isoformat()):
            raise BackendUnavailable("Failed to redeem reward")

        await db_service.insert_row("points_transactions", {
            "user_id": account.id,
            "points": -reward.points_cost,
            "type": "redeem",
            "description": f"Redeemed: {reward.name}",
            "reference_id": reward.id,
        })
        await db_service.insert_row("redeemed_rewards", {
            "user_id": account.id,
            "reward_id": reward.id,
            "expires_at": (now + timedelta(days=REDEEMED_REWARD_DAYS)).isoformat(),
        })
        logger.info(f"🎁 {account.email} redeemed {reward.name}")
        return await self.get(account)


rewards_service = RewardsService()
