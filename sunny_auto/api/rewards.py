from typing import List

from fastapi import APIRouter, Depends

from sunny_auto.core.security import get_current_account
from sunny_auto.models.profile import Account
from sunny_auto.models.rewards import EarnPointsRequest, Reward, UserRewards
from sunny_auto.services.rewards_service import REWARDS_CATALOG, rewards_service

router = APIRouter(prefix="/api/rewards")


@router.get("/catalog", response_model=List[Reward])
async def catalog():
    return REWARDS_CATALOG


@router.get("", response_model=UserRewards)
async def my_rewards(account: Account = Depends(get_current_account)):
    return await rewards_service.get(account)


@router.post("/earn", response_model=UserRewards)
async def earn(req: EarnPointsRequest, account: Account = Depends(get_current_account)):
    return await rewards_service.earn(account, req.points, req.description, req.reference_id)


@router.post("/{reward_id}/redeem", response_model=UserRewards)
async def redeem(reward_id: str, account: Account = Depends(get_current_account)):
    return await rewards_service.redeem(account, reward_id)
