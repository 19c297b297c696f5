"""
Learner settings endpoints - personal API keys.
"""

from fastapi import APIRouter, HTTPException, status

from fluentpath.api.deps import CurrentLearner, KeyVault
from fluentpath.schemas.settings import ApiKeysResponse, ApiKeysUpdateRequest

router = APIRouter()


@router.get("/api-keys", response_model=ApiKeysResponse)
async def get_api_keys(learner: CurrentLearner, vault: KeyVault):
    """Saved key slots, masked."""
    return ApiKeysResponse(keys=await vault.masked(learner.sub))


@router.put("/api-keys", response_model=ApiKeysResponse)
async def save_api_keys(body: ApiKeysUpdateRequest, learner: CurrentLearner, vault: KeyVault):
    """Save key slots; slots not sent keep their stored value."""
    try:
        masked = await vault.save(learner.sub, body.keys)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return ApiKeysResponse(keys=masked, message="API keys saved successfully!")
