"""
FastAPI dependencies for identity, the document store and the domain services.
"""

from functools import lru_cache
from typing import Annotated, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fluentpath.ai import (
    ApiKeyVault,
    PracticeToolRunner,
    PromptLibrary,
    Provider,
    TextGenerator,
    build_generators,
)
from fluentpath.config import get_settings
from fluentpath.database import async_session_maker
from fluentpath.engines.progress import ProgressLedger, resolve_timezone
from fluentpath.engines.syllabus import SyllabusService
from fluentpath.engines.videos import VideoCatalog
from fluentpath.kernel.identity import AccessTokenPayload, verify_access_token
from fluentpath.kernel.store import DocumentStore
from fluentpath.logging_config import learner_id_var


# Security scheme
security = HTTPBearer(auto_error=False)


def get_document_store() -> DocumentStore:
    """Document store over the application's session factory."""
    settings = get_settings()
    return DocumentStore(async_session_maker, max_attempts=settings.transaction_max_attempts)


Store = Annotated[DocumentStore, Depends(get_document_store)]


def get_ledger(store: Store) -> ProgressLedger:
    settings = get_settings()
    return ProgressLedger(store, tz=resolve_timezone(settings.progress_timezone))


Ledger = Annotated[ProgressLedger, Depends(get_ledger)]


def get_syllabus_service(store: Store, ledger: Ledger) -> SyllabusService:
    return SyllabusService(store, ledger)


def get_video_catalog(store: Store, ledger: Ledger) -> VideoCatalog:
    return VideoCatalog(store, ledger)


def get_prompt_library(store: Store) -> PromptLibrary:
    return PromptLibrary(store)


def get_key_vault(store: Store) -> ApiKeyVault:
    return ApiKeyVault(store, get_settings())


@lru_cache
def get_generators() -> Dict[Provider, TextGenerator]:
    """Process-wide provider clients (closed on shutdown)."""
    return build_generators(get_settings())


def get_tool_runner(
    prompts: Annotated[PromptLibrary, Depends(get_prompt_library)],
    vault: Annotated[ApiKeyVault, Depends(get_key_vault)],
    generators: Annotated[Dict[Provider, TextGenerator], Depends(get_generators)],
) -> PracticeToolRunner:
    return PracticeToolRunner(prompts=prompts, vault=vault, generators=generators, settings=get_settings())


Syllabus = Annotated[SyllabusService, Depends(get_syllabus_service)]
Videos = Annotated[VideoCatalog, Depends(get_video_catalog)]
Prompts = Annotated[PromptLibrary, Depends(get_prompt_library)]
KeyVault = Annotated[ApiKeyVault, Depends(get_key_vault)]
ToolRunner = Annotated[PracticeToolRunner, Depends(get_tool_runner)]


async def get_current_learner(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AccessTokenPayload:
    """Learner identified by the bearer token, or 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Picked up by the logging filter for the rest of the request
    learner_id_var.set(payload.sub)
    return payload


CurrentLearner = Annotated[AccessTokenPayload, Depends(get_current_learner)]


async def require_admin(learner: CurrentLearner) -> AccessTokenPayload:
    """Require the current token to carry the admin role."""
    if not learner.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return learner


AdminLearner = Annotated[AccessTokenPayload, Depends(require_admin)]


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
