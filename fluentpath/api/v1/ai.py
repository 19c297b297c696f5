"""
AI practice endpoints - prompts, raw generation and practice tools.
"""

from fastapi import APIRouter, HTTPException, status

from fluentpath.ai import PRACTICE_TOOLS, UnknownPromptError, UnknownToolError, check_pronunciation
from fluentpath.api.deps import CurrentLearner, Prompts, ToolRunner
from fluentpath.engines.progress import MalformedInputError
from fluentpath.schemas.ai import (
    GenerateRequest,
    GenerateResponse,
    PromptsResponse,
    PronunciationCheckRequest,
    PronunciationCheckResponse,
    ToolRequest,
    ToolResponse,
)

router = APIRouter()


@router.get("/prompts", response_model=PromptsResponse)
async def get_prompts(learner: CurrentLearner, prompts: Prompts):
    """Prompt templates: defaults merged with stored overrides."""
    return PromptsResponse(prompts=await prompts.all())


@router.post("/generate", response_model=GenerateResponse)
async def generate(body: GenerateRequest, learner: CurrentLearner, runner: ToolRunner):
    """Send one prompt to one provider. Provider failures come back as success=false."""
    try:
        result = await runner.generate(
            learner.sub, body.provider, body.prompt, model=body.model, slot=body.key_slot
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return GenerateResponse(
        success=result.success,
        response=result.text,
        error=result.error_message,
        provider=result.provider,
        model=result.model,
    )


@router.get("/tools", response_model=list[str])
async def list_tools(learner: CurrentLearner):
    return sorted(PRACTICE_TOOLS)


@router.post("/tools/{tool}", response_model=ToolResponse)
async def run_tool(tool: str, body: ToolRequest, learner: CurrentLearner, runner: ToolRunner):
    """Run a practice tool (sentence improver, vocabulary builder, grammar gym, ...)."""
    try:
        result = await runner.run(learner.sub, tool, body.inputs, count=body.count, model=body.model)
    except (UnknownToolError, UnknownPromptError) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown tool: {tool}") from exc
    except MalformedInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return ToolResponse(
        tool=result.tool,
        success=result.success,
        text=result.text,
        items=result.items,
        error=result.error_message,
        provider=result.provider,
        model=result.model,
    )


@router.post("/pronunciation/check", response_model=PronunciationCheckResponse)
async def check_pronunciation_attempt(body: PronunciationCheckRequest, learner: CurrentLearner):
    """Score a recognised utterance against the practice sentence."""
    try:
        feedback = check_pronunciation(body.expected, body.spoken)
    except MalformedInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return PronunciationCheckResponse(**feedback.model_dump())
