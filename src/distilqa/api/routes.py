"""API routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from ..data.features import QaInput
from ..errors import ConfigError
from ..inference import QuestionAnsweringPipeline
from .dependencies import get_pipeline
from .schemas import AnswerItem, AnswerRequest, AnswerResponse

router = APIRouter()


@router.post("/answer", response_model=AnswerResponse)
def answer(
    payload: AnswerRequest,
    pipeline: QuestionAnsweringPipeline = Depends(get_pipeline),  # noqa: B008
) -> AnswerResponse:
    inputs = [QaInput(question=item.question, context=item.context) for item in payload.inputs]
    try:
        results = pipeline.predict(
            inputs, top_k=payload.top_k, max_answer_length=payload.max_answer_length
        )
    except ConfigError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # noqa: BLE001 - surface inference error to client
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return AnswerResponse(
        answers=[
            [
                AnswerItem(answer=a.answer, score=a.score, start=a.start, end=a.end)
                for a in per_input
            ]
            for per_input in results
        ]
    )
