from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import StrictBool, TypeAdapter, ValidationError

from fake_ses.api.dependencies import get_state
from fake_ses.models.schemas import ParsedEmail
from fake_ses.services.state import SESState

router = APIRouter(tags=["management"])

failure_outcomes = TypeAdapter(List[StrictBool])


@router.get("/emails", response_model=List[ParsedEmail])
def list_emails(state: SESState = Depends(get_state)):
    return state.retrieval.list_accepted()


@router.delete("/emails")
def clear_emails(state: SESState = Depends(get_state)):
    state.retrieval.clear()
    return Response(status_code=status.HTTP_200_OK)


@router.post("/errors")
async def push_errors(request: Request, state: SESState = Depends(get_state)):
    # The body is a JSON array of booleans whatever Content-Type the client
    # sets. Each entry is consumed by one subsequent action request:
    # true drops it with a 404, false lets it through.
    try:
        outcomes = failure_outcomes.validate_json(await request.body())
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    state.retrieval.push_failures(outcomes)
    return Response(status_code=status.HTTP_200_OK)
