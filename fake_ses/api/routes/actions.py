from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse

from fake_ses.api.dependencies import get_state
from fake_ses.services.state import SESState

router = APIRouter(tags=["actions"])


@router.post("/{path:path}")
async def handle_action(request: Request, state: SESState = Depends(get_state)):
    """
    SES query API entry point.

    The body is application/x-www-form-urlencoded; the Action parameter
    selects the operation. The path is ignored, as with the real endpoint.
    """
    body = (await request.body()).decode("utf-8", errors="replace")
    params = dict(parse_qsl(body, keep_blank_values=True))

    xml = state.dispatcher.dispatch(params.get("Action"), params)
    if xml is None:
        return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)

    return Response(content=xml, media_type="text/xml")
