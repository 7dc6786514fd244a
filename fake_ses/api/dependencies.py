from fastapi import Request

from fake_ses.services.state import SESState


def get_state(request: Request) -> SESState:
    """The mock instance bound to the application serving this request."""
    return request.app.state.ses
