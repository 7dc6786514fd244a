from typing import Optional

from fastapi import FastAPI

from fake_ses.api.routes import actions, emails
from fake_ses.services.state import SESState


def create_app(state: Optional[SESState] = None) -> FastAPI:
    """
    Application factory: one app per mock instance.

    Pass an existing SESState to share it with in-process test code
    (FakeSESServer does this); otherwise a fresh one is created.
    """
    app = FastAPI(
        title="Fake SES",
        version="1.0.0",
        description="In-process stand-in for the SES email sending API, for test suites.",
    )
    app.state.ses = state or SESState()

    # Management routes must be registered before the catch-all action route.
    app.include_router(emails.router)
    app.include_router(actions.router)

    return app


# Create the FastAPI app instance (uvicorn fake_ses.main:app)
app = create_app()
