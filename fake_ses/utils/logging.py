import logging

from fake_ses.config import FAKE_SES_LOG_LEVEL

# One named logger for the whole mock; FAKE_SES_LOG_LEVEL sets its level.
logger = logging.getLogger("fake_ses")
logger.setLevel(FAKE_SES_LOG_LEVEL)

# Several mock instances share this module, so attach the handler only once.
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    logger.addHandler(handler)


def redact_email(email: str) -> str:
    """
    Mask the local part of a sender address before it reaches the log.

    A display name ("Ops <ops@example.com>") is dropped and only the
    address is kept. The first and last characters of the local part stay
    visible; short local parts are left mostly as they are.

        "john.doe@gmail.com"          → "j******e@gmail.com"
        "Ops <ops@example.com>"       → "o*s@example.com"
        "ab@gmail.com"                → "a*b@gmail.com"
        "not-an-address"              → "<redacted>"
    """
    if "<" in email and email.rstrip().endswith(">"):
        email = email[email.rindex("<") + 1:].rstrip()[:-1]

    if "@" not in email:
        return "<redacted>"

    local, domain = email.split("@", 1)

    if len(local) <= 1:
        return f"{local}@{domain}"
    if len(local) == 2:
        return f"{local[0]}*{local[1]}@{domain}"

    return f"{local[0]}{'*' * (len(local) - 2)}{local[-1]}@{domain}"
