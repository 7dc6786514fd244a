import pytest

from helpers import message_id_of, new_client, send_email_params, state_of


def test_send_email_accepted():
    # GIVEN
    client = new_client()
    state = state_of(client)

    # WHEN
    response = client.post("/", data=send_email_params())

    # THEN (HTTP)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/xml")
    assert "<SendEmailResponse>" in response.text
    assert "<SendEmailResult>" in response.text

    # THEN (STORE)
    assert state.store.accepted_count == 1
    stored = state.store.snapshot()[0]
    assert stored.id == message_id_of(response.text)
    assert stored.fields["Source"] == "Alice <alice@example.com>"
    assert stored.fields["Message.Subject.Data"] == "Hello"


def test_each_accepted_send_gets_a_new_id():
    client = new_client()

    first = message_id_of(client.post("/", data=send_email_params()).text)
    second = message_id_of(client.post("/", data=send_email_params()).text)

    assert first and second
    assert first != second
    assert state_of(client).store.accepted_count == 2


@pytest.mark.parametrize(
    "body",
    [
        {"Message.Body.Text.Data": "text only"},
        {"Message.Body.Text.Data": None, "Message.Body.Html.Data": "<p>html only</p>"},
    ],
)
def test_either_body_part_is_enough(body):
    client = new_client()

    response = client.post("/", data=send_email_params(**body))

    assert "<SendEmailResponse>" in response.text
    assert state_of(client).store.accepted_count == 1


@pytest.mark.parametrize(
    "missing",
    [
        {"Source": None},
        {"Source": ""},
        {"Message.Subject.Data": None},
        {"Message.Subject.Data": ""},
        {"Message.Body.Text.Data": None},
        {"Destination.ToAddresses.member.1": None},
    ],
)
def test_send_email_missing_required_params(missing):
    # GIVEN
    client = new_client()
    state = state_of(client)

    # WHEN
    response = client.post("/", data=send_email_params(**missing))

    # THEN
    assert response.status_code == 200
    assert "<Code>MessageRejected</Code>" in response.text
    assert "<Message>Missing required params</Message>" in response.text
    assert state.store.accepted_count == 0
    assert len(state.store) == 0
    assert len(state.registry) == 0


def test_only_first_recipient_is_required():
    client = new_client()

    response = client.post(
        "/",
        data=send_email_params(**{
            "Destination.ToAddresses.member.1": None,
            "Destination.CcAddresses.member.1": "cc@example.com",
        }),
    )

    assert "<Code>MessageRejected</Code>" in response.text


def test_unknown_action_is_not_found():
    client = new_client()

    response = client.post("/", data=send_email_params(Action="GetSendQuota"))

    assert response.status_code == 404
    assert response.text == "Not Found"
    assert state_of(client).store.accepted_count == 0


def test_missing_action_is_not_found():
    client = new_client()

    response = client.post("/", data=send_email_params(Action=None))

    assert response.status_code == 404
    assert response.text == "Not Found"


def test_request_path_is_ignored():
    client = new_client()

    response = client.post("/some/region/endpoint", data=send_email_params())

    assert response.status_code == 200
    assert "<SendEmailResponse>" in response.text
