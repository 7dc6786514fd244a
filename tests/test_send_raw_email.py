from helpers import message_id_of, new_client, send_raw_email_params, state_of


def test_send_raw_email_accepted():
    # GIVEN
    client = new_client()
    state = state_of(client)
    params = send_raw_email_params()

    # WHEN
    response = client.post("/", data=params)

    # THEN
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/xml")
    assert "<SendRawEmailResponse>" in response.text
    assert "<SendRawEmailResult>" in response.text
    assert "<SendEmailResponse>" not in response.text

    stored = state.store.snapshot()[0]
    assert stored.id == message_id_of(response.text)
    assert stored.fields["RawMessage.Data"] == params["RawMessage.Data"]
    assert state.store.accepted_count == 1


def test_send_raw_email_missing_data():
    client = new_client()
    state = state_of(client)

    for params in ({"Action": "SendRawEmail"}, {"Action": "SendRawEmail", "RawMessage.Data": ""}):
        response = client.post("/", data=params)

        assert response.status_code == 200
        assert "<Code>MessageRejected</Code>" in response.text

    assert state.store.accepted_count == 0
    assert len(state.store) == 0


def test_structured_fields_do_not_satisfy_raw_send():
    client = new_client()

    response = client.post(
        "/",
        data={
            "Action": "SendRawEmail",
            "Source": "alice@example.com",
            "Message.Subject.Data": "Hello",
        },
    )

    assert "<Code>MessageRejected</Code>" in response.text
