import structlog

from goldpeg.config import settings
from goldpeg.logging_config import add_network_name, bind_session_context, clear_session_context


def test_network_name_added_for_known_chains():
    event = add_network_name(None, "info", {"event": "connected", "chain_id": settings.chain_id})
    assert event["network"] == "rootstock"

    event = add_network_name(None, "info", {"event": "connected", "chain_id": 1})
    assert event["network"] == "unsupported"


def test_lines_without_chain_are_untouched():
    assert add_network_name(None, "info", {"event": "poll"}) == {"event": "poll"}


def test_session_context_bind_and_clear():
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id="abc")

    bind_session_context(account="0xabcd...ef01", chain_id=31)
    assert structlog.contextvars.get_contextvars() == {
        "request_id": "abc",
        "account": "0xabcd...ef01",
        "chain_id": 31,
    }

    clear_session_context()
    assert structlog.contextvars.get_contextvars() == {"request_id": "abc"}
    structlog.contextvars.clear_contextvars()
