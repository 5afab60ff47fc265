from chat_proxy.logging_utils import RequestLogger


def test_request_logger_merges_context_into_entries():
    logger = RequestLogger("tests.logging", context={"request_id": "abc123"})

    logger.info("Classified chat message", tier="medium")
    logger.error("Upstream provider returned an error", status_code=502)

    entries = logger.as_entries()
    assert [entry.level for entry in entries] == ["INFO", "ERROR"]
    assert entries[0].metadata == {"request_id": "abc123", "tier": "medium"}
    assert entries[1].metadata["status_code"] == 502
    assert "request_id" in logger.context


def test_request_logger_text_lines():
    logger = RequestLogger("tests.logging")
    logger.warning("Client disconnected")
    lines = logger.as_text_lines()
    assert len(lines) == 1
    assert "[WARNING] Client disconnected" in lines[0]
