import io
import logging
from rich.console import Console
from strapiclient.logging_config import get_logger, setup_sdk_logging


def test_null_handler_silence(capsys):
    """Verifies that the logger is silent before setup_sdk_logging is called."""
    # Get a logger for a dummy module
    test_logger = get_logger("strapiclient.test_silence")

    # Emit a log message
    test_logger.warning("This should go into the void")

    # Check capsys (captures stdout/stderr)
    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""


def test_sdk_logger_has_null_handler():
    """Checks that the root strapiclient logger defaults to a NullHandler."""
    sdk_logger = get_logger()

    assert sdk_logger.name == "strapiclient"
    assert any(isinstance(h, logging.NullHandler) for h in sdk_logger.handlers), (
        "SDK root logger should have a NullHandler by default to prevent 'no handler' warnings."
    )


def test_logs_are_generated_but_swallowed(caplog):
    test_logger = get_logger("strapiclient.models.query.serializer")

    with caplog.at_level(logging.DEBUG):
        test_logger.debug("Built request URL")

    assert "Built request URL" in caplog.text


def test_url_assembly_is_logged_at_debug(caplog):
    from strapiclient import StrapiRequest

    with caplog.at_level(logging.DEBUG, logger="strapiclient"):
        StrapiRequest.get("articles").with_page(2).to_url("http://localhost:1337/api")

    assert "articles?pagination[page]=2" in caplog.text


# --- These override the NullHandler (restored by the conftest fixture)


def test_setup_clears_existing_handlers():
    """Verify that multiple calls do not duplicate handlers."""
    setup_sdk_logging(level="INFO", pretty=False)
    setup_sdk_logging(level="DEBUG", pretty=False)

    logger = get_logger()
    # Should only have 1 handler despite two setup calls
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_setup_uses_provided_console():
    """Verify the logger outputs to the specific console provided."""
    custom_output = io.StringIO()
    test_console = Console(file=custom_output, force_terminal=True, width=200)

    setup_sdk_logging(level="INFO", pretty=True, console=test_console)
    logger = get_logger()
    logger.info("Test Console Sync")

    output = custom_output.getvalue()
    # Verify 'Rich' formatting and our custom 'name' formatting exists
    assert "strapiclient" in output
    assert "Test Console Sync" in output


def test_logger_isolation():
    """Ensure SDK logs do not propagate to the root logger."""
    setup_sdk_logging()
    logger = get_logger()

    assert logger.propagate is False


def test_propagation_can_be_enabled():
    setup_sdk_logging(propagate=True)
    assert get_logger().propagate is True
