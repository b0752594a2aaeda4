"""
Structured logging for fetchbridge.

Import directly from sub-modules:
    from fetchbridge.logging.setup import get_logger, setup_logging
    from fetchbridge.logging.utilities import log_with_context, log_exception
    from fetchbridge.logging.context import log_context
"""
