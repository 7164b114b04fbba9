"""
Logging for the wallet session and price feed.

Stdlib loggers (``logging.getLogger(__name__)``) are routed through structlog.
Lines emitted while a wallet is connected carry the short account address,
the chain id and a readable network name, bound via ``bind_session_context``.
"""

import logging
import sys
from typing import Any, Dict, List, Optional

import structlog

from .config import settings


# Transport libraries log every RPC round-trip at INFO
QUIET_LOGGERS = ("httpcore", "httpx")


def _network_names() -> Dict[int, str]:
    return {
        settings.chain_id: "rootstock",
        settings.testnet_chain_id: "rootstock-testnet",
        settings.local_chain_id: "local",
    }


def add_network_name(_logger: Any, _method: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor: name the network for any line carrying ``chain_id``."""
    chain_id = event_dict.get("chain_id")
    if chain_id is not None and "network" not in event_dict:
        event_dict["network"] = _network_names().get(chain_id, "unsupported")
    return event_dict


def _build_processors(json_output: bool) -> List[Any]:
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        add_network_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(log_level: Optional[str] = None) -> None:
    """Route stdlib logging through structlog on stderr.

    DEBUG renders colored console lines; any other level renders JSON.
    """
    level = logging.getLevelName((log_level or settings.log_level).upper())
    if not isinstance(level, int):
        level = logging.INFO
    json_output = level != logging.DEBUG

    pre_chain = _build_processors(json_output)
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_session_context(**values: Any) -> None:
    """Attach wallet identifiers (``account``, ``chain_id``) to later log lines."""
    structlog.contextvars.bind_contextvars(**values)


def clear_session_context() -> None:
    structlog.contextvars.unbind_contextvars("account", "chain_id")
