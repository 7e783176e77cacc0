"""Route owner facade over a FastAPI route table."""

from routemcp.routing.wrapper import RouterWrapper, error_handler, http_error_handler

__all__ = [
    "RouterWrapper",
    "error_handler",
    "http_error_handler",
]
