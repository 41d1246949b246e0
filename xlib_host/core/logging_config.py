from __future__ import annotations

import logging

_FORMAT = '[%(levelname)s] %(name)s: %(message)s'

# Bundle modules log beneath the synthetic library namespace; their chatter
# is capped at INFO unless the host asks for DEBUG explicitly.
_LIBRARY_LOGGER = 'xlib_host.libraries'


def _ensure_stream_handler(logger: logging.Logger) -> None:
    handler_exists = any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    if handler_exists:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)


def configure_logging(level_name: str | None = None, *, library_level: str | None = None) -> None:
    """Configure the root logger for a host process embedding the loader."""

    lvl = getattr(logging, (level_name or 'INFO').upper(), logging.INFO)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(lvl)
    _ensure_stream_handler(root_logger)

    lib_logger = logging.getLogger(_LIBRARY_LOGGER)
    if library_level:
        lib_lvl = getattr(logging, library_level.upper(), logging.INFO)
        lib_logger.setLevel(lib_lvl if isinstance(lib_lvl, int) else logging.INFO)
    elif lvl < logging.INFO:
        lib_logger.setLevel(logging.INFO)
