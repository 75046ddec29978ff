import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Context var storing the id of the tag list currently handling an operation.
current_list_id: ContextVar[str] = ContextVar("current_list_id", default="")


def setup_logging(level: str = "INFO") -> None:
    # Ensure every LogRecord has a list_id attribute, including third-party records
    _install_log_record_factory()

    root = logging.getLogger()
    if root.handlers:
        return  # already configured
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s list=%(list_id)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(level.upper())


@contextmanager
def list_context(list_id: str) -> Iterator[None]:
    """Tag log records emitted inside the block with ``list_id``."""
    token = current_list_id.set(list_id)
    try:
        yield
    finally:
        current_list_id.reset(token)


_original_factory = logging.getLogRecordFactory()


def _install_log_record_factory() -> None:
    factory = logging.getLogRecordFactory()
    if getattr(factory, "__name__", "") == "_list_inject_factory":  # already installed
        return

    def _list_inject_factory(*args, **kwargs):  # type: ignore[no-untyped-def]
        record = _original_factory(*args, **kwargs)
        # Assigned after creation so extra={"list_id": ...} never collides.
        record.list_id = current_list_id.get()  # type: ignore[attr-defined]
        return record

    _list_inject_factory.__name__ = "_list_inject_factory"  # for idempotence check
    logging.setLogRecordFactory(_list_inject_factory)
