"""Schema extensions: operation logging and AppError tagging.

Log format:
    INFO [graphql] CreatePost → 0 errors (23ms) req_a1b2c3d4e5f6
"""

import logging
import time
import uuid
from collections.abc import Iterator

from strawberry.extensions import SchemaExtension

from src.bl_common.errors import AppError, InternalError

logger = logging.getLogger("bl.request")


class OperationLogExtension(SchemaExtension):
    """Logs every GraphQL operation with name, error count, latency and a short request ID."""

    def on_operation(self) -> Iterator[None]:
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        start = time.perf_counter()
        yield
        elapsed_ms = (time.perf_counter() - start) * 1000

        result = self.execution_context.result
        errors = getattr(result, "errors", None) or []
        logger.info(
            "[graphql] %s → %d errors (%.0fms) %s",
            self.execution_context.operation_name or "anonymous",
            len(errors),
            elapsed_ms,
            request_id,
        )


class AppErrorExtension(SchemaExtension):
    """Adds ``code`` and ``status`` to the extensions of resolver errors.

    AppErrors carry their own code; any other exception raised by a resolver is
    reported as InternalError. Parse and validation errors have no original
    error and are left untouched.
    """

    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        for error in getattr(result, "errors", None) or []:
            original = error.original_error
            if original is None:
                continue
            if not isinstance(original, AppError):
                original = InternalError()
            error.extensions = {
                **(error.extensions or {}),
                "code": original.code,
                "status": original.http_status,
            }
