"""Executable GraphQL schema."""

import logging

import strawberry
from graphql import GraphQLError
from strawberry.types import ExecutionContext

from src.bl_api.graphql.extensions import AppErrorExtension, OperationLogExtension
from src.bl_api.graphql.mutations import Mutation
from src.bl_api.graphql.queries import Query
from src.bl_common.errors import AppError

logger = logging.getLogger(__name__)


class BlogSchema(strawberry.Schema):
    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        # Expected AppErrors are part of the API contract; only log the rest with tracebacks.
        for error in errors:
            original = error.original_error
            if isinstance(original, AppError):
                logger.info("GraphQL error %d: %s", original.code, original.message)
            else:
                logger.error("GraphQL error: %s", error.message, exc_info=original)


schema = BlogSchema(
    query=Query,
    mutation=Mutation,
    extensions=[OperationLogExtension, AppErrorExtension],
)
