"""Per-request GraphQL context: a handle on the process-wide services."""

from fastapi import Request
from strawberry.fastapi import BaseContext

from src.bl_api.container import Services


class GraphQLContext(BaseContext):
    def __init__(self, services: Services) -> None:
        super().__init__()
        self.services = services


async def get_context(request: Request) -> GraphQLContext:
    """FastAPI dependency used as the GraphQLRouter context_getter."""
    return GraphQLContext(request.app.state.services)
