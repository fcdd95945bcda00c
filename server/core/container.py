"""Dependency injection container for the application."""

from dependency_injector import containers, providers

from core.config import Settings
from services.content_client import ContentAPIClient
from services.workflow import WorkflowService


class Container(containers.DeclarativeContainer):
    """Application dependency injection container."""

    # Settings
    settings = providers.Singleton(
        Settings,
    )

    # Content backend client (idea, draft and image suggestion collaborators)
    content_client = providers.Singleton(
        ContentAPIClient,
        base_url=settings.provided.content_api_url,
        token=settings.provided.content_api_token,
        timeout=settings.provided.api_timeout,
        draft_timeout=settings.provided.draft_timeout,
    )

    # Services
    workflow_service = providers.Singleton(
        WorkflowService,
        collaborators=content_client,
        settings=settings,
    )


# Global container instance
container = Container()
