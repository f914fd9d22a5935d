"""
Dependency injection container using dependency-injector.
Wires the shared cache, external integration clients, and health controller.
Tests override the integration providers with in-memory fakes.
"""

from dependency_injector import containers, providers

from backoffice.core.cache import cache
from backoffice.core.integrations.azure.blob_client import AzureBlobClient
from backoffice.core.integrations.invoice_generator.invoice_generator_client import InvoiceGeneratorClient
from backoffice.core.integrations.toggl.toggl_client import TogglClient
from backoffice.services.health_service import HealthService
from backoffice.controllers.health_controller import HealthController


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Process-wide TTL cache
    cache = providers.Object(cache)

    # External integrations
    toggl_client = providers.Singleton(TogglClient)
    blob_client = providers.Singleton(AzureBlobClient)
    invoice_generator_client = providers.Singleton(InvoiceGeneratorClient)

    # Services
    health_service = providers.Singleton(
        HealthService,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


# Global container instance
_container: Container = None


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = Container()
    return _container


async def shutdown_container(container: Container) -> None:
    """Close the HTTP sessions held by integration clients."""
    for provider in (container.toggl_client, container.invoice_generator_client):
        await provider().close()
