from dependency_injector import containers, providers

from walletexport.config import Settings
from walletexport.infra.blockchain.pagination import Paginator
from walletexport.infra.blockchain.registry import build_default_registry
from walletexport.service import WalletExporter


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    credentials = providers.Object(None)

    registry = providers.Singleton(
        build_default_registry,
        settings=settings,
        credentials=credentials,
    )

    paginator = providers.Factory(
        Paginator,
        max_pages=settings.provided.max_pages,
        max_attempts=settings.provided.max_attempts,
        backoff_seconds=settings.provided.retry_backoff_seconds,
    )

    exporter = providers.Factory(
        WalletExporter,
        registry=registry,
        paginator=paginator,
        concurrent=settings.provided.concurrent_branches,
    )
