"""Relational schema management for the Logistics domain."""

from protean.domain import Domain
from sqlalchemy import create_engine

_RELATIONAL_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider_name: str) -> None:
    # Touching ``_dao`` builds the SQLAlchemy model and registers it on the provider metadata
    records = [
        *domain.registry.aggregates.values(),
        *domain.registry.entities.values(),
        *domain.registry.projections.values(),
    ]
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every relational provider. Returns the provider names touched."""
    touched = []
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _RELATIONAL_PROVIDERS:
                continue
            _register_models(domain, name)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    touched = []
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _RELATIONAL_PROVIDERS:
                continue
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(name)
    return touched
