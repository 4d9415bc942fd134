"""Configuration package (Facade).

Re-exports the public config types so callers import from a single, stable path:

	from s3_broker.services.config import AwsConfig, NamingConfig

The concrete dataclasses live in ``aws_config.py`` (client construction) and
``broker_config.py`` (naming, credentials, catalog and auth settings).
"""

from s3_broker.services.config.aws_config import AwsConfig
from s3_broker.services.config.broker_config import (
	BrokerAuthConfig,
	CatalogConfig,
	CredentialsConfig,
	NamingConfig,
)

__all__ = ["AwsConfig", "BrokerAuthConfig", "CatalogConfig", "CredentialsConfig", "NamingConfig"]
