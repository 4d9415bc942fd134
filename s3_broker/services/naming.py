from __future__ import annotations

from s3_broker.services.config import NamingConfig


class ResourceNamer:
    """Derives AWS resource names from broker instance/binding ids.

    Names are the only link between broker ids and AWS resources, so every
    lookup recomputes them here instead of storing them anywhere.
    """

    def __init__(self, config: NamingConfig) -> None:
        self._config = config

    @property
    def group_path(self) -> str:
        return self._config.group_path

    @property
    def user_path(self) -> str:
        return self._config.user_path

    def bucket_name(self, instance_id: str) -> str:
        return self._config.bucket_name_prefix + instance_id

    def group_name(self, instance_id: str) -> str:
        return self._config.group_name_prefix + instance_id

    def policy_name(self, instance_id: str) -> str:
        return self._config.policy_name_prefix + instance_id

    def user_name(self, binding_id: str) -> str:
        return self._config.user_name_prefix + binding_id
