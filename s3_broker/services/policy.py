from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = Path(__file__).resolve().parents[1] / "resources" / "default-bucket-policy.json"
BUCKET_NAME_PLACEHOLDER = "${bucketName}"


class BucketPolicyTemplateError(RuntimeError):
    pass


class BucketGroupPolicy:
    """IAM group policy document template scoped to a single bucket.

    The template is validated once when loaded; rendering afterwards is a plain
    placeholder substitution and cannot fail.
    """

    def __init__(self, template: str) -> None:
        if BUCKET_NAME_PLACEHOLDER not in template:
            raise BucketPolicyTemplateError(f"Policy template has no {BUCKET_NAME_PLACEHOLDER} placeholder")

        try:
            json.loads(template.replace(BUCKET_NAME_PLACEHOLDER, "bucket"))
        except ValueError as exc:
            raise BucketPolicyTemplateError("Policy template is not a valid JSON document") from exc

        self._template = template

    @staticmethod
    def from_file(path: Optional[Path] = None) -> "BucketGroupPolicy":
        effective_path = path or DEFAULT_POLICY_PATH
        try:
            template = effective_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BucketPolicyTemplateError(f"Failed to read policy template: {effective_path}") from exc

        logger.info("Loaded bucket group policy template from %s", effective_path)
        return BucketGroupPolicy(template)

    @staticmethod
    def from_env() -> "BucketGroupPolicy":
        raw_path = (os.getenv("BUCKET_POLICY_PATH") or "").strip()
        return BucketGroupPolicy.from_file(Path(raw_path) if raw_path else None)

    def render(self, bucket_name: str) -> str:
        return self._template.replace(BUCKET_NAME_PLACEHOLDER, bucket_name)
