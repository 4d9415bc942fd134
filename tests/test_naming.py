"""Tests for resource name derivation."""

from __future__ import annotations

import pytest

from s3_broker.services.config import NamingConfig
from s3_broker.services.naming import ResourceNamer


def test_default_prefixes(namer: ResourceNamer) -> None:
    assert namer.bucket_name("abc") == "cloud-foundry-abc"
    assert namer.group_name("abc") == "cloud-foundry-s3-abc"
    assert namer.policy_name("abc") == "cloud-foundry-s3-abc"
    assert namer.user_name("bind-1") == "cloud-foundry-s3-bind-1"
    assert namer.group_path == "/cloud-foundry/s3/"
    assert namer.user_path == "/cloud-foundry/s3/"


def test_custom_prefixes() -> None:
    namer = ResourceNamer(
        NamingConfig(
            bucket_name_prefix="b-",
            group_path="/g/",
            group_name_prefix="g-",
            policy_name_prefix="p-",
            user_path="/u/",
            user_name_prefix="u-",
        )
    )

    assert namer.bucket_name("1") == "b-1"
    assert namer.group_name("1") == "g-1"
    assert namer.policy_name("1") == "p-1"
    assert namer.user_name("1") == "u-1"
    assert namer.group_path == "/g/"
    assert namer.user_path == "/u/"


def test_names_are_stable_across_instances() -> None:
    first = ResourceNamer(NamingConfig())
    second = ResourceNamer(NamingConfig())

    assert first.bucket_name("instance") == second.bucket_name("instance")
    assert first.group_name("instance") == second.group_name("instance")


@pytest.mark.parametrize("method", ["bucket_name", "group_name", "policy_name", "user_name"])
def test_distinct_ids_never_collide(namer: ResourceNamer, method: str) -> None:
    ids = ["a", "b", "ab", "a-b", "A", "", "0", "00", "6f1c3c4e-7b0b-4a43-9a8e-5a2c1f2d3e4f"]
    names = [getattr(namer, method)(i) for i in ids]

    assert len(set(names)) == len(ids)
