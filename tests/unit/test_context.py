"""Tests for MigrationContext and the key layout helpers."""

import dataclasses
from pathlib import Path

import pytest

from content_migrator.core.config import MigrationConfig
from content_migrator.core.context import (
    MigrationContext,
    dest_key_for,
    results_path_for,
    source_bucket_for,
)
from content_migrator.types import RunMode


@pytest.fixture()
def context():
    return MigrationContext(
        org="acme", mode=RunMode.MIGRATE, config=MigrationConfig(results_dir="/data")
    )


def test_source_bucket_is_org_dedicated(context):
    assert context.source_bucket == "acme-content"
    assert source_bucket_for("beta") == "beta-content"


def test_dest_bucket_comes_from_config(context):
    assert context.dest_bucket == "da-content"


def test_dest_key_is_namespaced_under_org(context):
    assert context.dest_key("docs/index.html") == "acme/docs/index.html"
    assert dest_key_for("acme", "a") == "acme/a"


def test_results_path_depends_on_mode(context):
    assert context.results_path == Path("/data/migrate-acme.results.json")
    assert results_path_for(Path("/data"), "acme", RunMode.RETRY) == Path(
        "/data/retry-acme.results.json"
    )


def test_log_prefix_only_for_retry(context):
    assert context.log_prefix == ""
    retry = dataclasses.replace(context, mode=RunMode.RETRY)
    assert retry.log_prefix == "[RETRY] "


def test_context_is_frozen(context):
    with pytest.raises(dataclasses.FrozenInstanceError):
        context.org = "other"
