"""Shared test fixtures for the content_migrator test suite."""

import json

import pytest


@pytest.fixture()
def raw_config():
    """Return a config dict with every supported key populated."""
    return {
        "source": {
            "endpoint_url": "https://source.example.com",
            "region_name": "auto",
            "access_key_id": "SRC_ID",
            "secret_access_key": "SRC_SECRET",
            "admin_url": "https://admin.source.example.com",
        },
        "dest": {
            "endpoint_url": "https://dest.example.com",
            "region_name": "auto",
            "access_key_id": "DEST_ID",
            "secret_access_key": "DEST_SECRET",
            "admin_url": "https://admin.dest.example.com",
        },
        "bearer": "token123",
        "dest_bucket": "da-content",
        "page_size": 100,
        "copy_timeout": 5,
        "request_timeout": 10,
    }


@pytest.fixture()
def legacy_vars():
    """Return a ``.dev.vars`` style config using S3 client key names."""
    return {
        "source": {
            "endpoint": "https://source.example.com",
            "region": "auto",
            "credentials": {"accessKeyId": "SRC_ID", "secretAccessKey": "SRC_SECRET"},
            "daAdminUrl": "https://admin.source.example.com",
        },
        "dest": {
            "endpoint": "https://dest.example.com",
            "region": "auto",
            "credentials": {"accessKeyId": "DEST_ID", "secretAccessKey": "DEST_SECRET"},
            "daAdminUrl": "https://admin.dest.example.com",
        },
        "bearer": "",
    }


@pytest.fixture()
def config_file(tmp_path, raw_config):
    """Write ``raw_config`` as JSON and return its path."""
    path = tmp_path / ".dev.vars"
    raw_config["results_dir"] = str(tmp_path)
    path.write_text(json.dumps(raw_config))
    return path
