"""Shared fixtures for flag dependency tests."""

import json
import os

import pytest

from flag_deps.models import parse_flag_export

os.environ.setdefault("MPLBACKEND", "Agg")


def in_split(name):
    return {"type": "IN_SPLIT", "depends": {"splitName": name, "treatments": ["on"]}}


def flag(name, *rules, flag_id=None):
    """Build a raw flag record; each rule is a list of matcher dicts."""
    record = {"name": name, "id": flag_id or f"id-{name}", "trafficType": "user"}
    if rules:
        record["rules"] = [{"condition": {"combiner": "AND", "matchers": list(m)}} for m in rules]
    return record


@pytest.fixture
def sample_document():
    # A -> B, C -> Z (Z not exported)
    return {
        "objects": [
            flag("A", [in_split("B")]),
            flag("B"),
            flag("C", [in_split("Z")]),
        ]
    }


@pytest.fixture
def sample_flags(sample_document):
    return parse_flag_export(sample_document)


@pytest.fixture
def write_export(tmp_path):
    def _write(document, name="flag_data.json"):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write
