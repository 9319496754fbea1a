# tests/conftest.py - Shared fixtures
"""
Sample payloads shaped like the Kubo stats API responses.
"""

import pytest


@pytest.fixture
def bw_payload():
    return {"TotalIn": 100, "TotalOut": 50, "RateIn": 1.5, "RateOut": 0.5}


@pytest.fixture
def repo_payload():
    return {
        "RepoSize": 2048,
        "NumObjects": 12,
        "StorageMax": 10000.0,
        "RepoPath": "/home/ipfs/.ipfs",
        "Version": "fs-repo@15",
    }


@pytest.fixture
def bitswap_payload():
    return {
        "BlocksReceived": 7,
        "BlocksSent": 3,
        "DataReceived": 4096,
        "DataSent": 1024,
        "DupBlksReceived": 1,
        "DupDataReceived": 256,
        "MessagesReceived": 42,
        "Peers": ["12D3KooWA", "12D3KooWB"],
        "ProvideBufLen": -1,
        "Wantlist": [],
    }
