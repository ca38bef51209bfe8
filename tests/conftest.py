"""
conftest.py - Shared pytest fixtures

- Synthetic contracts and catalogs (independent of the built-in table)
- Fake OpenAI clients exposing chat.completions.create
"""

import json
from types import SimpleNamespace

import pytest

from futures_catalog import FutureContract, FuturesCatalog, MarginRatio


# =============================================================================
# FAKE OPENAI CLIENTS
# =============================================================================

class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content, refusal=None)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    def __init__(self, content=None, error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def fake_client_factory():
    return FakeClient


@pytest.fixture
def valid_payload():
    return json.dumps({
        "leverageRisk": "槓桿約 7.4 倍，股價 1% 波動造成約 7.4% 的保證金盈虧。",
        "marginCallRisk": "股價不利變動約 3% 即可能跌破維持保證金。",
        "recommendation": "建議設定 5% 停損並保留額外資金緩衝。",
    }, ensure_ascii=False)


# =============================================================================
# CONTRACTS AND CATALOGS
# =============================================================================

@pytest.fixture
def abc_contract():
    return FutureContract(
        code="ABC", name="測試電子", stock_code="9999",
        ratio=MarginRatio(s=0.0675, m=0.075, i=0.09), shares_per_contract=2000,
    )


@pytest.fixture
def mini_contract():
    return FutureContract(
        code="XYZ", name="Mini Widget", stock_code="1234",
        ratio=MarginRatio(s=0.10, m=0.1035, i=0.135), shares_per_contract=100,
    )


@pytest.fixture
def synthetic_catalog(abc_contract, mini_contract):
    third = FutureContract(
        code="QQF", name="小型測試", stock_code="9999",
        ratio=MarginRatio(s=0.15, m=0.1553, i=0.2025), shares_per_contract=100,
    )
    return FuturesCatalog([abc_contract, mini_contract, third])
