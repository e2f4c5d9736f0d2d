from unittest.mock import AsyncMock, MagicMock

import pytest

from walletexport.exceptions import ProviderResponseError
from walletexport.infra.blockchain.base import PageRequest
from walletexport.infra.blockchain.near.pikespeak_client import BASE_URL, NearAdapter


def _mock_response(data, status_code: int = 200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = data
    return resp


def _adapter(data=None) -> NearAdapter:
    http = AsyncMock()
    http.get.return_value = _mock_response(data)
    return NearAdapter(http, api_key="pk-test", page_size=50)


class TestNearAddress:
    @pytest.mark.parametrize("address", ["alice.near", "app.sweat", "a1", "ab" * 32, "sub.alice.near"])
    def test_valid(self, address):
        assert _adapter().is_valid_address(address)

    @pytest.mark.parametrize("address", ["", "a", "Alice.near", "alice..near", "x" * 65, "alice near"])
    def test_invalid(self, address):
        assert not _adapter().is_valid_address(address)


class TestNearAdapter:
    async def test_page_request_shape(self):
        adapter = _adapter([{"transaction_hash": "abc"}])
        branch = adapter.branches("alice.near", BASE_URL)[0]
        page = await branch.fetch_page(PageRequest(index=0, offset=0, limit=50))
        call = adapter._http.get.await_args
        assert call.args[0] == f"{BASE_URL}/account/transactions/alice.near"
        assert call.kwargs["params"] == {"page": 1, "per_page": 50}
        assert call.kwargs["headers"] == {"x-api-key": "pk-test"}
        assert page.items == [{"transaction_hash": "abc"}]

    async def test_wrapped_list(self):
        adapter = _adapter({"transactions": [{"transaction_hash": "abc"}]})
        page = await adapter.branches("alice.near", BASE_URL)[0].fetch_page(PageRequest(0, 0, 50))
        assert len(page.items) == 1

    async def test_missing_list(self):
        adapter = _adapter({"message": "Unauthorized"})
        with pytest.raises(ProviderResponseError):
            await adapter.branches("alice.near", BASE_URL)[0].fetch_page(PageRequest(0, 0, 50))
