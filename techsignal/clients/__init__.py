"""Upstream data clients."""

from techsignal.clients.coingecko_rest import CoinGeckoRestClient
from techsignal.clients.evm_rpc import EvmRpcClient, RpcError
from techsignal.clients.price_cache import PriceHistoryCache

__all__ = [
    "CoinGeckoRestClient",
    "EvmRpcClient",
    "RpcError",
    "PriceHistoryCache",
]
