"""Low-balance alerts for wallets on EVM, ICON and Cosmos-SDK networks."""

__version__ = "0.1.0"
