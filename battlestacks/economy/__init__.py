from battlestacks.economy.wallet import WalletService

__all__ = ["WalletService"]
