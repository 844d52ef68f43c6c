class WalletError(Exception):
    pass


class WalletUserNotFoundError(WalletError):
    pass


class WalletValidationError(WalletError):
    pass


class WalletInsufficientBalanceError(WalletError):
    pass


class RedeemRequestNotFoundError(WalletError):
    pass
