class PriceFeedError(Exception):
    """Upstream response did not match the price feed contract."""


class InvalidAmountError(ValueError):
    pass


class InvalidSelectionError(ValueError):
    pass
