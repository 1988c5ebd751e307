"""Errors raised at the boundary of the forecasting engine."""


class InvalidArgumentError(ValueError):
    """Input that the engine refuses to analyse (negative amounts, bad dates, ...)."""

    def __init__(self, detail: str = "Invalid argument"):
        super().__init__(detail)
        self.detail = detail
