class CapitalGainsDetails:
    """German flat-rate capital gains tax (Abgeltungsteuer plus solidarity surcharge).

    Only a positive change in wealth is taxed; losses pass through untouched.
    """

    GERMAN_RATE = 0.26375

    def __init__(self, rate: float = GERMAN_RATE):
        self.rate = rate

    def tax_on_gain(self, previous_wealth: float, new_wealth: float) -> float:
        """Return the tax owed on the gain between two wealth values."""
        gain = new_wealth - previous_wealth
        if gain <= 0:
            return 0.0
        return gain * self.rate

    def apply(self, previous_wealth: float, new_wealth: float) -> float:
        """Return new_wealth after deducting tax on the gain."""
        return new_wealth - self.tax_on_gain(previous_wealth, new_wealth)


def apply_capital_gains_tax(previous_wealth: float, new_wealth: float,
                            rate: float = CapitalGainsDetails.GERMAN_RATE) -> float:
    return CapitalGainsDetails(rate).apply(previous_wealth, new_wealth)
