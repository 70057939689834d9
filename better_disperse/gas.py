from .exceptions import OutOfGas


class GasMeter:
    def __init__(self, limit: int):
        self.limit = limit
        self.used = 0

    def __repr__(self):
        return f"{self.__class__.__name__}(used={self.used}, limit={self.limit})"

    @property
    def remaining(self) -> int:
        return self.limit - self.used

    def consume(self, amount: int):
        if amount > self.remaining:
            message = f"Out of gas: {amount} required, {self.remaining} left"
            self.used = self.limit
            raise OutOfGas(message)
        self.used += amount

    def spawn(self, stipend: int = 0) -> "GasMeter":
        """
        Start a sub-call meter.
        All but one 64th of the remaining gas is forwarded (EIP-150), plus the free stipend.
        """
        forwarded = self.remaining - self.remaining // 64
        self.used += forwarded
        return GasMeter(forwarded + stipend)

    def reclaim(self, child: "GasMeter"):
        self.used = max(self.used - child.remaining, 0)
