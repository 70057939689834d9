class DisperseException(ValueError):
    pass


class ShapeMismatch(DisperseException):
    def __init__(self, recipients_count: int, amounts_count: int):
        self.recipients_count = recipients_count
        self.amounts_count = amounts_count
        super().__init__(f"{recipients_count} recipients but {amounts_count} amounts")


class InvalidAddress(DisperseException):
    pass


class InvalidAmount(DisperseException):
    pass


class InsufficientFunds(DisperseException):
    pass


class OutOfGas(DisperseException):
    pass


class LegTransferFailed(DisperseException):
    def __init__(self, index: int, recipient: str, amount: int):
        self.index = index
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Leg #{index} failed: {amount} to {recipient}")


class RefundFailed(DisperseException):
    def __init__(self, recipient: str, amount: int):
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Refund of {amount} to {recipient} failed")


class Revert(DisperseException):
    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__(reason or "execution reverted")


class InsufficientBalance(Revert):
    pass


class InsufficientAllowance(Revert):
    pass


class TransferToZeroAddress(Revert):
    pass


error_msg_to_exception: dict[str, type[Revert]] = {
    # OpenZeppelin 4.x
    "transfer amount exceeds balance": InsufficientBalance,
    "insufficient allowance": InsufficientAllowance,
    "transfer to the zero address": TransferToZeroAddress,
    # OpenZeppelin 3.x
    "transfer amount exceeds allowance": InsufficientAllowance,
    # OpenZeppelin 5.x custom errors
    "ERC20InsufficientBalance": InsufficientBalance,
    "ERC20InsufficientAllowance": InsufficientAllowance,
    "ERC20InvalidReceiver": TransferToZeroAddress,
}


def exception_from_revert(reason: str) -> Revert:
    for message, exception_class in error_msg_to_exception.items():
        if message in reason:
            return exception_class(reason)
    return Revert(reason)
