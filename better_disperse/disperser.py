import logging
from functools import partial
from typing import Iterable

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from web3.types import Wei

from .enums import EntryPoint
from .exceptions import InvalidAddress, LegTransferFailed, RefundFailed, Revert, ShapeMismatch
from .ledger import Ledger, Message
from .models import Leg, Receipt
from .token import ERC20, safe_transfer, safe_transfer_from
from .typing import AddressLike
from .utils import to_checksum_addresses, to_uint256, to_uint256s

logger = logging.getLogger(__name__)

DISPERSE_ADDRESS = "0xD152f549545093347A162Dce210e7293f1452150"


def _to_address(address: AddressLike) -> ChecksumAddress:
    return to_checksum_addresses([address])[0]


def _decode_batch(
        recipients: Iterable[AddressLike],
        amounts: Iterable[Wei | int],
) -> tuple[list[ChecksumAddress], list[Wei]]:
    recipients, amounts = list(recipients), list(amounts)
    if len(recipients) != len(amounts):
        raise ShapeMismatch(len(recipients), len(amounts))
    return to_checksum_addresses(recipients), to_uint256s(amounts)


class Disperser:
    """
    Pays many recipients from one payer in a single all-or-nothing call.
    Surplus native value goes back to the caller. Anything stranded on the
    disperser can be swept by anyone.
    """

    def __init__(self, ledger: Ledger, address: AddressLike = DISPERSE_ADDRESS):
        self.ledger = ledger
        self.address = to_checksum_address(address)
        ledger.deploy(self.address, self)

    def __str__(self):
        return self.address

    def __repr__(self):
        return f"{self.__class__.__name__}(address={self.address})"

    def receive(self, ledger: Ledger, message: Message):
        # Plain transfers are accepted and stay until someone rescues them
        pass

    @property
    def native_balance(self) -> Wei:
        return self.ledger.balance_of(self.address)

    def token_balance(self, token: ERC20 | AddressLike) -> int:
        return self._resolve_token(token).balance_of(self.address)

    def _resolve_token(self, token: ERC20 | AddressLike) -> ERC20:
        if isinstance(token, ERC20):
            return token
        contract = self.ledger.contract_at(_to_address(token))
        if not isinstance(contract, ERC20):
            raise InvalidAddress(f"No token deployed at {token}")
        return contract

    ################################################################################
    # Entry points
    ################################################################################

    def send_native(
            self,
            caller: AddressLike,
            recipients: Iterable[AddressLike],
            amounts: Iterable[Wei | int],
            *,
            value: Wei | int,
            gas: int = None,
    ) -> Receipt:
        """
        sendNative(address[] recipients, uint256[] amounts) payable

        Pay `amounts[i]` to `recipients[i]` out of the attached `value`,
        then return whatever is left on the disperser to the caller.
        """
        caller = _to_address(caller)
        recipients, amounts = _decode_batch(recipients, amounts)
        receipt, gas_used = self.ledger.execute(
            caller,
            self.address,
            partial(self._send_native, recipients, amounts),
            value=to_uint256(value),
            gas=gas,
        )
        receipt.gas_used = gas_used
        logger.info("%s sent %s wei to %d recipients, refunded %s",
                    caller, receipt.total, len(receipt.legs), receipt.refund)
        return receipt

    def send_token(
            self,
            caller: AddressLike,
            token: ERC20 | AddressLike,
            recipients: Iterable[AddressLike],
            amounts: Iterable[int],
            *,
            gas: int = None,
    ) -> Receipt:
        """
        sendToken(address token, address[] recipients, uint256[] amounts)

        Pull `amounts[i]` of `token` from the caller's allowance straight to `recipients[i]`.
        """
        caller = _to_address(caller)
        token = self._resolve_token(token)
        recipients, amounts = _decode_batch(recipients, amounts)
        receipt, gas_used = self.ledger.execute(
            caller,
            self.address,
            partial(self._send_token, token, recipients, amounts),
            gas=gas,
        )
        receipt.gas_used = gas_used
        logger.info("%s sent %s to %d recipients",
                    caller, token.info.format(receipt.total), len(receipt.legs))
        return receipt

    def rescue_token(self, caller: AddressLike, token: ERC20 | AddressLike, *, gas: int = None) -> Receipt:
        """rescueToken(address token): sweep the disperser's whole token balance to the caller."""
        caller = _to_address(caller)
        token = self._resolve_token(token)
        receipt, gas_used = self.ledger.execute(
            caller, self.address, partial(self._rescue_token, token), gas=gas)
        receipt.gas_used = gas_used
        if receipt.rescued:
            logger.info("%s rescued %s", caller, token.info.format(receipt.rescued))
        return receipt

    def rescue_native(self, caller: AddressLike, *, gas: int = None) -> Receipt:
        """
        rescueNative(): sweep the disperser's whole native balance to the caller.

        Best effort: a rejected push does not fail the call, the balance simply stays.
        """
        caller = _to_address(caller)
        receipt, gas_used = self.ledger.execute(caller, self.address, self._rescue_native, gas=gas)
        receipt.gas_used = gas_used
        return receipt

    ################################################################################
    # Bodies, run inside the ledger envelope
    ################################################################################

    def _send_native(
            self,
            recipients: list[ChecksumAddress],
            amounts: list[Wei],
            msg: Message,
    ) -> Receipt:
        call = self.ledger.call
        this = self.address
        gas = msg.gas
        for index, (recipient, amount) in enumerate(zip(recipients, amounts)):
            if not call(this, recipient, amount, gas):
                raise LegTransferFailed(index, recipient, amount)

        refund = self.ledger.balance_of(this)
        if refund > 0 and not call(this, msg.sender, refund, gas):
            raise RefundFailed(msg.sender, refund)

        return Receipt(
            entry_point=EntryPoint.SEND_NATIVE,
            caller=msg.sender,
            value=msg.value,
            legs=[Leg(recipient=r, amount=a) for r, a in zip(recipients, amounts)],
            refund=refund,
        )

    def _send_token(
            self,
            token: ERC20,
            recipients: list[ChecksumAddress],
            amounts: list[int],
            msg: Message,
    ) -> Receipt:
        this = self.address
        owner = msg.sender
        gas = msg.gas
        for index, (recipient, amount) in enumerate(zip(recipients, amounts)):
            try:
                safe_transfer_from(token, this, owner, recipient, amount, gas)
            except Revert as e:
                raise LegTransferFailed(index, recipient, amount) from e

        return Receipt(
            entry_point=EntryPoint.SEND_TOKEN,
            caller=owner,
            token=token.address,
            legs=[Leg(recipient=r, amount=a) for r, a in zip(recipients, amounts)],
        )

    def _rescue_token(self, token: ERC20, msg: Message) -> Receipt:
        balance = token.balance_of(self.address)
        safe_transfer(token, self.address, msg.sender, balance, msg.gas)
        return Receipt(
            entry_point=EntryPoint.RESCUE_TOKEN,
            caller=msg.sender,
            token=token.address,
            rescued=balance,
        )

    def _rescue_native(self, msg: Message) -> Receipt:
        balance = self.ledger.balance_of(self.address)
        success = self.ledger.call(self.address, msg.sender, balance, msg.gas)
        if not success:
            logger.warning("Native rescue of %s wei to %s failed, balance left in place",
                           balance, msg.sender)
        return Receipt(
            entry_point=EntryPoint.RESCUE_NATIVE,
            caller=msg.sender,
            success=success,
            rescued=balance if success else 0,
        )
