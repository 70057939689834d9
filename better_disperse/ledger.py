import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from eth_typing import ChecksumAddress
from web3.types import Wei

from .exceptions import DisperseException, InsufficientFunds
from .gas import GasMeter
from .models import GasSchedule

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class Message:
    sender: ChecksumAddress
    value: Wei | int
    gas: GasMeter


class Journal:
    def __init__(self):
        self._entries: list[tuple[dict, Any, Any]] = []

    def __len__(self):
        return len(self._entries)

    def set(self, mapping: dict, key, value):
        self._entries.append((mapping, key, mapping.get(key, _MISSING)))
        mapping[key] = value

    def snapshot(self) -> int:
        return len(self._entries)

    def revert(self, snapshot: int):
        entries = self._entries
        while len(entries) > snapshot:
            mapping, key, previous = entries.pop()
            if previous is _MISSING:
                del mapping[key]
            else:
                mapping[key] = previous

    def clear(self):
        self._entries.clear()


class Ledger:
    """
    In-memory account ledger. Every state change goes through the journal,
    and every journal access holds the ledger lock, so a frame reverts only
    what was written inside it.
    """

    def __init__(
            self,
            *,
            gas_schedule: GasSchedule = None,
            block_gas_limit: int = 30_000_000,
    ):
        self.gas_schedule = gas_schedule or GasSchedule()
        self.block_gas_limit = block_gas_limit
        self.journal = Journal()
        self._balances: dict[ChecksumAddress, int] = {}
        self._contracts: dict[ChecksumAddress, object] = {}
        self._lock = threading.RLock()
        self._depth = 0

    def __repr__(self):
        return f"{self.__class__.__name__}(accounts={len(self._balances)}, contracts={len(self._contracts)})"

    ################################################################################
    # State
    ################################################################################

    def store(self, mapping: dict, key, value):
        with self._lock:
            self.journal.set(mapping, key, value)

    def balance_of(self, address: ChecksumAddress) -> Wei:
        return Wei(self._balances.get(address, 0))

    def mint(self, address: ChecksumAddress, amount: Wei | int):
        with self._lock:
            self.store(self._balances, address, self._balances.get(address, 0) + amount)

    def deploy(self, address: ChecksumAddress, contract: object):
        with self._lock:
            if address in self._contracts:
                raise ValueError(f"Contract already deployed at {address}")
            self._contracts[address] = contract

    def contract_at(self, address: ChecksumAddress) -> object | None:
        return self._contracts.get(address)

    def _move(self, sender: ChecksumAddress, to: ChecksumAddress, value: int):
        balances = self._balances
        self.journal.set(balances, sender, balances.get(sender, 0) - value)
        self.journal.set(balances, to, balances.get(to, 0) + value)

    ################################################################################
    # Execution
    ################################################################################

    @contextmanager
    def frame(self) -> Iterator[int]:
        """Revert everything done inside the block if it raises. Holds the ledger lock throughout."""
        with self._lock:
            snapshot = self.journal.snapshot()
            try:
                yield snapshot
            except Exception:
                self.journal.revert(snapshot)
                raise

    def call(
            self,
            sender: ChecksumAddress,
            to: ChecksumAddress,
            value: Wei | int,
            gas: GasMeter,
    ) -> bool:
        """
        Push `value` from `sender` to `to`, forwarding gas to the receiver's hook.

        :return: False if the push failed. The failed push leaves no trace.
        :raises OutOfGas: if the caller cannot pay for the call itself
        """
        with self._lock:
            return self._call(sender, to, value, gas)

    def _call(self, sender: ChecksumAddress, to: ChecksumAddress, value: int, gas: GasMeter) -> bool:
        schedule = self.gas_schedule
        balances = self._balances
        contract = self._contracts.get(to)

        cost = schedule.call
        if value:
            cost += schedule.call_value
            if contract is None and not balances.get(to):
                cost += schedule.new_account
        gas.consume(cost)

        if balances.get(sender, 0) < value:
            return False

        if contract is None:
            self._move(sender, to, value)
            return True

        receive = getattr(contract, "receive", None)
        if receive is None:
            return False

        snapshot = self.journal.snapshot()
        child = gas.spawn(schedule.call_stipend if value else 0)
        try:
            self._move(sender, to, value)
            receive(self, Message(sender, value, child))
        except DisperseException as e:
            self.journal.revert(snapshot)
            logger.debug("Call %s -> %s (%s) failed: %s", sender, to, value, e)
            return False
        finally:
            gas.reclaim(child)
        return True

    def execute(
            self,
            caller: ChecksumAddress,
            contract_address: ChecksumAddress,
            fn: Callable[[Message], Any],
            *,
            value: Wei | int = 0,
            gas: int = None,
    ) -> tuple[Any, int]:
        """
        Run `fn` as one all-or-nothing call from `caller` into `contract_address`.

        :return: (fn result, gas used)
        """
        with self._lock:
            top_level = self._depth == 0
            if top_level:
                self.journal.clear()
            meter = GasMeter(gas if gas is not None else self.block_gas_limit)
            snapshot = self.journal.snapshot()
            self._depth += 1
            try:
                if top_level:
                    meter.consume(self.gas_schedule.tx_base)
                if value:
                    if self._balances.get(caller, 0) < value:
                        raise InsufficientFunds(
                            f"{caller} has {self.balance_of(caller)}, {value} attached")
                    self._move(caller, contract_address, value)
                logger.debug("Executing call from %s into %s (value=%s, gas=%s)",
                             caller, contract_address, value, meter.limit)
                result = fn(Message(caller, value, meter))
            except Exception as e:
                self.journal.revert(snapshot)
                logger.warning("Call from %s into %s reverted: %s", caller, contract_address, e)
                raise
            finally:
                self._depth -= 1
                if top_level:
                    self.journal.clear()
            return result, meter.used
