from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress, HexStr
from eth_utils import to_wei
from web3 import AsyncWeb3, AsyncHTTPProvider, Web3
from web3.contract.async_contract import AsyncContractFunction
from web3.middleware import ExtraDataToPOAMiddleware
from web3.types import Nonce, TxParams, TxReceipt, Wei

from .models import NativeCurrency


class Chain(AsyncWeb3):
    provider: AsyncHTTPProvider

    def __init__(
            self,
            rpc: str,
            *,
            name: str = None,
            native_currency: NativeCurrency = None,
            # Connection settings
            provider_timeout: int = 15,
            # Tx params
            fee_unit: str = "gwei",
            # legacy pricing
            gas_price: Wei | int = None,
            # dynamic fee pricing
            max_fee_per_gas: Wei | int = None,
            max_priority_fee_per_gas: Wei | int = None,
            # Features
            eip1559: bool = True,
            # Middleware
            use_poa_middleware: bool = True,
    ):
        self.name = name
        self.native_currency = native_currency or NativeCurrency()
        self.eip1559 = eip1559

        http_provider = AsyncHTTPProvider(
            rpc,
            request_kwargs={"timeout": provider_timeout},
        )
        super().__init__(provider=http_provider)

        if use_poa_middleware:
            self.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        self.default_gas_price = to_wei(gas_price, fee_unit) if gas_price else None
        self.default_max_fee_per_gas = to_wei(max_fee_per_gas, fee_unit) if max_fee_per_gas else None
        self.default_max_priority_fee_per_gas = (
            to_wei(max_priority_fee_per_gas, fee_unit) if max_priority_fee_per_gas else None)

    def __str__(self):
        return f"{self.name}"

    def __repr__(self):
        return f"{self.__class__.__name__}(rpc={self.provider.endpoint_uri}, name={self.name})"

    async def is_eip1559_supported(self) -> bool:
        """
        :return: True if the latest block carries a base fee
        """
        last_block = await self.eth.get_block("latest")
        return "baseFeePerGas" in last_block

    ################################################################################
    # Transaction
    ################################################################################

    async def _build_tx_base_params(
            self,
            gas: int = None,
            address_from: ChecksumAddress | str = None,
            nonce: Nonce | int = None,
            value: Wei | int = None,
            *,
            tx_params: TxParams = None,
    ) -> TxParams:
        tx_params = dict(tx_params or {})
        tx_params["chainId"] = await self.eth.chain_id

        if gas is not None:
            tx_params["gas"] = gas
        if address_from is not None:
            tx_params["from"] = address_from
        if value is not None:
            tx_params["value"] = value

        if nonce is not None:
            tx_params["nonce"] = nonce
        elif address_from is not None and "nonce" not in tx_params:
            tx_params["nonce"] = await self.eth.get_transaction_count(address_from)

        return tx_params

    async def _build_tx_fee_params(
            self,
            gas_price: Wei | int = None,
            max_fee_per_gas: Wei | int = None,
            max_priority_fee_per_gas: Wei | int = None,
            *,
            tx_params: TxParams = None,
    ) -> TxParams:
        tx_params = dict(tx_params or {})

        max_fee_per_gas = max_fee_per_gas or self.default_max_fee_per_gas
        max_priority_fee_per_gas = max_priority_fee_per_gas or self.default_max_priority_fee_per_gas
        wants_dynamic_fee = ((gas_price is None and self.eip1559)
                             or max_fee_per_gas is not None
                             or max_priority_fee_per_gas is not None)

        if wants_dynamic_fee and await self.is_eip1559_supported():
            tx_params["maxFeePerGas"] = max_fee_per_gas or await self.eth.gas_price
            tx_params["maxPriorityFeePerGas"] = max_priority_fee_per_gas or await self.eth.max_priority_fee
        else:
            tx_params["gasPrice"] = gas_price or await self.eth.gas_price

        return tx_params

    async def build_tx(
            self,
            contract_function: AsyncContractFunction,
            address_from: ChecksumAddress | str = None,
            *,
            gas: int = None,
            nonce: Nonce | int = None,
            value: Wei | int = None,
            gas_price: Wei | int = None,
            max_fee_per_gas: Wei | int = None,
            max_priority_fee_per_gas: Wei | int = None,
    ) -> TxParams:
        gas_price = gas_price or self.default_gas_price
        tx_params = await self._build_tx_base_params(gas, address_from, nonce, value)
        if gas is None:
            # A reverting batch fails here, before anything is signed
            gas = await contract_function.estimate_gas(tx_params)
            tx_params = await self._build_tx_base_params(gas, tx_params=tx_params)
        tx_params = await self._build_tx_fee_params(
            gas_price, max_fee_per_gas, max_priority_fee_per_gas, tx_params=tx_params)
        return await contract_function.build_transaction(tx_params)

    async def sign_and_send_tx(self, account: LocalAccount, tx: TxParams) -> HexStr:
        signed_tx = account.sign_transaction(tx)
        tx_hash = await self.eth.send_raw_transaction(signed_tx.raw_transaction)
        return HexStr(Web3.to_hex(tx_hash))

    async def execute_fn(
            self,
            account: LocalAccount,
            fn: AsyncContractFunction,
            **kwargs,
    ) -> HexStr:
        tx = await self.build_tx(fn, account.address, **kwargs)
        return await self.sign_and_send_tx(account, tx)

    async def wait_for_receipt(self, tx_hash: HexStr, timeout: float = 120) -> TxReceipt:
        return await self.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
