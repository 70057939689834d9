import asyncio

from eth_account import Account
from eth_utils import to_wei

from better_disperse import Chain
from better_disperse.contract import Disperse, ERC20


async def main():
    sepolia = Chain("https://ethereum-sepolia-rpc.publicnode.com", name="Sepolia")
    disperse = Disperse(sepolia, "0x...")
    account = Account.from_key("...")

    recipients = ["0x...", "0x..."]
    values = [to_wei(0.01, "ether")] * 2

    tx_hash = await disperse.send_native_tx(account, recipients, values)
    receipt = await sepolia.wait_for_receipt(tx_hash)
    print(f"sendNative: {tx_hash} status={receipt['status']}")

    token = ERC20(sepolia, "0x...")
    amounts = [10 * 10 ** 6, 20 * 10 ** 6]
    approve_hash = await sepolia.execute_fn(account, token.approve(disperse.address, sum(amounts)))
    await sepolia.wait_for_receipt(approve_hash)
    tx_hash = await disperse.send_token_tx(account, token.address, recipients, amounts)
    print(f"sendToken: {tx_hash}")


if __name__ == '__main__':
    asyncio.run(main())
