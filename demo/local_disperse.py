import logging

from eth_utils import to_checksum_address

from better_disperse import Disperser, ERC20, Ledger, NativeCurrency, TokenInfo
from better_disperse.exceptions import LegTransferFailed, Revert


def address(n: int) -> str:
    return to_checksum_address(f"0x{n:040x}")


class Rejecter:
    def receive(self, ledger, message):
        raise Revert("no thanks")


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    eth = NativeCurrency()

    ledger = Ledger()
    disperser = Disperser(ledger)
    payer = address(0xA11CE)
    recipients = [address(0x1001), address(0x1002), address(0x1003)]
    ledger.mint(payer, 10 ** 18)

    receipt = disperser.send_native(payer, recipients, [10 ** 16, 2 * 10 ** 16, 3 * 10 ** 16], value=10 ** 17)
    print(f"Paid {eth.format(receipt.total)}, refunded {eth.format(receipt.refund)}, gas {receipt.gas_used}")
    """output
    Paid 0.06 ETH, refunded 0.04 ETH, gas 134800
    """

    ledger.deploy(address(0xBAD), Rejecter())
    try:
        disperser.send_native(payer, [recipients[0], address(0xBAD)], [1, 1], value=2)
    except LegTransferFailed as e:
        print(f"Nothing was paid, leg #{e.index} was rejected")
    """output
    Nothing was paid, leg #1 was rejected
    """

    usdc = ERC20(ledger, address(0x05DC), TokenInfo(name="USD Coin", symbol="USDC", decimals=6))
    usdc.mint(payer, 1_000 * 10 ** 6)
    usdc.approve(payer, disperser.address, 60 * 10 ** 6)
    receipt = disperser.send_token(payer, usdc, recipients, [10 * 10 ** 6, 20 * 10 ** 6, 30 * 10 ** 6])
    print(f"Sent {usdc.info.format(receipt.total)}, allowance left {usdc.allowance(payer, disperser.address)}")
    """output
    Sent 60 USDC, allowance left 0
    """
