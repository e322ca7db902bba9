"""
Asset Sanity - Address Checksums.

Canonical mixed-case form of 20-byte hex addresses.

- EIP-55: letter upper-cased when its Keccak-256 nibble is >= 8
- Wanchain: same hash, letter upper-cased when the nibble is < 8

Pure functions, no I/O.
"""

import re

from Crypto.Hash import keccak

from asset_sanity.exceptions import InvalidAddressFormat
from asset_sanity.models import Chain, ChecksumScheme


ADDRESS_PATTERN = re.compile(r"(0x)?([0-9a-fA-F]{40})")


def _keccak_hex(data: str) -> str:
    return keccak.new(digest_bits=256, data=data.encode("ascii")).hexdigest()


def to_checksum(address: str, chain: Chain = Chain.ETHEREUM) -> str:
    """
    Canonical form of ``address`` on ``chain``.

    Accepts the 40 hex digits with or without the ``0x`` prefix, in any
    case. Always returns the ``0x``-prefixed checksummed form.

    Raises:
        InvalidAddressFormat: wrong type, length or charset
    """
    if not isinstance(address, str):
        raise InvalidAddressFormat(
            f"Address must be a string, got {type(address).__name__}",
            address=repr(address),
            chain=chain.value,
        )

    match = ADDRESS_PATTERN.fullmatch(address)
    if not match:
        raise InvalidAddressFormat(
            f"Expected 40 hex digits with optional 0x prefix, got '{address}'",
            address=address,
            chain=chain.value,
        )

    body = match.group(2).lower()
    digest = _keccak_hex(body)
    inverted = chain.checksum_scheme is ChecksumScheme.WANCHAIN

    chars = []
    for char, nibble in zip(body, digest):
        if char.isdigit():
            chars.append(char)
            continue
        upper = int(nibble, 16) >= 8
        if inverted:
            upper = not upper
        chars.append(char.upper() if upper else char)

    return "0x" + "".join(chars)


def is_checksum(address: str, chain: Chain = Chain.ETHEREUM) -> bool:
    """True when ``address`` is already in canonical form. Never raises."""
    try:
        return to_checksum(address, chain) == address
    except InvalidAddressFormat:
        return False
