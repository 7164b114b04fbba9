"""
Contract access: ABI fragments, caller contexts, and the gateway.

Usage:
    from goldpeg.core.contracts import ChainReader, ContractGateway

    reader = ChainReader(provider)
    token = ContractGateway().resolve("POIPOI", reader)
    balance = await token.call("balanceOf", account)
"""

from .abi import AbiEncodingError, decode_output, encode_call, function_selector, function_signature
from .abis import CONTRACT_ABIS
from .context import ChainReader, Signer
from .gateway import (
    CallerContext,
    ContractDescriptor,
    ContractGateway,
    ContractHandle,
    is_zero_address,
)

__all__ = [
    "AbiEncodingError",
    "decode_output",
    "encode_call",
    "function_selector",
    "function_signature",
    "CONTRACT_ABIS",
    "ChainReader",
    "Signer",
    "CallerContext",
    "ContractDescriptor",
    "ContractGateway",
    "ContractHandle",
    "is_zero_address",
]
