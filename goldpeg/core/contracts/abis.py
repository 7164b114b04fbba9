"""Minimal ABI fragments for the deployed POI contracts."""

from typing import Any, Dict, List, Sequence


def _view(name: str, output: str = "uint256", inputs: Sequence[str] = ()) -> Dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": [{"name": f"arg{i}", "type": t} for i, t in enumerate(inputs)],
        "outputs": [{"name": "", "type": output}],
    }


def _write(name: str, inputs: Sequence[str] = ()) -> Dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "nonpayable",
        "inputs": [{"name": f"arg{i}", "type": t} for i, t in enumerate(inputs)],
        "outputs": [],
    }


POIPOI_ABI: List[Dict[str, Any]] = [
    _view("balanceOf", inputs=["address"]),
    _view("totalSupply"),
    _view("decimals", output="uint8"),
]

GOLD_PRICE_ORACLE_ABI: List[Dict[str, Any]] = [
    _view("getGoldPrice"),
    _view("getGoldPricePerGram"),
]

POIPOI_MANAGER_ABI: List[Dict[str, Any]] = [
    _view("getGoldPrice"),
    _view("getTotalSupply"),
    _view("calculatePOIAmount", inputs=["uint256"]),
    _view("calculateCollateralAmount", inputs=["uint256"]),
    _write("mint", inputs=["uint256"]),
    _write("redeem", inputs=["uint256"]),
]

GOLD_READER_ABI: List[Dict[str, Any]] = [
    _view("lastUpdated"),
    _view("isPriceStale", output="bool"),
    _view("getGoldPricePerGram"),
    _write("updatePrice"),
]

CONTRACT_ABIS: Dict[str, List[Dict[str, Any]]] = {
    "POIPOI": POIPOI_ABI,
    "GOLD_PRICE_ORACLE": GOLD_PRICE_ORACLE_ABI,
    "POIPOI_MANAGER": POIPOI_MANAGER_ABI,
    "GOLD_READER": GOLD_READER_ABI,
}
