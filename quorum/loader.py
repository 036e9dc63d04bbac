import json
import logging
from dataclasses import dataclass, field
from typing import List

from quorum.bigint import BigInt
from quorum.commitments import share_commitment, verify_share_commitment
from quorum.errors import ParseError
from quorum.sharing import Share

logger = logging.getLogger(__name__)


@dataclass
class ShareSet:
    n: int
    k: int
    shares: List[Share]
    mismatched: List[int] = field(default_factory=list)


def _as_int(value, what):
    if isinstance(value, bool):
        raise ParseError(f"{what} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ParseError(f"{what} must be an integer, got {value!r}")


def parse_shares(document) -> ShareSet:
    """Decode a share document of the form {"keys": {"n", "k"}, "<x>": {"base", "value"}}"""
    if not isinstance(document, dict):
        raise ParseError("Share document must be a JSON object")
    keys = document.get("keys")
    if not isinstance(keys, dict):
        raise ParseError("Share document has no 'keys' object")

    n = _as_int(keys.get("n"), "keys.n")
    k = _as_int(keys.get("k"), "keys.k")

    shares = []
    mismatched = []
    for name, record in document.items():
        if name == "keys":
            continue
        x = _as_int(name, f"Share key {name!r}")
        if x <= 0:
            raise ParseError(f"Share key {name!r} must be a positive x-coordinate")
        if not isinstance(record, dict) or "base" not in record or "value" not in record:
            raise ParseError(f"Share {name!r} needs both 'base' and 'value'")

        radix = _as_int(record["base"], f"Share {name!r} base")
        share = Share(x, BigInt.from_string(str(record["value"]).strip(), radix))

        commitment = record.get("commitment")
        if commitment is not None and not verify_share_commitment(share, str(commitment)):
            logger.warning("Share x=%d does not match its recorded commitment", x)
            mismatched.append(x)
        shares.append(share)

    shares.sort(key=lambda share: share.index)
    if len(shares) != n:
        logger.warning("Document declares n=%d but holds %d shares", n, len(shares))
    return ShareSet(n=n, k=k, shares=shares, mismatched=sorted(mismatched))


def load_shares(path) -> ShareSet:
    with open(path, "r") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise ParseError(f"{path} is not valid JSON: {e}") from e
    return parse_shares(document)


def dump_shares(shares, threshold: int, path=None, commitments: bool = False) -> dict:
    """Encode shares (base 10) in the same document format, optionally writing it to path"""
    document = {"keys": {"n": len(shares), "k": threshold}}
    for share in shares:
        record = {"base": "10", "value": str(share.value)}
        if commitments:
            record["commitment"] = share_commitment(share)
        document[str(share.index)] = record

    if path is not None:
        with open(path, "w") as f:
            json.dump(document, f, indent=2)
    return document
