import argparse
import json
import logging
import random
import sys

from tabulate import tabulate

import config
from quorum.bigint import BigInt
from quorum.commitments import secret_commitment, share_commitment
from quorum.detector import CorruptedShareDetector, recover_secret
from quorum.errors import QuorumError
from quorum.loader import dump_shares, load_shares
from quorum.sharing import ShamirSecretSharing

logger = logging.getLogger("quorum.cli")


# --- Helper Functions ---
def print_header(title):
    print("\n" + "=" * 50)
    print(f"{title}")
    print("=" * 50)


def share_table(shares, corrupted, mismatched=()):
    flagged = set(corrupted)
    rows = []
    for position, share in enumerate(shares):
        status = "CORRUPTED" if position in flagged else "ok"
        if share.index in mismatched:
            status += " (commitment mismatch)"
        rows.append([position, share.index, str(share.value), status, share_commitment(share)[:16]])
    return tabulate(rows, headers=["pos", "x", "value", "status", "fingerprint"])


def build_engine(share_set, prime):
    # The document's n may disagree with the shares actually present
    total = max(share_set.n, share_set.k, len(share_set.shares))
    return ShamirSecretSharing(share_set.k, total, prime)


# --- Commands ---
def cmd_recover(args):
    share_set = load_shares(args.file)
    engine = build_engine(share_set, args.prime)

    result = recover_secret(engine, share_set.shares)

    print_header("Recovered Secret")
    print(f"Secret: {result.secret}")
    print(f"Corrupted shares indices (0-based): {' '.join(str(i) for i in result.corrupted)}")
    print(f"Secret fingerprint: {secret_commitment(result.secret)}")
    print()
    print(share_table(share_set.shares, result.corrupted, share_set.mismatched))
    return 0


def cmd_detect(args):
    share_set = load_shares(args.file)
    engine = build_engine(share_set, args.prime)

    report = CorruptedShareDetector(engine).analyze(share_set.shares)

    print_header("Corrupted Share Detection")
    if report.secret is None and not report.corrupted:
        print(f"Detection skipped: {len(share_set.shares)} shares cannot cross-check threshold {engine.threshold}.")
        return 0

    print(f"Subsets tried: {report.subsets} ({report.inconclusive} inconclusive)")
    if report.votes:
        rows = [[secret, count] for secret, count in report.votes.items()]
        print(tabulate(rows, headers=["candidate secret", "votes"]))
    print(f"\nConsensus secret: {report.secret if report.secret is not None else 'none'}")
    print()
    print(share_table(share_set.shares, report.corrupted, share_set.mismatched))
    return 0


def cmd_split(args):
    rng = random.Random(args.seed) if args.seed is not None else None
    engine = ShamirSecretSharing(args.threshold, args.shares, args.prime, rng=rng)

    secret = BigInt.from_string(args.secret, args.base)
    if secret.is_negative or secret >= engine.prime:
        raise QuorumError(f"Secret must lie in [0, {engine.prime})")

    shares = engine.generate_shares(secret)
    document = dump_shares(shares, args.threshold, path=args.output, commitments=args.commitments)
    if args.output:
        logger.info("Wrote %d shares to %s", len(shares), args.output)
        print(f"Secret split into {len(shares)} shares, any {args.threshold} recover it. Saved to {args.output}")
    else:
        print(json.dumps(document, indent=2))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="quorum",
        description="Threshold secret sharing with corrupted-share detection",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--prime", default=config.Config.FIELD_PRIME, help="field prime (decimal)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    recover = subparsers.add_parser("recover", help="detect corrupted shares and reconstruct the secret")
    recover.add_argument("file", help="JSON share document")
    recover.set_defaults(handler=cmd_recover)

    detect = subparsers.add_parser("detect", help="report which shares disagree with the consensus")
    detect.add_argument("file", help="JSON share document")
    detect.set_defaults(handler=cmd_detect)

    split = subparsers.add_parser("split", help="split a secret into shares")
    split.add_argument("--secret", required=True, help="secret to split")
    split.add_argument("--base", type=int, default=10, help="radix of --secret (default 10)")
    split.add_argument("-k", "--threshold", type=int, default=3, help="shares needed to recover")
    split.add_argument("-n", "--shares", type=int, default=6, help="shares to generate")
    split.add_argument("--seed", type=int, help="seed for reproducible coefficients")
    split.add_argument("--output", help="write the share document here instead of stdout")
    split.add_argument("--commitments", action="store_true", help="include SHA-256 share fingerprints")
    split.set_defaults(handler=cmd_split)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.Config.log_level(),
        format=config.Config.LOG_FORMAT,
    )

    try:
        return args.handler(args)
    except (QuorumError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
