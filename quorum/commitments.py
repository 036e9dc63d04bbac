from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.backends import default_backend


def create_commitment(data: bytes) -> str:
    """Create cryptographic commitment"""
    digest = hashes.Hash(hashes.SHA256(), backend=default_backend())
    digest.update(data)
    return digest.finalize().hex()


def share_commitment(share) -> str:
    return create_commitment(f"{share.index},{share.value}".encode("utf-8"))


def secret_commitment(secret) -> str:
    return create_commitment(str(secret).encode("utf-8"))


def verify_share_commitment(share, commitment: str) -> bool:
    return share_commitment(share) == commitment.lower()
