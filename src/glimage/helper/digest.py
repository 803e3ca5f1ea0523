import hashlib

from glimage.errors import DigestMismatch


def calculate_sha256(data: bytes) -> str:
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def verify_sha256(checksum: str, data: bytes):
    data_checksum = calculate_sha256(data)
    if checksum != data_checksum:
        raise DigestMismatch(checksum, data_checksum)


def calculate_file_sha256(file_path: str) -> str:
    """Calculate the SHA256 checksum of a file."""
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for byte_block in iter(lambda: f.read(4096), b""):
            sha256_hash.update(byte_block)
    return f"sha256:{sha256_hash.hexdigest()}"
