"""SHA-256 helpers for client identities and file identifiers."""

import hashlib

from filehost.types import FileIdentifiers


def hash_bytes(data: bytes) -> str:
    """
    Compute SHA-256 digest for given data.

    Args:
        data: Bytes to hash

    Returns:
        Hexadecimal string representation of the digest
    """
    return hashlib.sha256(data).hexdigest()


def hash_string(value: str) -> str:
    """
    Compute SHA-256 digest of a UTF-8 string.

    Args:
        value: String to hash

    Returns:
        Hexadecimal string representation of the digest
    """
    return hash_bytes(value.encode("utf-8"))


def hash_identity(address: str) -> str:
    """
    Derive the opaque client identity from a raw network address.

    Args:
        address: Client address as received by the boundary layer

    Returns:
        64 character hex token
    """
    return hash_string(address)


def derive_identifiers(
    data: bytes,
    filename: str,
    encryption_key: str,
    exclusion_key: str,
) -> FileIdentifiers:
    """
    Derive the public and private identifiers for an upload.

    public  = H(bytes || filename || encryption_key)
    private = H(bytes || filename || encryption_key || exclusion_key)

    Both are hashed once more before they leave this function; only the
    second-level digests are persisted or returned to callers.

    Args:
        data: Uploaded file content
        filename: Original filename
        encryption_key: Primary server secret
        exclusion_key: Secret known only to the server, guarding deletion

    Returns:
        FileIdentifiers with both hashed identifiers
    """
    hasher = hashlib.sha256()
    hasher.update(data)
    hasher.update(filename.encode("utf-8"))
    hasher.update(encryption_key.encode("utf-8"))
    public_raw = hasher.copy().hexdigest()

    hasher.update(exclusion_key.encode("utf-8"))
    private_raw = hasher.hexdigest()

    return FileIdentifiers(
        public_id=hash_string(public_raw),
        private_id=hash_string(private_raw),
    )
