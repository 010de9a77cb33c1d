from __future__ import annotations

import enum
import logging
import subprocess
from typing import List

from .errors import DecryptError

LOG = logging.getLogger(__name__)


class Encryptor(str, enum.Enum):
    OPENSSL = "openssl"
    GPG = "gpg"


def build_decrypt_command(
    encryptor: Encryptor,
    in_path: str,
    out_path: str,
    base64: bool = False,
    password_file: str = "",
    salt: bool = False,
) -> List[str]:
    """Argument vector for decrypting ``in_path`` into ``out_path``.

    ``base64``, ``password_file`` and ``salt`` only apply to openssl.
    """
    if encryptor is Encryptor.OPENSSL:
        cmd = ["openssl", "aes-256-cbc", "-d"]
        if base64:
            cmd.append("-base64")
        if password_file:
            cmd.extend(["-pass", f"file:{password_file}"])
        if salt:
            cmd.append("-salt")
        cmd.extend(["-in", in_path, "-out", out_path])
        return cmd
    if encryptor is Encryptor.GPG:
        return ["gpg", "-o", out_path, "-d", in_path]
    raise DecryptError(f"Unknown encryptor: {encryptor}")


def decrypt(cmd: List[str]) -> None:
    LOG.info("Decrypting with %s", cmd[0])
    try:
        subprocess.run(cmd, check=True, capture_output=True)
    except FileNotFoundError as exc:
        raise DecryptError(f"'{cmd[0]}' is not installed") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode("utf-8", "ignore").strip()
        raise DecryptError(f"{cmd[0]} exited with status {exc.returncode}: {stderr}") from exc
