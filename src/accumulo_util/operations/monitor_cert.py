"""
Generate the keystore, truststore and certificate used by the monitor's HTTPS endpoint.

The stores are created with the JDK's keytool; the passwords are random
and are printed as accumulo.properties lines for the operator to copy.
"""

import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

import keyring

from accumulo_util.core.config import InstallPaths
from accumulo_util.core.errors import AbortedError, ConfigurationError, PreconditionError
from accumulo_util.core.settings import (
    CERT_FILENAME,
    DEFAULT_CERT_ALIAS,
    KEYRING_SERVICE,
    KEYSTORE_FILENAME,
    PASSWORD_ALPHABET,
    PASSWORD_LENGTH,
    TRUSTSTORE_FILENAME,
)
from accumulo_util.utils.process import run_command

logger = logging.getLogger(__name__)


@dataclass
class MonitorCertResult:
    keystore: Path
    truststore: Path
    certificate: Path
    key_password: str
    store_password: str

    def properties(self) -> Dict[str, str]:
        """The accumulo.properties entries that point the monitor at the new stores."""
        return {
            "monitor.ssl.keyStore": str(self.keystore),
            "monitor.ssl.keyStorePassword": self.key_password,
            "monitor.ssl.trustStore": str(self.truststore),
            "monitor.ssl.trustStorePassword": self.store_password,
        }


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def _keytool(java_home: Optional[str]) -> Path:
    if not java_home or not Path(java_home).is_dir():
        raise ConfigurationError(f"JAVA_HOME={java_home or ''} must be set and exist")
    keytool = Path(java_home) / "bin" / "keytool"
    if not keytool.is_file():
        raise PreconditionError(f"keytool not found at {keytool}")
    return keytool


def _clear_existing(kind: str, path: Path, confirm: Callable[[Path], bool]) -> None:
    """Remove path if the user agrees; abort the whole operation otherwise."""
    if not path.exists():
        return
    if not confirm(path):
        raise AbortedError(f"{kind} already exists, exiting")
    path.unlink()
    logger.info(f"Removed existing {kind.lower()} {path}")


def save_passwords_to_keyring(result: MonitorCertResult) -> None:
    keyring.set_password(KEYRING_SERVICE, "keyStorePassword", result.key_password)
    keyring.set_password(KEYRING_SERVICE, "trustStorePassword", result.store_password)
    logger.info(f"Stored monitor passwords in keyring service '{KEYRING_SERVICE}'")


def gen_monitor_cert(
    paths: InstallPaths,
    java_home: Optional[str],
    confirm: Callable[[Path], bool],
    dname: Optional[str] = None,
    alias: str = DEFAULT_CERT_ALIAS,
) -> MonitorCertResult:
    """
    Create a self-signed key pair for the monitor and a truststore that trusts it.

    Existing keystore, truststore or certificate files are only removed if
    ``confirm`` returns True for them; declining any of them aborts before
    keytool is run.

    Args:
        paths: Installation layout; files are written to the conf directory
        java_home: JDK directory containing bin/keytool
        confirm: Called with each pre-existing path, returns True to delete it
        dname: X.500 distinguished name; keytool prompts for it when None
        alias: Key alias inside the stores

    Returns:
        MonitorCertResult with the generated paths and passwords

    Raises:
        ConfigurationError: If JAVA_HOME is not usable
        AbortedError: If the user declines to overwrite an existing file
        CommandFailedError: If a keytool invocation fails
    """
    keytool = _keytool(java_home)

    key_password = generate_password()
    store_password = generate_password()

    keystore = paths.conf / KEYSTORE_FILENAME
    truststore = paths.conf / TRUSTSTORE_FILENAME
    certificate = paths.conf / CERT_FILENAME

    _clear_existing("KEYSTORE", keystore, confirm)
    _clear_existing("TRUSTSTORE", truststore, confirm)
    _clear_existing("CERTIFICATE", certificate, confirm)

    paths.conf.mkdir(parents=True, exist_ok=True)

    genkey = [
        keytool, "-genkey", "-alias", alias, "-keyalg", "RSA",
        "-keypass", key_password, "-storepass", key_password,
        "-keystore", keystore,
    ]
    if dname:
        genkey += ["-dname", dname]
    run_command(genkey)

    run_command([
        keytool, "-export", "-alias", alias, "-storepass", key_password,
        "-file", certificate, "-keystore", keystore,
    ])

    # -import asks whether to trust the certificate
    run_command(
        [
            keytool, "-import", "-v", "-trustcacerts", "-alias", alias,
            "-file", certificate, "-keystore", truststore,
            "-storepass", store_password,
        ],
        stdin_text="yes\n",
    )

    return MonitorCertResult(
        keystore=keystore,
        truststore=truststore,
        certificate=certificate,
        key_password=key_password,
        store_password=store_password,
    )
