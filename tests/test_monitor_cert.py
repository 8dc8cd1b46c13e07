"""
Tests for monitor keystore/truststore generation.
"""

from unittest.mock import call, patch

import pytest

from accumulo_util.core.errors import AbortedError, ConfigurationError
from accumulo_util.core.settings import KEYRING_SERVICE, PASSWORD_ALPHABET
from accumulo_util.operations.monitor_cert import (
    gen_monitor_cert,
    generate_password,
    save_passwords_to_keyring,
)


def never(path):
    raise AssertionError(f"unexpected prompt for {path}")


def test_password_alphabet():
    assert "<" not in PASSWORD_ALPHABET
    assert ">" not in PASSWORD_ALPHABET
    assert "&" not in PASSWORD_ALPHABET
    assert PASSWORD_ALPHABET[0] == "#"
    assert PASSWORD_ALPHABET[-1] == "~"


def test_generate_password():
    password = generate_password()

    assert len(password) == 20
    assert all(c in PASSWORD_ALPHABET for c in password)
    assert generate_password() != password


@pytest.mark.parametrize("java_home", [None, "/definitely/not/a/jdk"])
def test_java_home_required(install, java_home):
    with pytest.raises(ConfigurationError, match="must be set and exist"):
        gen_monitor_cert(install, java_home, never)


def test_generates_stores(install, java_home):
    with patch("accumulo_util.operations.monitor_cert.run_command", return_value=0) as run:
        result = gen_monitor_cert(install, str(java_home), never)

    keytool = java_home / "bin" / "keytool"
    assert result.keystore == install.conf / "keystore.jks"
    assert result.truststore == install.conf / "cacerts.jks"
    assert result.certificate == install.conf / "server.cer"
    assert result.key_password != result.store_password

    assert run.call_count == 3
    genkey, export, imp = run.call_args_list

    assert genkey.args[0][:2] == [keytool, "-genkey"]
    assert "-dname" not in genkey.args[0]
    assert result.key_password in genkey.args[0]

    assert export.args[0][:2] == [keytool, "-export"]
    assert result.certificate in export.args[0]

    assert imp.args[0][:2] == [keytool, "-import"]
    assert "-trustcacerts" in imp.args[0]
    assert result.store_password in imp.args[0]
    assert imp.kwargs["stdin_text"] == "yes\n"


def test_dname_and_alias(install, java_home):
    with patch("accumulo_util.operations.monitor_cert.run_command", return_value=0) as run:
        gen_monitor_cert(install, str(java_home), never, dname="CN=monitor", alias="mon")

    genkey = run.call_args_list[0].args[0]
    assert genkey[genkey.index("-dname") + 1] == "CN=monitor"
    assert genkey[genkey.index("-alias") + 1] == "mon"


def test_declined_overwrite_aborts(install, java_home):
    keystore = install.conf / "keystore.jks"
    keystore.write_bytes(b"existing keystore")
    prompted = []

    def decline(path):
        prompted.append(path)
        return False

    with patch("accumulo_util.operations.monitor_cert.run_command") as run:
        with pytest.raises(AbortedError, match="KEYSTORE already exists, exiting"):
            gen_monitor_cert(install, str(java_home), decline)

    assert prompted == [keystore]
    assert keystore.read_bytes() == b"existing keystore"
    run.assert_not_called()


def test_declined_certificate_overwrite_keeps_everything(install, java_home):
    cert = install.conf / "server.cer"
    cert.write_text("cert")

    with patch("accumulo_util.operations.monitor_cert.run_command") as run:
        with pytest.raises(AbortedError, match="CERTIFICATE already exists"):
            gen_monitor_cert(install, str(java_home), lambda path: False)

    assert cert.read_text() == "cert"
    run.assert_not_called()


def test_accepted_overwrite_removes_files(install, java_home):
    keystore = install.conf / "keystore.jks"
    truststore = install.conf / "cacerts.jks"
    keystore.write_bytes(b"old")
    truststore.write_bytes(b"old")

    with patch("accumulo_util.operations.monitor_cert.run_command", return_value=0):
        gen_monitor_cert(install, str(java_home), lambda path: True)

    # keytool is mocked, so nothing recreates them
    assert not keystore.exists()
    assert not truststore.exists()


def test_properties(install, java_home):
    with patch("accumulo_util.operations.monitor_cert.run_command", return_value=0):
        result = gen_monitor_cert(install, str(java_home), never)

    props = result.properties()
    assert props["monitor.ssl.keyStore"] == str(install.conf / "keystore.jks")
    assert props["monitor.ssl.keyStorePassword"] == result.key_password
    assert props["monitor.ssl.trustStore"] == str(install.conf / "cacerts.jks")
    assert props["monitor.ssl.trustStorePassword"] == result.store_password


def test_save_passwords_to_keyring(install, java_home):
    with patch("accumulo_util.operations.monitor_cert.run_command", return_value=0):
        result = gen_monitor_cert(install, str(java_home), never)

    with patch("accumulo_util.operations.monitor_cert.keyring.set_password") as set_password:
        save_passwords_to_keyring(result)

    set_password.assert_has_calls([
        call(KEYRING_SERVICE, "keyStorePassword", result.key_password),
        call(KEYRING_SERVICE, "trustStorePassword", result.store_password),
    ])
