"""
Project-wide constants that are unlikely to change at runtime.
"""

# Native library
NATIVE_TARBALL_GLOB = "accumulo-native-*.tar.gz"
NATIVE_LIB_NAMES = ("libaccumulo.so", "libaccumulo.dylib")
NATIVE_LIB_GLOB = "libaccumulo.*"
NATIVE_TMP_PREFIX = "accumulo-native."

# Monitor certificate
DEFAULT_CERT_ALIAS = "default"
PASSWORD_LENGTH = 20
# Printable ASCII from '#' to '~', minus the characters that break XML config
PASSWORD_ALPHABET = "".join(
    chr(c) for c in range(ord("#"), ord("~") + 1) if chr(c) not in "<>&"
)
KEYSTORE_FILENAME = "keystore.jks"
TRUSTSTORE_FILENAME = "cacerts.jks"
CERT_FILENAME = "server.cer"
KEYRING_SERVICE = "accumulo-monitor"

# VFS classloader
VFS_CLASSPATHS_PROPERTY = "general.vfs.classpaths"
CLIENTS_PER_DATANODE = 50
MIN_REPLICATION = 3
# Jars the local classloader needs to boot, copied back out of HDFS
BOOT_JARS = ("commons-vfs2.jar", "accumulo-start.jar", "slf4j*.jar")

# ZooKeeper
DUMP_ZOO_CLASS = "org.apache.accumulo.server.util.DumpZookeeper"
