"""
accumulo-util - administrative helpers for an Accumulo installation.

Builds the native library, generates monitor TLS stores, loads jars into
HDFS for the VFS classloader and dumps ZooKeeper.
"""

__version__ = "2.1.0"
