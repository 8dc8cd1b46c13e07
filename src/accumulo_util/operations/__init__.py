"""
The operations behind each accumulo-util command.

Each module exposes a single entry function that raises a UtilError
subclass on failure and leaves exit-code handling to the CLI.
"""

from accumulo_util.operations.native import build_native
from accumulo_util.operations.monitor_cert import gen_monitor_cert
from accumulo_util.operations.vfs import load_jars_hdfs
from accumulo_util.operations.zoo import dump_zoo

__all__ = [
    "build_native",
    "gen_monitor_cert",
    "load_jars_hdfs",
    "dump_zoo",
]
