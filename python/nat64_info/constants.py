from pathlib import Path

VERSION = "1.0.0"

# dirs paths
ETC_DIR = Path("/etc/nat64-info")

# files paths
CONFIG_FILE = ETC_DIR / "config.yaml"

# host with a stable IPv4-only address, used to detect DNS64
NAT64_PROBE_HOST = "nat64.jitsi.net"

# how long a discovered NAT64 prefix stays valid
NAT64_PREFIX_TTL = "60s"

# upper bound for a single DNS lookup
RESOLVER_TIMEOUT = "5s"
