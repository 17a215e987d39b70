"""Fixed values shared by the simulator, the exporters and the runner."""

# slot counts offered to the user
CACHE_SIZES = (4, 8, 16)

# readings carry addresses in [0, ADDRESS_SPACE)
ADDRESS_SPACE = 256

# abstract time units used for the average access time
HIT_TIME = 1
MISS_PENALTY = 100

# rolling window for the access and metric histories
HISTORY_LIMIT = 100

DEFAULT_SLOT_COUNT = 8
DEFAULT_MAPPING = "Direct Mapped"
DEFAULT_POLICY = "LRU"

# seconds between readings in live monitoring
MONITOR_INTERVAL = 1.5
