# Global configuration for the quorum share recovery tool
import os

class Config:
    # Field parameters
    FIELD_PRIME = os.environ.get("QUORUM_PRIME", "1000000000000000000000000000057")
    COEFFICIENT_BOUND = 999999999  # Random coefficients are drawn from 1..bound

    # BigInt digit groups (least-significant group first)
    DIGIT_BASE = 10**9
    DIGIT_WIDTH = 9

    # Parsing
    MIN_RADIX = 2
    MAX_RADIX = 36

    # Logging
    LOG_LEVEL = os.environ.get("QUORUM_LOG_LEVEL", "WARNING")
    LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    # Research parameters
    PERFORMANCE_SAMPLES = int(os.environ.get("QUORUM_PERFORMANCE_SAMPLES", 100))

    @classmethod
    def log_level(cls):
        return cls.LOG_LEVEL.upper()
