import time


def epoch_now() -> int:
    """Current time as whole epoch seconds, the unit every timestamp column uses."""
    return int(time.time())
