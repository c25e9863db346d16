"""
Timing constants shared by the impairment generators and the scheduler.
"""

# One impairment slice per millisecond
TICKS_PER_SEC = 1000

# Every generator keeps this many seconds of slices synthesised ahead
WINDOW_SECONDS = 3
WINDOW_TICKS = WINDOW_SECONDS * TICKS_PER_SEC

# Half a millisecond, added before truncating a time offset to a slice index
SLICE_ROUNDING = 0.0005

# How far back (seconds) the post-core segments look to keep core ordering
SEARCHBACK_PERIOD = 0.020
