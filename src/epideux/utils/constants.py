"""
A list of constants to be consistent across different scripts.
"""

# time
SECONDS_PER_MINUTE        = 60
SECONDS_PER_HOUR          = 3600
SECONDS_PER_DAY           = 86400

# reporting
DEFAULT_REPORT_INTERVAL_HOURS = 24

# SEIR compartments, in order of progression
SEIR_STATES               = ["susceptible", "exposed", "infectious", "recovered"]

# scenarios that can be built from a configuration
ALL_SCENARIOS             = ["single_home", "two_age_groups", "move_location"]

# format of `start_time` in the configuration files
START_TIME_FORMAT         = "%Y-%m-%d %H:%M:%S"
