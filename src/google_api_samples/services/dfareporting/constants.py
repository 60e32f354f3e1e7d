DFAREPORTING_API_NAME = "dfareporting"
DFAREPORTING_API_VERSION = "v4"
DFAREPORTING_SCOPE = "https://www.googleapis.com/auth/dfareporting"

DEFAULT_MAX_PAGE_SIZE = 10
SECONDS_BETWEEN_POLLS = 30
MAX_POLLS = 10

REPORT_STATUS_PROCESSING = "PROCESSING"
REPORT_STATUS_AVAILABLE = "REPORT_AVAILABLE"
DEFAULT_MAX_LIST_PAGE_SIZE = 50

# Dimension and metric names of the v4 API (earlier versions used a "dfa:" prefix)
ADVERTISER_DIMENSION = "advertiser"
FLOODLIGHT_CONFIG_DIMENSION = "floodlightConfigId"
ACTIVITY_DIMENSION = "activity"

STANDARD_REPORT_FILE_NAME = "api_report_files"
STANDARD_REPORT_METRICS = ["clicks", "impressions"]

FLOODLIGHT_REPORT_FILE_NAME = "api_floodlight_report_files"
FLOODLIGHT_REPORT_DIMENSIONS = [FLOODLIGHT_CONFIG_DIMENSION, ACTIVITY_DIMENSION, ADVERTISER_DIMENSION]
FLOODLIGHT_REPORT_METRICS = [
    "activityClickThroughConversions",
    "activityClickThroughRevenue",
    "activityViewThroughConversions",
    "activityViewThroughRevenue",
]
