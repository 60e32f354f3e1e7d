ADSENSE_API_NAME = "adsense"
ADSENSE_API_VERSION = "v1.4"
ADSENSE_SCOPE_READONLY = "https://www.googleapis.com/auth/adsense.readonly"

DEFAULT_MAX_PAGE_SIZE = 50
MAX_PAGE_SIZE_LIMIT = 10000

DEFAULT_METRICS = [
    "PAGE_VIEWS",
    "AD_REQUESTS",
    "AD_REQUESTS_COVERAGE",
    "AD_REQUESTS_CTR",
    "COST_PER_CLICK",
    "AD_REQUESTS_RPM",
    "EARNINGS",
]
DEFAULT_DIMENSIONS = ["DATE"]
DEFAULT_SORT = ["+DATE"]
