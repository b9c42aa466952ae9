"""J-Grants public API paths and query defaults."""

SUBSIDIES_PATH = "/subsidies"
SUBSIDY_DETAIL_PATH = "/subsidies/id/{id}"

# The listing endpoint rejects keywords shorter than two characters.
DEFAULT_KEYWORD = "事業"
MIN_KEYWORD_LENGTH = 2
DEFAULT_SORT = "created_date"
DEFAULT_ORDER = "DESC"
DEFAULT_ACCEPTANCE = 1

OPTIONAL_QUERY_FIELDS = (
    "use_purpose",
    "industry",
    "target_number_of_employees",
    "target_area_search",
)
