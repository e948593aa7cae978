DEFAULT_BASE_URL = "http://localhost:3000/"
DEFAULT_API_TIMEOUT: float | None = None

# Header the backend reads the credential from on authenticated routes
TOKEN_HEADER = "token"
REDACTED_HEADERS = frozenset({"token", "authorization", "cookie"})

# Status codes the verification probe treats as a known auth outcome
TOKEN_CHECK_AUTH_STATUSES = (401, 403)

CSV_FILE_FIELD = "csvFile"
CSV_CONTENT_TYPE = "text/csv"

METERS_URL = "/api/meters"
GROUPS_URL = "/api/groups"
GROUP_CHILDREN_URL = "api/groups/children/{group_id}"
GROUP_CREATE_URL = "api/groups/create"
GROUP_EDIT_URL = "api/groups/edit"
GROUP_DELETE_URL = "api/groups/delete"
LINE_READINGS_METERS_URL = "/api/readings/line/meters/{ids}"
LINE_READINGS_GROUPS_URL = "/api/readings/line/groups/{ids}"
BAR_READINGS_METERS_URL = "/api/readings/bar/meters/{ids}"
BAR_READINGS_GROUPS_URL = "/api/readings/bar/groups/{ids}"
PREFERENCES_URL = "/api/preferences"
VERIFICATION_URL = "/api/verification/"
LOGIN_URL = "/api/login/"
FILE_PROCESSING_URL = "/api/fileProcessing/{meter_id}"
