import os

# --- Transport ---
BASE_URL = os.getenv("COMPLAINT_DESK_BASE_URL", "http://localhost:8080")
TIMEOUT = float(os.getenv("COMPLAINT_DESK_TIMEOUT", "15"))

# "rpc" -> /system/complaint/list, /add, /get?id=, /edit, /delete
# "rest" -> /complaints, /complaints/{id}
API_STYLE = os.getenv("COMPLAINT_DESK_API_STYLE", "rpc")

# Key style used on the wire: "camel" (createdAt) or "snake" (created_at)
WIRE_CASE = os.getenv("COMPLAINT_DESK_WIRE_CASE", "camel")

# --- Queries ---
DEFAULT_PAGE_NUM = 1
DEFAULT_PAGE_SIZE = int(os.getenv("COMPLAINT_DESK_PAGE_SIZE", "20"))

# --- Statistics ---
URGENT_LEVELS = tuple(
    level.strip()
    for level in os.getenv("COMPLAINT_DESK_URGENT_LEVELS", "urgent").split(",")
    if level.strip()
)

# --- Lifecycle ---
DEFAULT_OPERATOR = os.getenv("COMPLAINT_DESK_OPERATOR", "system")
