from typing import Dict

# Two endpoint families exist on the server side: the RPC-style admin
# endpoints under /system and the older REST-style /complaints resource.
PATHS: Dict[str, Dict[str, str]] = {
    "rpc": {
        "list": "/system/complaint/list",
        "create": "/system/complaint/add",
        "detail": "/system/complaint/get",
        "update": "/system/complaint/edit",
        "delete": "/system/complaint/delete",
        "batch_delete": "/system/complaint/delete",
        "records": "/system/complaint/records",
        "add_record": "/system/complaint/records/add",
        "feedback_list": "/system/complaintFeedback/list",
        "feedback_delete": "/system/complaintFeedback/batch",
    },
    "rest": {
        "list": "/complaints",
        "create": "/complaints",
        "detail": "/complaints/{id}",
        "update": "/complaints/{id}",
        "delete": "/complaints/{id}",
        "batch_delete": "/complaints",
        "records": "/complaints/records",
        "add_record": "/complaints/records/add",
        "feedback_list": "/complaintFeedback/list",
        "feedback_delete": "/complaintFeedback/batch",
    },
}

STATISTICS_PATHS = {
    "overview": "/statistics/overview",
    "types": "/statistics/types",
    "monthly_trends": "/statistics/monthly-trends",
    "areas": "/statistics/areas",
}


def paths_for(style: str) -> Dict[str, str]:
    if style not in PATHS:
        raise ValueError(f"Unknown API style: {style!r} (expected one of {sorted(PATHS)})")
    return PATHS[style]
