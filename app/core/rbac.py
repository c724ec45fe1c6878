"""Names of the actions and protected entities the API checks against."""

from __future__ import annotations

CAN_CREATE = "can_create"
CAN_READ = "can_read"
CAN_UPDATE = "can_update"
CAN_DELETE = "can_delete"
CAN_LIST = "can_list"
CAN_UPLOAD = "can_upload"
CAN_DOWNLOAD = "can_download"

ACTION_NAMES = [
    CAN_CREATE,
    CAN_READ,
    CAN_UPDATE,
    CAN_DELETE,
    CAN_LIST,
    CAN_UPLOAD,
    CAN_DOWNLOAD,
]

ENTITY_ADMIN_DASHBOARD = "/admin/dashboard"
ENTITY_ADMIN_USERS_PAGE = "/admin/dashboard/users"
ENTITY_USER_RESOURCE = "Resource::User"
ENTITY_INVOICE_RESOURCE = "Resource::Invoice"

ENTITY_NAMES = [
    ENTITY_ADMIN_DASHBOARD,
    ENTITY_ADMIN_USERS_PAGE,
    ENTITY_USER_RESOURCE,
    ENTITY_INVOICE_RESOURCE,
]
