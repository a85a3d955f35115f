"""
Permission codes and the role -> permission mapping
"""
from innsync.models.hotel import StaffRole

PROPERTY_READ = "property:read"
PROPERTY_WRITE = "property:write"

ROOM_READ = "room:read"
ROOM_WRITE = "room:write"
ROOM_STATUS = "room:status"

GUEST_READ = "guest:read"
GUEST_WRITE = "guest:write"

RESERVATION_READ = "reservation:read"
RESERVATION_WRITE = "reservation:write"
RESERVATION_CANCEL = "reservation:cancel"
CHECKIN_EXECUTE = "checkin:execute"
CHECKOUT_EXECUTE = "checkout:execute"

PAYMENT_READ = "payment:read"
PAYMENT_WRITE = "payment:write"
PAYMENT_REFUND = "payment:refund"

TASK_READ = "task:read"
TASK_WRITE = "task:write"

MENU_READ = "menu:read"
MENU_WRITE = "menu:write"
ORDER_READ = "order:read"
ORDER_WRITE = "order:write"
BILL_READ = "bill:read"
BILL_WRITE = "bill:write"

REPORT_READ = "report:read"
EXPORT_READ = "export:read"

WEBHOOK_MANAGE = "webhook:manage"
BACKUP_MANAGE = "backup:manage"


ROLE_PERMISSIONS = {
    StaffRole.MANAGER: {
        PROPERTY_READ, PROPERTY_WRITE, ROOM_READ, ROOM_WRITE, ROOM_STATUS,
        GUEST_READ, GUEST_WRITE, RESERVATION_READ, RESERVATION_WRITE, RESERVATION_CANCEL,
        CHECKIN_EXECUTE, CHECKOUT_EXECUTE, PAYMENT_READ, PAYMENT_WRITE, PAYMENT_REFUND,
        TASK_READ, TASK_WRITE, MENU_READ, MENU_WRITE, ORDER_READ, ORDER_WRITE,
        BILL_READ, BILL_WRITE, REPORT_READ, EXPORT_READ, WEBHOOK_MANAGE, BACKUP_MANAGE,
    },
    StaffRole.RECEPTIONIST: {
        PROPERTY_READ, ROOM_READ, ROOM_STATUS, GUEST_READ, GUEST_WRITE,
        RESERVATION_READ, RESERVATION_WRITE, RESERVATION_CANCEL,
        CHECKIN_EXECUTE, CHECKOUT_EXECUTE, PAYMENT_READ, PAYMENT_WRITE,
        TASK_READ, TASK_WRITE, MENU_READ, ORDER_READ, ORDER_WRITE,
        BILL_READ, BILL_WRITE, REPORT_READ, EXPORT_READ,
    },
    StaffRole.HOUSEKEEPING: {
        PROPERTY_READ, ROOM_READ, ROOM_STATUS, TASK_READ, TASK_WRITE,
    },
    StaffRole.KITCHEN: {
        PROPERTY_READ, MENU_READ, MENU_WRITE, ORDER_READ, ORDER_WRITE,
    },
}


def has_permission(role: StaffRole, code: str) -> bool:
    """Admins hold every permission"""
    if role == StaffRole.ADMIN:
        return True
    return code in ROLE_PERMISSIONS.get(role, set())
