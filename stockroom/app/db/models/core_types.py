import enum

class Role(str, enum.Enum):
    administrator = "administrator"
    manager = "manager"
    staff = "staff"

class MovementType(str, enum.Enum):
    inflow = "INFLOW"
    outflow = "OUTFLOW"
    adjustment = "ADJUSTMENT"

class AdjustmentDirection(str, enum.Enum):
    increase = "INCREASE"
    decrease = "DECREASE"

class RequestStatus(str, enum.Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"
    sent = "SENT"
    received = "RECEIVED"
    archived = "ARCHIVED"
