from enum import Enum


class TableNames(str, Enum):
    RSVPS = "rsvps"
