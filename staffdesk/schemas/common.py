from enum import Enum


class Role(str, Enum):
    admin = "admin"
    hr = "hr"
    employee = "employee"
