from enum import Enum


class Dialect(str, Enum):
    MYSQL = "mysql"
    POSTGRES = "postgres"
    ORACLE = "oracle"
