from enum import Enum

class NumberSetKind(str, Enum):
    INTEGER_NUMBER_SET = "INTEGER_NUMBER_SET"
    NATURAL_NUMBER_SET = "NATURAL_NUMBER_SET"
    RATIONAL_NUMBER_SET = "RATIONAL_NUMBER_SET"
    REAL_NUMBER_SET = "REAL_NUMBER_SET"
