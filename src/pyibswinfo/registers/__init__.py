"""Switch register catalogue, dump parsing and plan selection.

- definitions: register mnemonics and the fields read from each
- dump: parsing of ``mlxreg_ext`` output and field extraction
- plan: registers and index parameters per output category
"""

from pyibswinfo.registers.definitions import (
    BY_NAME,
    OPTIONAL_REGISTERS,
    REGISTERS,
    RegisterDefinition,
    RegisterName,
)
from pyibswinfo.registers.dump import (
    RegisterDump,
    RegisterFailure,
    RegisterField,
    RegisterReadResult,
    extract_field,
    extract_int,
    extract_text,
    parse_register_output,
)
from pyibswinfo.registers.plan import (
    CATEGORY_REGISTERS,
    INDEX_RULES,
    IndexRule,
    OutputCategory,
    RegisterPlan,
    format_indexes,
    indexes_for,
    plan_for,
)

__all__ = [
    # Definitions
    "RegisterName",
    "RegisterDefinition",
    "REGISTERS",
    "BY_NAME",
    "OPTIONAL_REGISTERS",
    # Dumps
    "RegisterDump",
    "RegisterField",
    "RegisterFailure",
    "RegisterReadResult",
    "parse_register_output",
    "extract_field",
    "extract_int",
    "extract_text",
    # Plans
    "OutputCategory",
    "CATEGORY_REGISTERS",
    "IndexRule",
    "INDEX_RULES",
    "RegisterPlan",
    "plan_for",
    "indexes_for",
    "format_indexes",
]
