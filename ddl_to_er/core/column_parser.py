"""
Column clause parser - name, data type and inline attributes of one column definition
"""
import logging
from typing import Optional, List

from .preprocessor import (
    clean_identifier, clean_qualified_identifier, extract_parenthesized, mask_quoted, QUOTE_CHARS
)
from .schema_model import Column, DataType, Table, Schema, CheckConstraint
from .sql_patterns import (
    COLUMN_DEFINITION, COLUMN_PATTERNS, DEFAULT_STOP_WORDS, FOREIGN_KEY_CLAUSE, ParsingErrorTypes
)

logger = logging.getLogger(__name__)


def parse_column_definition(table: Table, definition: str, schema: Schema) -> Optional[Column]:
    """
    Parse `<name> <type>[(size[,scale])] <attributes...>` and add the column to `table`.

    Problems are recorded on `schema` and the clause is skipped; None is returned.
    """
    if FOREIGN_KEY_CLAUSE.match(definition.strip()):
        logger.debug(f"Skipping FOREIGN KEY clause in column parser: {definition}")
        return None

    if not definition.strip():
        schema.add_error(
            ParsingErrorTypes.INVALID_COLUMN_DEFINITION,
            f"Empty column definition in table '{table.name}'",
            table.name
        )
        return None

    match = COLUMN_DEFINITION.match(definition)
    if not match:
        logger.debug(f"Failed to match column definition: {definition}")
        schema.add_error(
            ParsingErrorTypes.INVALID_COLUMN_DEFINITION,
            f"Invalid column definition: {definition}",
            table.name
        )
        return None

    column_name = clean_identifier(match.group(1))
    if not column_name:
        schema.add_error(
            ParsingErrorTypes.INVALID_COLUMN_DEFINITION,
            f"Empty column name in: {definition}",
            table.name
        )
        return None

    if column_name in table.columns:
        schema.add_error(
            ParsingErrorTypes.DUPLICATE_COLUMN,
            f"Duplicate column: {column_name}",
            table.name
        )
        return None

    column = Column(column_name, parse_data_type(match.group(2), match.group(3)))
    parse_column_attributes(column, match.group(4) or '', table)

    table.add_column(column)
    logger.debug(f"Parsed column {table.name}.{column_name}: {column.data_type.full_type}")
    return column


def parse_data_type(type_name: str, type_args: Optional[str] = None) -> DataType:
    """
    Split a type such as VARCHAR(100) or DECIMAL(10,2) into base type, size and scale
    """
    base_type = clean_identifier(type_name).upper() or 'UNKNOWN'
    if type_args is None:
        return DataType(base_type)

    args = [arg.strip() for arg in type_args.split(',')]
    full_type = f"{base_type}({','.join(arg.upper() if arg.isalnum() else arg for arg in args)})"

    if args and all(arg.isdigit() for arg in args) and len(args) <= 2:
        size = int(args[0])
        scale = int(args[1]) if len(args) == 2 else None
        return DataType(base_type, size, scale, full_type)

    # VARCHAR(MAX)、ENUM('a','b') 之类：保留完整类型，不设置数值长度
    return DataType(base_type, full_type=full_type)


def parse_column_attributes(column: Column, attributes: str, table: Table):
    """Apply NOT NULL / PRIMARY KEY / UNIQUE / IDENTITY / DEFAULT / REFERENCES / CHECK"""
    if not attributes.strip():
        return

    masked = mask_quoted(attributes)

    check_group = None
    check_match = COLUMN_PATTERNS['CHECK_OPEN'].search(masked)
    if check_match:
        open_index = check_match.end() - 1
        check_group = extract_parenthesized(attributes, open_index)
        if check_group:
            # CHECK 条件里的关键字不算列属性
            close_index = check_group[1]
            masked = masked[:open_index + 1] + ' ' * (close_index - open_index - 1) + masked[close_index:]

    if COLUMN_PATTERNS['NOT_NULL'].search(masked):
        column.is_nullable = False

    if COLUMN_PATTERNS['PRIMARY_KEY'].search(masked):
        column.mark_primary_key()

    if COLUMN_PATTERNS['UNIQUE'].search(masked):
        column.is_unique = True

    identity_match = COLUMN_PATTERNS['IDENTITY'].search(masked)
    if identity_match:
        column.is_identity = True
        column.identity_seed = int(identity_match.group(1) or 1)
        column.identity_increment = int(identity_match.group(2) or 1)
    elif COLUMN_PATTERNS['AUTO_INCREMENT'].search(masked):
        column.is_identity = True
        column.identity_seed = 1
        column.identity_increment = 1

    default_match = COLUMN_PATTERNS['DEFAULT'].search(masked)
    if default_match:
        column.default_value = read_default_expression(attributes, default_match.end())

    references_match = COLUMN_PATTERNS['REFERENCES'].search(masked)
    if references_match:
        ref_table = clean_qualified_identifier(attributes[references_match.start(1):references_match.end(1)])
        ref_column = clean_identifier(attributes[references_match.start(2):references_match.end(2)])
        column.mark_foreign_key(ref_table, ref_column)

    if check_group:
        name = f"CK_{table.name}_{table.check_constraint_count() + 1}"
        table.constraints.append(CheckConstraint(name, check_group[0].strip()))


def _read_token(text: str, start: int) -> int:
    """Return the end index of the whitespace-delimited token at `start`, quote and paren aware"""
    depth = 0
    in_quote = False
    quote_char = None
    i = start
    while i < len(text):
        char = text[i]
        if char in QUOTE_CHARS:
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = None
        elif not in_quote:
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1
            elif char.isspace() and depth <= 0:
                break
        i += 1
    return i


def read_default_expression(text: str, start: int) -> Optional[str]:
    """
    Capture the DEFAULT expression verbatim, stopping at the next column attribute keyword
    """
    tokens: List[str] = []
    i = start
    while i < len(text):
        if text[i].isspace():
            i += 1
            continue
        end = _read_token(text, i)
        token = text[i:end]
        if tokens and token.upper().rstrip(',') in DEFAULT_STOP_WORDS:
            break
        tokens.append(token)
        i = end

    return ' '.join(tokens) if tokens else None
