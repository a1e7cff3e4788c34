"""
SQL patterns, type mappings and issue/cardinality constants shared by the parser stages
"""
import re

# 标识符：[name] "name" `name` 'name' 或普通单词
IDENT = r"(?:\[[^\]]+\]|\"[^\"]+\"|`[^`]+`|'[^']+'|\w+)"
# 可带 schema 前缀的标识符，例如 dbo.Users / [dbo].[Users]
QUALIFIED_IDENT = rf"(?:{IDENT}\s*\.\s*)?{IDENT}"
QUALIFIED_NAME = re.compile(rf"^(?:{IDENT}\s*\.\s*)?({IDENT})$")

CREATE_TABLE_KEYWORD = re.compile(
    r'\bCREATE\s+(?:(?:GLOBAL|LOCAL)\s+)?(?:(?:TEMPORARY|TEMP)\s+)?TABLE\b', re.IGNORECASE
)
CREATE_TABLE_HEAD = re.compile(
    r'\bCREATE\s+(?:(?:GLOBAL|LOCAL)\s+)?(?:(?:TEMPORARY|TEMP)\s+)?TABLE\s+'
    rf'(?:IF\s+NOT\s+EXISTS\s+)?({QUALIFIED_IDENT})\s*\(',
    re.IGNORECASE
)

CREATE_INDEX = re.compile(
    r'\bCREATE\s+(UNIQUE\s+)?(?:(?:CLUSTERED|NONCLUSTERED)\s+)?INDEX\s+(?:IF\s+NOT\s+EXISTS\s+)?'
    rf'({IDENT})\s+ON\s+({QUALIFIED_IDENT})\s*\(([^()]*)\)',
    re.IGNORECASE
)

# ALTER TABLE x [WITH CHECK] ADD <constraint>[, ADD <constraint> ...]
ALTER_TABLE_ADD = re.compile(
    rf'^ALTER\s+TABLE\s+(?:ONLY\s+)?({QUALIFIED_IDENT})\s+(?:WITH\s+(?:NO)?CHECK\s+)?ADD\s+(.*)$',
    re.IGNORECASE | re.DOTALL
)
ADD_PREFIX = re.compile(r'^ADD\s+', re.IGNORECASE)

WHITESPACE = re.compile(r'\s+')

CONSTRAINT_CLAUSE = re.compile(
    r'^(?:CONSTRAINT|FOREIGN\s+KEY|PRIMARY\s+KEY|UNIQUE|CHECK)\b', re.IGNORECASE
)
FOREIGN_KEY_CLAUSE = re.compile(r'^FOREIGN\s+KEY\b', re.IGNORECASE)

COLUMN_DEFINITION = re.compile(
    rf'^\s*({IDENT})\s+(\[\w+\]|\w+)(?:\s*\(([^()]*)\))?(.*)$', re.IGNORECASE | re.DOTALL
)

TABLE_PATTERNS = {
    'CONSTRAINT_NAME': re.compile(rf'^\s*CONSTRAINT\s+({IDENT})\s*', re.IGNORECASE),
    'FOREIGN_KEY': re.compile(r'\bFOREIGN\s+KEY\b', re.IGNORECASE),
    'PRIMARY_KEY': re.compile(r'\bPRIMARY\s+KEY\b', re.IGNORECASE),
    'UNIQUE': re.compile(r'\bUNIQUE\b', re.IGNORECASE),
    'CHECK': re.compile(r'\bCHECK\b', re.IGNORECASE),
    'FOREIGN_KEY_CONSTRAINT': re.compile(
        rf'FOREIGN\s+KEY\s*\(([^()]*)\)\s*REFERENCES\s+({QUALIFIED_IDENT})\s*\(([^()]*)\)',
        re.IGNORECASE
    ),
    'PRIMARY_KEY_CONSTRAINT': re.compile(
        r'PRIMARY\s+KEY(?:\s+(?:CLUSTERED|NONCLUSTERED))?\s*\(([^()]*)\)', re.IGNORECASE
    ),
    'UNIQUE_CONSTRAINT': re.compile(
        r'UNIQUE(?:\s+(?:CLUSTERED|NONCLUSTERED))?(?:\s+(?:KEY|INDEX))?'
        rf'(?:\s+{IDENT})?\s*\(([^()]*)\)',
        re.IGNORECASE
    ),
    'CHECK_OPEN': re.compile(r'\bCHECK\s*\(', re.IGNORECASE),
    'ON_DELETE': re.compile(
        r'\bON\s+DELETE\s+(CASCADE|SET\s+NULL|SET\s+DEFAULT|NO\s+ACTION|RESTRICT)\b', re.IGNORECASE
    ),
    'ON_UPDATE': re.compile(
        r'\bON\s+UPDATE\s+(CASCADE|SET\s+NULL|SET\s+DEFAULT|NO\s+ACTION|RESTRICT)\b', re.IGNORECASE
    ),
}

COLUMN_PATTERNS = {
    'NOT_NULL': re.compile(r'\bNOT\s+NULL\b', re.IGNORECASE),
    'PRIMARY_KEY': re.compile(r'\bPRIMARY\s+KEY\b', re.IGNORECASE),
    'UNIQUE': re.compile(r'\bUNIQUE\b', re.IGNORECASE),
    'IDENTITY': re.compile(r'\bIDENTITY\b(?:\s*\(\s*(-?\d+)\s*,\s*(-?\d+)\s*\))?', re.IGNORECASE),
    'AUTO_INCREMENT': re.compile(r'\bAUTO_?INCREMENT\b', re.IGNORECASE),
    'DEFAULT': re.compile(r'\bDEFAULT\s+', re.IGNORECASE),
    'REFERENCES': re.compile(
        rf'\bREFERENCES\s+({QUALIFIED_IDENT})\s*\(\s*({IDENT})\s*\)', re.IGNORECASE
    ),
    'CHECK_OPEN': re.compile(r'\bCHECK\s*\(', re.IGNORECASE),
}

# DEFAULT 表达式在遇到这些关键字时结束
DEFAULT_STOP_WORDS = {
    'NOT', 'NULL', 'PRIMARY', 'UNIQUE', 'REFERENCES', 'IDENTITY', 'CHECK', 'CONSTRAINT',
    'FOREIGN', 'COLLATE', 'ON', 'AUTO_INCREMENT', 'AUTOINCREMENT', 'COMMENT',
}

SORT_SUFFIX = re.compile(r'\s+(?:ASC|DESC)$', re.IGNORECASE)

# Data type mappings (SQL Server first, plus common MySQL / PostgreSQL aliases)
DATA_TYPE_MAPPINGS = {
    # Numeric types
    'INT': {'type': 'number', 'size': 4, 'category': 'integer'},
    'INTEGER': {'type': 'number', 'size': 4, 'category': 'integer'},
    'BIGINT': {'type': 'number', 'size': 8, 'category': 'integer'},
    'SMALLINT': {'type': 'number', 'size': 2, 'category': 'integer'},
    'TINYINT': {'type': 'number', 'size': 1, 'category': 'integer'},
    'MEDIUMINT': {'type': 'number', 'size': 3, 'category': 'integer'},
    'SERIAL': {'type': 'number', 'size': 4, 'category': 'integer'},
    'BIGSERIAL': {'type': 'number', 'size': 8, 'category': 'integer'},
    'BIT': {'type': 'boolean', 'size': 1, 'category': 'boolean'},
    'BOOLEAN': {'type': 'boolean', 'size': 1, 'category': 'boolean'},
    'BOOL': {'type': 'boolean', 'size': 1, 'category': 'boolean'},
    'DECIMAL': {'type': 'number', 'size': None, 'category': 'decimal'},
    'NUMERIC': {'type': 'number', 'size': None, 'category': 'decimal'},
    'FLOAT': {'type': 'number', 'size': 8, 'category': 'float'},
    'REAL': {'type': 'number', 'size': 4, 'category': 'float'},
    'DOUBLE': {'type': 'number', 'size': 8, 'category': 'float'},
    'MONEY': {'type': 'number', 'size': 8, 'category': 'money'},
    'SMALLMONEY': {'type': 'number', 'size': 4, 'category': 'money'},

    # String types
    'VARCHAR': {'type': 'string', 'size': None, 'category': 'varchar'},
    'NVARCHAR': {'type': 'string', 'size': None, 'category': 'varchar'},
    'CHAR': {'type': 'string', 'size': None, 'category': 'char'},
    'NCHAR': {'type': 'string', 'size': None, 'category': 'char'},
    'TEXT': {'type': 'string', 'size': None, 'category': 'text'},
    'NTEXT': {'type': 'string', 'size': None, 'category': 'text'},
    'TINYTEXT': {'type': 'string', 'size': None, 'category': 'text'},
    'MEDIUMTEXT': {'type': 'string', 'size': None, 'category': 'text'},
    'LONGTEXT': {'type': 'string', 'size': None, 'category': 'text'},

    # Date types
    'DATETIME': {'type': 'date', 'size': 8, 'category': 'datetime'},
    'DATETIME2': {'type': 'date', 'size': None, 'category': 'datetime'},
    'SMALLDATETIME': {'type': 'date', 'size': 4, 'category': 'datetime'},
    'DATETIMEOFFSET': {'type': 'date', 'size': 10, 'category': 'datetime'},
    'DATE': {'type': 'date', 'size': 3, 'category': 'date'},
    'TIME': {'type': 'time', 'size': None, 'category': 'time'},
    'TIMESTAMP': {'type': 'binary', 'size': 8, 'category': 'timestamp'},

    # Binary types
    'BINARY': {'type': 'binary', 'size': None, 'category': 'binary'},
    'VARBINARY': {'type': 'binary', 'size': None, 'category': 'binary'},
    'IMAGE': {'type': 'binary', 'size': None, 'category': 'binary'},
    'BLOB': {'type': 'binary', 'size': None, 'category': 'binary'},
    'BYTEA': {'type': 'binary', 'size': None, 'category': 'binary'},

    # Special types
    'UNIQUEIDENTIFIER': {'type': 'guid', 'size': 16, 'category': 'guid'},
    'UUID': {'type': 'guid', 'size': 16, 'category': 'guid'},
    'XML': {'type': 'xml', 'size': None, 'category': 'xml'},
    'JSON': {'type': 'json', 'size': None, 'category': 'json'},
    'GEOGRAPHY': {'type': 'spatial', 'size': None, 'category': 'spatial'},
    'GEOMETRY': {'type': 'spatial', 'size': None, 'category': 'spatial'},
}

# 细分类别 -> 展示用的粗粒度类别
TYPE_CATEGORIES = {
    'integer': 'NUMERIC',
    'decimal': 'NUMERIC',
    'float': 'NUMERIC',
    'money': 'NUMERIC',
    'varchar': 'TEXT',
    'char': 'TEXT',
    'text': 'TEXT',
    'datetime': 'TEMPORAL',
    'date': 'TEMPORAL',
    'time': 'TEMPORAL',
    'boolean': 'BOOLEAN',
    'binary': 'BINARY',
    'guid': 'IDENTIFIER',
}


class ParsingErrorTypes:
    """Issue type tags reported in Schema.errors / Schema.warnings"""
    SYNTAX_ERROR = 'SYNTAX_ERROR'
    DUPLICATE_TABLE = 'DUPLICATE_TABLE'
    DUPLICATE_COLUMN = 'DUPLICATE_COLUMN'
    INVALID_COLUMN_DEFINITION = 'INVALID_COLUMN_DEFINITION'
    INVALID_TABLE_NAME = 'INVALID_TABLE_NAME'
    MISSING_REFERENCE = 'MISSING_REFERENCE'
    INVALID_CONSTRAINT = 'INVALID_CONSTRAINT'
    MISSING_COLUMN = 'MISSING_COLUMN'
    # warning level
    UNKNOWN_CONSTRAINT = 'UNKNOWN_CONSTRAINT'
    DUPLICATE_INDEX = 'DUPLICATE_INDEX'


class Cardinality:
    ONE_TO_ONE = 'ONE_TO_ONE'
    MANY_TO_ONE = 'MANY_TO_ONE'
    MANY_TO_MANY = 'MANY_TO_MANY'
    UNKNOWN = 'UNKNOWN'


VALIDATION_RULES = {
    'TABLE_NAME': re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$'),
    'MAX_TABLE_NAME_LENGTH': 128,
}
