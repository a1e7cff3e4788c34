"""
Text preprocessing and quote/paren aware scanning helpers
"""
import logging
from typing import List, Optional, Tuple

from .sql_patterns import WHITESPACE, SORT_SUFFIX, QUALIFIED_NAME

logger = logging.getLogger(__name__)

QUOTE_CHARS = ("'", '"', '`')


def strip_comments(sql: str) -> str:
    """
    Drop `-- ...` line comments and replace `/* ... */` block comments with a space.
    Comment markers inside quoted literals and identifiers are kept.
    """
    out = []
    in_quote = False
    quote_char = None
    i = 0
    length = len(sql)

    while i < length:
        char = sql[i]

        if in_quote:
            out.append(char)
            if char == quote_char and sql[i - 1] != '\\':
                in_quote = False
                quote_char = None
            i += 1
            continue

        if char in QUOTE_CHARS:
            in_quote = True
            quote_char = char
        elif sql.startswith('--', i):
            # 保留换行符，只去掉注释内容
            end = sql.find('\n', i)
            i = length if end == -1 else end
            continue
        elif sql.startswith('/*', i):
            end = sql.find('*/', i + 2)
            out.append(' ')
            i = length if end == -1 else end + 2
            continue

        out.append(char)
        i += 1

    return ''.join(out)


def preprocess_sql(sql: str) -> str:
    """
    Remove block and line comments, collapse whitespace and trim.

    Best effort: if normalisation fails the original text is returned.
    """
    try:
        return WHITESPACE.sub(' ', strip_comments(sql)).strip()
    except Exception as e:
        logger.error(f"Error preprocessing SQL, using original text: {e}")
        return sql


def _split_top_level(content: str, separator: str, keep_empty: bool) -> List[str]:
    """Split on `separator` outside quotes and parentheses"""
    parts = []
    current = []
    depth = 0
    in_quote = False
    quote_char = None

    for i, char in enumerate(content):
        # 处理引号
        if char in QUOTE_CHARS and (i == 0 or content[i - 1] != '\\'):
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = None

        # 不在引号内时处理括号和分隔符
        if not in_quote:
            if char == '(':
                depth += 1
            elif char == ')':
                # 多余的右括号不能吞掉后面的分隔符
                depth = max(depth - 1, 0)
            elif char == separator and depth == 0:
                parts.append(''.join(current).strip())
                current = []
                continue

        current.append(char)

    parts.append(''.join(current).strip())

    if keep_empty:
        return parts
    return [part for part in parts if part]


def split_statements(sql: str) -> List[str]:
    """Split a document into statements on top-level semicolons, dropping empty ones"""
    return _split_top_level(sql, ';', keep_empty=False)


def split_clauses(body: str) -> List[str]:
    """
    Split a CREATE TABLE body into clauses on top-level commas.

    Empty clauses between commas are kept so they can be reported;
    a blank body has no clauses at all.
    """
    if not body.strip():
        return []
    return _split_top_level(body, ',', keep_empty=True)


def extract_parenthesized(text: str, open_index: int) -> Optional[Tuple[str, int]]:
    """
    Return (inner_text, close_index) for the group opened at `open_index`,
    or None when the parentheses never balance.
    """
    if open_index >= len(text) or text[open_index] != '(':
        return None

    depth = 0
    in_quote = False
    quote_char = None
    for i in range(open_index, len(text)):
        char = text[i]
        if char in QUOTE_CHARS and (i == 0 or text[i - 1] != '\\'):
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = None
        if in_quote:
            continue
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return text[open_index + 1:i], i
    return None


def mask_quoted(text: str) -> str:
    """Blank out the inside of single-quoted literals, keeping every index in place"""
    masked = []
    in_literal = False
    for char in text:
        if char == "'":
            in_literal = not in_literal
            masked.append(char)
        elif in_literal:
            masked.append(' ')
        else:
            masked.append(char)
    return ''.join(masked)


def clean_identifier(identifier: Optional[str]) -> str:
    """Strip surrounding [] ' " ` from an identifier"""
    if not identifier:
        return ''
    identifier = identifier.strip()
    if len(identifier) >= 2 and (identifier[0], identifier[-1]) in (
            ('[', ']'), ("'", "'"), ('"', '"'), ('`', '`')):
        identifier = identifier[1:-1]
    return identifier.strip()


def clean_qualified_identifier(identifier: Optional[str]) -> str:
    """Clean an identifier and drop any schema qualifier (dbo.Users -> Users)"""
    if not identifier:
        return ''
    match = QUALIFIED_NAME.match(identifier.strip())
    if match:
        return clean_identifier(match.group(1))
    return clean_identifier(identifier)


def split_column_list(column_list: str) -> List[str]:
    """Split `a, b DESC, [c]` into cleaned column names"""
    columns = []
    for col in column_list.split(','):
        col = SORT_SUFFIX.sub('', col.strip())
        name = clean_identifier(col)
        if name:
            columns.append(name)
    return columns
